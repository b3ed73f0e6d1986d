"""Migration suggestions and impact scores for breaking changes."""

from api_changelog.diff.models import BreakingChange, Change, ChangeCategory, ChangeType

DEFAULT_SUGGESTION = "Review and update client code accordingly"

MIGRATION_SUGGESTIONS = {
    (ChangeCategory.ENDPOINT, ChangeType.REMOVED): "Remove all references to this endpoint from client code",
    (ChangeCategory.PARAMETER, ChangeType.REMOVED): "Remove this parameter from API calls",
    (ChangeCategory.PARAMETER, ChangeType.ADDED): "Add this required parameter to all API calls",
    (ChangeCategory.PARAMETER, ChangeType.MODIFIED): "Update API calls to handle the new parameter type/requirement",
    (ChangeCategory.REQUEST_BODY, ChangeType.ADDED): "Send a request body with every call to this endpoint",
    (ChangeCategory.REQUEST_BODY, ChangeType.REMOVED): "Switch requests to one of the remaining content types",
    (ChangeCategory.REQUEST_BODY, ChangeType.MODIFIED): "Always send a request body to this endpoint",
    (ChangeCategory.SCHEMA, ChangeType.REMOVED): "Remove references to this schema/property in client code",
    (ChangeCategory.SCHEMA_PROPERTY, ChangeType.REMOVED): "Remove references to this schema/property in client code",
    (ChangeCategory.SCHEMA, ChangeType.MODIFIED): "Update client code to handle the new type/requirement",
    (ChangeCategory.SCHEMA_PROPERTY, ChangeType.MODIFIED): "Update client code to handle the new type/requirement",
    (ChangeCategory.SECURITY, ChangeType.REMOVED): "Update authentication configuration",
    (ChangeCategory.SECURITY, ChangeType.ADDED): "Update authentication configuration",
}


def migration_suggestion(change: Change) -> str:
    return MIGRATION_SUGGESTIONS.get((change.category, change.type), DEFAULT_SUGGESTION)


def impact_score(change: Change) -> int:
    """Heuristic 0-100 weight of a breaking change."""
    score = 50
    if change.category == ChangeCategory.ENDPOINT:
        score += 30
    if change.type == ChangeType.REMOVED:
        score += 20
    if change.category == ChangeCategory.SECURITY:
        score += 25
    return min(100, score)


def to_breaking_change(change: Change) -> BreakingChange:
    return BreakingChange(
        **change.model_dump(),
        owner=change.owner,
        migration_suggestion=migration_suggestion(change),
        impact_score=impact_score(change),
    )
