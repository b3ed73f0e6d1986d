"""Models produced by the comparator and risk scorer."""

from enum import Enum

from pydantic import Field

from api_changelog.parser.base import CanonicalModel


class ChangeType(str, Enum):
    ADDED = "ADDED"
    MODIFIED = "MODIFIED"
    REMOVED = "REMOVED"
    DEPRECATED = "DEPRECATED"


class ChangeCategory(str, Enum):
    ENDPOINT = "ENDPOINT"
    PARAMETER = "PARAMETER"
    REQUEST_BODY = "REQUEST_BODY"
    RESPONSE = "RESPONSE"
    SCHEMA = "SCHEMA"
    SCHEMA_PROPERTY = "SCHEMA_PROPERTY"
    SECURITY = "SECURITY"


class Severity(str, Enum):
    BREAKING = "BREAKING"
    DANGEROUS = "DANGEROUS"
    WARNING = "WARNING"
    INFO = "INFO"

    @property
    def rank(self) -> int:
        return SEVERITY_ORDER[self]


SEVERITY_ORDER = {
    Severity.INFO: 0,
    Severity.WARNING: 1,
    Severity.DANGEROUS: 2,
    Severity.BREAKING: 3,
}


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class SemverBump(str, Enum):
    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PATCH = "PATCH"

    @property
    def rank(self) -> int:
        return SEMVER_ORDER[self]


SEMVER_ORDER = {
    SemverBump.PATCH: 0,
    SemverBump.MINOR: 1,
    SemverBump.MAJOR: 2,
}


class Change(CanonicalModel):
    type: ChangeType
    category: ChangeCategory
    severity: Severity
    path: str  # human-readable locator, e.g. "GET /pets -> query:limit"
    description: str
    old_value: str | None = None
    new_value: str | None = None
    # endpoint label or schema name a detail change belongs to; not serialized
    owner: str | None = Field(default=None, exclude=True, repr=False)


class BreakingChange(Change):
    migration_suggestion: str
    impact_score: int = Field(ge=0, le=100)


class ComparisonSummary(CanonicalModel):
    endpoints_added: int = 0
    endpoints_removed: int = 0
    endpoints_modified: int = 0
    endpoints_deprecated: int = 0
    schemas_added: int = 0
    schemas_removed: int = 0
    schemas_modified: int = 0
    parameters_added: int = 0
    parameters_removed: int = 0
    parameters_modified: int = 0
    security_added: int = 0
    security_removed: int = 0


class SpecDiff(CanonicalModel):
    """Raw comparator output, before risk scoring."""

    changes: list[Change] = []
    breaking_changes: list[BreakingChange] = []
    summary: ComparisonSummary = ComparisonSummary()


class RiskAssessment(CanonicalModel):
    risk_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    semver_recommendation: SemverBump


class ComparisonResult(CanonicalModel):
    """Everything known about the difference between two versions of one API.

    ``changes`` is ordered endpoints, then schemas, then security.
    ``breaking_changes`` is always the complete BREAKING subset, even when
    ``changes`` has been narrowed by a severity filter.
    """

    api_name: str
    from_version: str
    to_version: str
    changes: list[Change] = []
    breaking_changes: list[BreakingChange] = []
    total_changes: int = 0
    risk_score: int = Field(default=0, ge=0, le=100)
    risk_level: RiskLevel = RiskLevel.LOW
    semver_recommendation: SemverBump = SemverBump.PATCH
    summary: ComparisonSummary = ComparisonSummary()
