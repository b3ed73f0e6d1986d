"""Risk scoring: roll a change list up into a score, a tier and a semver bump."""

from api_changelog.diff.models import (
    BreakingChange,
    Change,
    ChangeType,
    RiskAssessment,
    RiskLevel,
    SemverBump,
    Severity,
)

MAX_SECONDARY_BONUS = 20
DANGEROUS_WEIGHT = 5
WARNING_WEIGHT = 2


def risk_score(breaking_changes: list[BreakingChange], all_changes: list[Change]) -> int:
    """Compute the 0-100 risk score.

    The breaking changes' impact scores are normalized against 100 per
    breaking change (at least 100), then dangerous and warning changes add
    a bonus capped at 20.
    """
    if not all_changes:
        return 0

    total_impact = sum(c.impact_score for c in breaking_changes)
    max_possible = max(len(breaking_changes) * 100, 100)
    base = int(total_impact * 100 / max_possible + 0.5)

    dangerous = sum(1 for c in all_changes if c.severity == Severity.DANGEROUS)
    warnings = sum(1 for c in all_changes if c.severity == Severity.WARNING)
    bonus = min(MAX_SECONDARY_BONUS, dangerous * DANGEROUS_WEIGHT + warnings * WARNING_WEIGHT)

    return min(100, base + bonus)


def risk_level(score: int) -> RiskLevel:
    if score >= 75:
        return RiskLevel.CRITICAL
    if score >= 50:
        return RiskLevel.HIGH
    if score >= 25:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def semver_recommendation(breaking_changes: list[BreakingChange], all_changes: list[Change]) -> SemverBump:
    if breaking_changes:
        return SemverBump.MAJOR
    if any(c.type == ChangeType.ADDED for c in all_changes):
        return SemverBump.MINOR
    return SemverBump.PATCH


def assess_risk(breaking_changes: list[BreakingChange], all_changes: list[Change]) -> RiskAssessment:
    score = risk_score(breaking_changes, all_changes)
    return RiskAssessment(
        risk_score=score,
        risk_level=risk_level(score),
        semver_recommendation=semver_recommendation(breaking_changes, all_changes),
    )
