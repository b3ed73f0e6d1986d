from api_changelog.diff.migration import to_breaking_change
from api_changelog.diff.models import (
    Change,
    ChangeCategory,
    ChangeType,
    RiskLevel,
    SemverBump,
    Severity,
)
from api_changelog.diff.risk import assess_risk, risk_level, risk_score, semver_recommendation


def _change(severity, change_type=ChangeType.MODIFIED, category=ChangeCategory.PARAMETER, path="GET /x"):
    return Change(type=change_type, category=category, severity=severity, path=path, description="d")


def _breaking(change_type=ChangeType.MODIFIED, category=ChangeCategory.PARAMETER, path="GET /x"):
    return to_breaking_change(_change(Severity.BREAKING, change_type, category, path))


class TestRiskScore:
    def test_no_changes(self):
        assert risk_score([], []) == 0

    def test_single_removed_endpoint(self):
        removed = _breaking(ChangeType.REMOVED, ChangeCategory.ENDPOINT)
        assert risk_score([removed], [removed]) == 100

    def test_average_of_impacts(self):
        first = _breaking(ChangeType.REMOVED, ChangeCategory.ENDPOINT)
        second = _breaking()
        # (100 + 50) / 200
        assert risk_score([first, second], [first, second]) == 75

    def test_rounds_half_up(self):
        changes = [
            _breaking(ChangeType.REMOVED, ChangeCategory.ENDPOINT),
            _breaking(),
            _breaking(path="GET /y"),
            _breaking(path="GET /z"),
            _breaking(path="GET /w"),
            _breaking(ChangeType.REMOVED, ChangeCategory.SECURITY),
        ]
        # 395 / 600 = 65.83
        assert risk_score(changes, changes) == 66

    def test_info_only_changes_score_zero(self):
        added = _change(Severity.INFO, ChangeType.ADDED)
        assert risk_score([], [added]) == 0

    def test_secondary_bonus(self):
        changes = [_change(Severity.DANGEROUS), _change(Severity.WARNING), _change(Severity.WARNING)]
        assert risk_score([], changes) == 9

    def test_secondary_bonus_capped(self):
        changes = [_change(Severity.DANGEROUS) for _ in range(10)]
        assert risk_score([], changes) == 20

    def test_capped_at_100(self):
        removed = _breaking(ChangeType.REMOVED, ChangeCategory.ENDPOINT)
        changes = [removed] + [_change(Severity.DANGEROUS) for _ in range(5)]
        assert risk_score([removed], changes) == 100

    def test_first_breaking_change_raises_score(self):
        warning = _change(Severity.WARNING)
        breaking = _breaking()
        assert risk_score([breaking], [warning, breaking]) > risk_score([], [warning])

    def test_equal_impact_breaking_changes_never_lower_score(self):
        all_changes = [_change(Severity.WARNING)]
        breaking = []
        previous = risk_score(breaking, all_changes)
        for i in range(5):
            b = _breaking(path=f"GET /p{i}")
            breaking.append(b)
            all_changes.append(b)
            current = risk_score(breaking, all_changes)
            assert current >= previous
            previous = current


class TestRiskLevel:
    def test_thresholds(self):
        assert risk_level(0) == RiskLevel.LOW
        assert risk_level(24) == RiskLevel.LOW
        assert risk_level(25) == RiskLevel.MEDIUM
        assert risk_level(49) == RiskLevel.MEDIUM
        assert risk_level(50) == RiskLevel.HIGH
        assert risk_level(74) == RiskLevel.HIGH
        assert risk_level(75) == RiskLevel.CRITICAL
        assert risk_level(100) == RiskLevel.CRITICAL


class TestSemverRecommendation:
    def test_major_when_breaking(self):
        breaking = _breaking()
        assert semver_recommendation([breaking], [breaking]) == SemverBump.MAJOR

    def test_minor_when_additions(self):
        added = _change(Severity.INFO, ChangeType.ADDED)
        assert semver_recommendation([], [added]) == SemverBump.MINOR

    def test_patch_otherwise(self):
        deprecated = _change(Severity.WARNING, ChangeType.DEPRECATED, ChangeCategory.ENDPOINT)
        assert semver_recommendation([], [deprecated]) == SemverBump.PATCH
        assert semver_recommendation([], []) == SemverBump.PATCH


class TestAssessRisk:
    def test_combines_all_three(self):
        removed = _breaking(ChangeType.REMOVED, ChangeCategory.ENDPOINT)
        risk = assess_risk([removed], [removed])
        assert risk.risk_score == 100
        assert risk.risk_level == RiskLevel.CRITICAL
        assert risk.semver_recommendation == SemverBump.MAJOR
