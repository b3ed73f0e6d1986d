"""Breaking-change detection: parse, compare, score and package the result.

This is the entry point for front ends (CLI, CI action, editor plugins).
They hand over raw document text plus a filename and get back a
ComparisonResult; reading files and rendering reports is their job.
"""

import logging
from concurrent.futures import ThreadPoolExecutor

from pydantic import BaseModel

from api_changelog.diff.comparator import compare_specs, summarize
from api_changelog.diff.models import (
    ChangeType,
    ComparisonResult,
    RiskLevel,
    SemverBump,
    Severity,
)
from api_changelog.diff.risk import assess_risk, risk_level
from api_changelog.exceptions import ChangelogError
from api_changelog.parser.base import ApiSpec
from api_changelog.parser.loader import parse_spec

logger = logging.getLogger(__name__)


class DetectionOptions(BaseModel):
    """Narrowing applied to ``changes`` after comparison."""

    severity_threshold: Severity | None = None  # keep changes at or above this level
    include_deprecations: bool = True


class BreakingChangesSummary(BaseModel):
    count: int
    risk_level: RiskLevel
    recommendation: SemverBump
    changes: list[str]


class SpecPair(BaseModel):
    """Old and new text of one spec file, for batch detection."""

    filename: str
    old_content: str
    new_content: str


class FileComparison(BaseModel):
    filename: str
    result: ComparisonResult


class FileFailure(BaseModel):
    filename: str
    error: str


class BatchResult(BaseModel):
    results: list[FileComparison] = []
    failures: list[FileFailure] = []


def compare(old_spec: ApiSpec, new_spec: ApiSpec) -> ComparisonResult:
    """Compare two parsed specs and score the outcome, without any filtering."""
    diff = compare_specs(old_spec, new_spec)
    risk = assess_risk(diff.breaking_changes, diff.changes)
    return ComparisonResult(
        api_name=new_spec.name,
        from_version=old_spec.version,
        to_version=new_spec.version,
        changes=diff.changes,
        breaking_changes=diff.breaking_changes,
        total_changes=len(diff.changes),
        risk_score=risk.risk_score,
        risk_level=risk.risk_level,
        semver_recommendation=risk.semver_recommendation,
        summary=diff.summary,
    )


def detect(old_content: str, new_content: str, filename: str, options: DetectionOptions | None = None) -> ComparisonResult:
    """Detect changes between two versions of the same spec file.

    Both texts are parsed with the same ``filename``, so they share one format.

    Raises:
        UnsupportedFormatError, ParseError: either document cannot be parsed.
    """
    old_spec = parse_spec(old_content, filename)
    new_spec = parse_spec(new_content, filename)
    return detect_specs(old_spec, new_spec, options)


def detect_specs(old_spec: ApiSpec, new_spec: ApiSpec, options: DetectionOptions | None = None) -> ComparisonResult:
    """Same as :func:`detect` for specs that are already parsed."""
    options = options or DetectionOptions()
    result = compare(old_spec, new_spec)

    if options.severity_threshold is not None:
        result = filter_by_severity(result, options.severity_threshold)
    if not options.include_deprecations:
        result = exclude_deprecations(result)

    logger.info(
        "%s %s -> %s: %d changes, %d breaking, risk %d (%s), recommend %s",
        result.api_name,
        result.from_version,
        result.to_version,
        result.total_changes,
        len(result.breaking_changes),
        result.risk_score,
        result.risk_level.value,
        result.semver_recommendation.value,
    )
    return result


def filter_by_severity(result: ComparisonResult, threshold: Severity) -> ComparisonResult:
    """Return a copy keeping only changes at or above ``threshold``.

    ``breaking_changes`` and the risk figures are left as they are.
    """
    threshold = Severity(threshold)
    kept = [c for c in result.changes if c.severity.rank >= threshold.rank]
    return _with_changes(result, kept)


def exclude_deprecations(result: ComparisonResult) -> ComparisonResult:
    kept = [c for c in result.changes if c.type != ChangeType.DEPRECATED]
    return _with_changes(result, kept)


def _with_changes(result: ComparisonResult, changes: list) -> ComparisonResult:
    return result.model_copy(
        update={
            "changes": changes,
            "total_changes": len(changes),
            "summary": summarize(changes),
        }
    )


def has_breaking_changes(old_content: str, new_content: str, filename: str) -> bool:
    return len(detect(old_content, new_content, filename).breaking_changes) > 0


def breaking_changes_summary(old_content: str, new_content: str, filename: str) -> BreakingChangesSummary:
    result = detect(old_content, new_content, filename)
    return BreakingChangesSummary(
        count=len(result.breaking_changes),
        risk_level=result.risk_level,
        recommendation=result.semver_recommendation,
        changes=[c.description for c in result.breaking_changes],
    )


# --- Batch mode ---


def detect_batch(
    pairs: list[SpecPair],
    options: DetectionOptions | None = None,
    max_workers: int | None = None,
) -> BatchResult:
    """Run :func:`detect` for several spec files.

    Files are independent, so they run in a thread pool. Results keep the
    input order. A file that fails to parse is logged and reported in
    ``failures`` without stopping the others.
    """
    if not pairs:
        return BatchResult()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        outcomes = list(executor.map(lambda pair: _safe_detect(pair, options), pairs))

    results = []
    failures = []
    for pair, outcome in zip(pairs, outcomes):
        if isinstance(outcome, ComparisonResult):
            results.append(FileComparison(filename=pair.filename, result=outcome))
        else:
            failures.append(FileFailure(filename=pair.filename, error=outcome))
    return BatchResult(results=results, failures=failures)


def _safe_detect(pair: SpecPair, options: DetectionOptions | None) -> ComparisonResult | str:
    try:
        return detect(pair.old_content, pair.new_content, pair.filename, options)
    except ChangelogError as e:
        logger.warning("Failed to analyze %s: %s", pair.filename, e)
        return str(e)


def aggregate_results(results: list[ComparisonResult]) -> ComparisonResult:
    """Fold several comparison results into one.

    The risk score and semver recommendation are the highest of the inputs,
    so a severity filter applied to the inputs does not lower them. The
    level is recomputed from the score.
    """
    changes = [c for r in results for c in r.changes]
    breaking = [c for r in results for c in r.breaking_changes]
    score = max((r.risk_score for r in results), default=0)
    bump = max((r.semver_recommendation for r in results), key=lambda b: b.rank, default=SemverBump.PATCH)
    first = results[0] if results else None

    return ComparisonResult(
        api_name=first.api_name if first else "Unknown",
        from_version=first.from_version if first else "0.0.0",
        to_version=first.to_version if first else "0.0.0",
        changes=changes,
        breaking_changes=breaking,
        total_changes=len(changes),
        risk_score=score,
        risk_level=risk_level(score),
        semver_recommendation=bump,
        summary=summarize(changes),
    )
