"""CLI entry point for api-changelog."""

import json
import logging
import sys
from pathlib import Path

import click

from api_changelog.analysis import compute_statistics, validate_spec
from api_changelog.detector import (
    DetectionOptions,
    FileFailure,
    SpecPair,
    aggregate_results,
    detect_batch,
    detect_specs,
)
from api_changelog.diff.models import ComparisonResult, Severity
from api_changelog.exceptions import (
    EXIT_BREAKING_CHANGES,
    EXIT_GENERIC_FAILURE,
    ChangelogError,
    FormatMismatchError,
)
from api_changelog.parser.loader import parse_spec

logger = logging.getLogger(__name__)

SEVERITY_CHOICES = [s.value for s in Severity]


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _collect_pairs(old_dir: Path, new_dir: Path) -> tuple[list[SpecPair], list[FileFailure]]:
    """Pair files by relative path; files that cannot be read as text become failures."""
    pairs = []
    failures = []
    for new_file in sorted(p for p in new_dir.rglob("*") if p.is_file()):
        relative = new_file.relative_to(new_dir)
        old_file = old_dir / relative
        if not old_file.is_file():
            continue
        try:
            pairs.append(SpecPair(filename=str(relative), old_content=_read(old_file), new_content=_read(new_file)))
        except (UnicodeDecodeError, OSError) as e:
            logger.warning("Failed to read %s: %s", relative, e)
            failures.append(FileFailure(filename=str(relative), error=f"Failed to read file: {e}"))
    return pairs, failures


def _fail(exc: ChangelogError):
    click.echo(f"Error: {exc}", err=True)
    sys.exit(exc.exit_code)


def _echo_result(result: ComparisonResult) -> None:
    click.echo(f"{result.api_name}: {result.from_version} -> {result.to_version}")
    click.echo(f"  Changes: {result.total_changes}  Breaking: {len(result.breaking_changes)}")
    click.echo(f"  Risk: {result.risk_score}/100 ({result.risk_level.value})")
    click.echo(f"  Recommended bump: {result.semver_recommendation.value}")

    for change in result.changes:
        click.echo(f"  [{change.severity.value}] {change.type.value} {change.path}: {change.description}")

    if result.breaking_changes:
        click.echo("  Migration:")
        for change in result.breaking_changes:
            click.echo(f"    - {change.path}: {change.migration_suggestion} (impact {change.impact_score})")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """API Changelog: detect breaking changes between two versions of an API spec."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("old_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("new_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default="console", type=click.Choice(["console", "json"]), help="Output format.")
@click.option("--severity", default=None, envvar="API_CHANGELOG_SEVERITY", type=click.Choice(SEVERITY_CHOICES), help="Minimum severity to report.")
@click.option("--exclude-deprecations", is_flag=True, help="Hide deprecation notices.")
@click.option("--fail-on-breaking", is_flag=True, envvar="API_CHANGELOG_FAIL_ON_BREAKING", help="Exit non-zero when breaking changes are found.")
def compare(old_path: Path, new_path: Path, fmt: str, severity: str | None, exclude_deprecations: bool, fail_on_breaking: bool):
    """Compare two versions of an API specification."""
    options = DetectionOptions(severity_threshold=severity, include_deprecations=not exclude_deprecations)
    try:
        old_spec = parse_spec(_read(old_path), str(old_path))
        new_spec = parse_spec(_read(new_path), str(new_path))
    except ChangelogError as e:
        _fail(e)

    if old_spec.type != new_spec.type:
        _fail(FormatMismatchError(str(old_path), old_spec.type.value, str(new_path), new_spec.type.value))

    result = detect_specs(old_spec, new_spec, options)

    if fmt == "json":
        click.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        _echo_result(result)

    if fail_on_breaking and result.breaking_changes:
        click.echo(f"{len(result.breaking_changes)} breaking change(s) detected.", err=True)
        sys.exit(EXIT_BREAKING_CHANGES)


@main.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "fmt", default="console", type=click.Choice(["console", "json"]), help="Output format.")
def analyze(spec_path: Path, fmt: str):
    """Show the structure of a single API specification."""
    try:
        spec = parse_spec(_read(spec_path), str(spec_path))
    except ChangelogError as e:
        _fail(e)

    stats = compute_statistics(spec)
    if fmt == "json":
        click.echo(stats.model_dump_json(indent=2))
        return

    click.echo(f"{stats.name} (version {stats.version}, {stats.type.value})")
    click.echo(f"  Endpoints:        {stats.endpoints}")
    for method, count in sorted(stats.methods.items()):
        click.echo(f"    {method:<12} {count}")
    click.echo(f"  Parameters:       {stats.parameters}")
    click.echo(f"  Schemas:          {stats.schemas}")
    click.echo(f"  Deprecated:       {stats.deprecated}")
    click.echo(f"  Security Schemes: {stats.security_schemes}")


@main.command()
@click.argument("spec_paths", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--strict", is_flag=True, help="Treat warnings as errors.")
@click.option("--format", "fmt", default="console", type=click.Choice(["console", "json"]), help="Output format.")
def validate(spec_paths: tuple[Path, ...], strict: bool, fmt: str):
    """Validate one or more API specification files."""
    reports = [validate_spec(_read(p), str(p), strict=strict) for p in spec_paths]

    if fmt == "json":
        click.echo(json.dumps([r.model_dump(mode="json") for r in reports], indent=2))
    else:
        for report in reports:
            status = "VALID" if report.valid else "INVALID"
            click.echo(f"{report.file} [{report.type.value.upper()}] {status}")
            for error in report.errors:
                click.echo(f"    x {error}")
            for warning in report.warnings:
                click.echo(f"    ! {warning}")

    invalid = sum(1 for r in reports if not r.valid)
    if invalid:
        click.echo(f"{invalid} specification(s) failed validation", err=True)
        sys.exit(EXIT_GENERIC_FAILURE)


@main.command()
@click.argument("old_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("new_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--format", "fmt", default="console", type=click.Choice(["console", "json"]), help="Output format.")
@click.option("--severity", default=None, envvar="API_CHANGELOG_SEVERITY", type=click.Choice(SEVERITY_CHOICES), help="Minimum severity to report.")
@click.option("--fail-on-breaking", is_flag=True, envvar="API_CHANGELOG_FAIL_ON_BREAKING", help="Exit non-zero when breaking changes are found.")
def batch(old_dir: Path, new_dir: Path, fmt: str, severity: str | None, fail_on_breaking: bool):
    """Compare every spec present in both OLD_DIR and NEW_DIR."""
    pairs, failures = _collect_pairs(old_dir, new_dir)
    outcome = detect_batch(pairs, DetectionOptions(severity_threshold=severity))
    failures = failures + outcome.failures
    aggregate = aggregate_results([r.result for r in outcome.results])

    if fmt == "json":
        payload = {
            "results": [
                {"filename": r.filename, "result": r.result.model_dump(mode="json", by_alias=True)}
                for r in outcome.results
            ],
            "failures": [f.model_dump() for f in failures],
            "aggregate": aggregate.model_dump(mode="json", by_alias=True),
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        for r in outcome.results:
            click.echo(f"== {r.filename}")
            _echo_result(r.result)
        for f in failures:
            click.echo(f"== {f.filename}: FAILED ({f.error})")
        click.echo(f"Overall risk: {aggregate.risk_score}/100 ({aggregate.risk_level.value}), recommend {aggregate.semver_recommendation.value}")

    if fail_on_breaking and aggregate.breaking_changes:
        sys.exit(EXIT_BREAKING_CHANGES)
