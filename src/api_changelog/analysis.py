"""Single-spec analysis: structural statistics and lint-style validation."""

from pydantic import BaseModel

from api_changelog.exceptions import ChangelogError
from api_changelog.parser.base import ApiSpec, SpecType
from api_changelog.parser.detect import detect_format
from api_changelog.parser.loader import parse_spec

DEFAULT_NAMES = ("Untitled API", "Untitled AsyncAPI")
DEFAULT_VERSION = "1.0.0"


class ApiStatistics(BaseModel):
    name: str
    version: str
    type: SpecType
    endpoints: int
    methods: dict[str, int]
    parameters: int
    schemas: int
    deprecated: int
    security_schemes: int


class ValidationReport(BaseModel):
    file: str
    valid: bool = True
    type: SpecType = SpecType.UNKNOWN
    errors: list[str] = []
    warnings: list[str] = []


def compute_statistics(spec: ApiSpec) -> ApiStatistics:
    methods: dict[str, int] = {}
    for endpoint in spec.endpoints:
        methods[endpoint.method] = methods.get(endpoint.method, 0) + 1

    return ApiStatistics(
        name=spec.name,
        version=spec.version,
        type=spec.type,
        endpoints=len(spec.endpoints),
        methods=methods,
        parameters=sum(len(e.parameters) for e in spec.endpoints),
        schemas=len(spec.schemas),
        deprecated=sum(1 for e in spec.endpoints if e.deprecated),
        security_schemes=len(spec.security),
    )


def validate_spec(content: str, filename: str, strict: bool = False) -> ValidationReport:
    """Check that a document parses and looks complete.

    Never raises for a bad document; problems are reported in the result.
    In strict mode every warning is promoted to an error.
    """
    try:
        spec_type = detect_format(content, filename)
    except ChangelogError as e:
        return ValidationReport(file=filename, valid=False, errors=[str(e)])

    if spec_type == SpecType.UNKNOWN:
        return ValidationReport(file=filename, valid=False, errors=["Unable to detect specification type"])

    try:
        spec = parse_spec(content, filename)
    except ChangelogError as e:
        return ValidationReport(file=filename, valid=False, type=spec_type, errors=[f"Parse error: {e}"])

    warnings = []
    if not spec.name or spec.name in DEFAULT_NAMES:
        warnings.append("API name not specified")
    if not spec.version or spec.version == DEFAULT_VERSION:
        warnings.append("API version not specified or using default")
    if not spec.endpoints:
        warnings.append("No endpoints defined")

    if strict:
        warnings.extend(_strict_warnings(spec))
        return ValidationReport(file=filename, valid=not warnings, type=spec_type, errors=warnings)

    return ValidationReport(file=filename, type=spec_type, warnings=warnings)


def _strict_warnings(spec: ApiSpec) -> list[str]:
    warnings = []
    for endpoint in spec.endpoints:
        if not endpoint.description and not endpoint.summary:
            warnings.append(f"Endpoint {endpoint.label} has no description")
        if not endpoint.responses:
            warnings.append(f"Endpoint {endpoint.label} has no response definitions")
        if endpoint.deprecated:
            warnings.append(f"Endpoint {endpoint.label} is deprecated")

    for schema in spec.schemas:
        if not schema.properties and schema.type == "object":
            warnings.append(f"Schema {schema.name} has no properties defined")
    return warnings
