"""Structural comparison of two ApiSpec values.

Each collection (endpoints, schemas, security schemes, and inside an
endpoint its parameters and responses) is keyed by its identity, then
split into removed, added and common keys. Common keys get a detail
comparison. Nothing here raises or mutates its inputs.
"""

import json
import logging

from api_changelog.diff.migration import to_breaking_change
from api_changelog.diff.models import (
    Change,
    ChangeCategory,
    ChangeType,
    ComparisonSummary,
    Severity,
    SpecDiff,
)
from api_changelog.parser.base import (
    ApiSpec,
    Endpoint,
    Parameter,
    RequestBody,
    Response,
    Schema,
    SecurityDefinition,
)

logger = logging.getLogger(__name__)

LOCATOR_SEPARATOR = " -> "
SCHEMA_PREFIX = "#/components/schemas/"
SECURITY_PREFIX = "#/components/securitySchemes/"


def compare_specs(old: ApiSpec, new: ApiSpec) -> SpecDiff:
    """Compare two specs and classify every difference."""
    changes = [
        *compare_endpoints(old.endpoints, new.endpoints),
        *compare_schemas(old.schemas, new.schemas),
        *compare_security(old.security, new.security),
    ]
    breaking = [to_breaking_change(c) for c in changes if c.severity == Severity.BREAKING]

    logger.debug("Compared %s %s -> %s: %d changes, %d breaking", new.name, old.version, new.version, len(changes), len(breaking))
    return SpecDiff(changes=changes, breaking_changes=breaking, summary=summarize(changes))


def _keyed(items, key) -> dict:
    return {key(item): item for item in items}


# --- Endpoints ---


def compare_endpoints(old_endpoints: list[Endpoint], new_endpoints: list[Endpoint]) -> list[Change]:
    old_map = _keyed(old_endpoints, lambda e: e.id)
    new_map = _keyed(new_endpoints, lambda e: e.id)
    changes = []

    for key, endpoint in old_map.items():
        if key not in new_map:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.ENDPOINT,
                    severity=Severity.BREAKING,
                    path=endpoint.label,
                    description=f"Endpoint removed: {endpoint.label}",
                    old_value=key,
                )
            )

    for key, endpoint in new_map.items():
        if key not in old_map:
            changes.append(
                Change(
                    type=ChangeType.ADDED,
                    category=ChangeCategory.ENDPOINT,
                    severity=Severity.INFO,
                    path=endpoint.label,
                    description=f"New endpoint: {endpoint.label}",
                    new_value=key,
                )
            )

    for key, endpoint in new_map.items():
        if key in old_map:
            changes.extend(compare_endpoint_details(old_map[key], endpoint))

    return changes


def compare_endpoint_details(old: Endpoint, new: Endpoint) -> list[Change]:
    base = new.label
    changes = []

    if not old.deprecated and new.deprecated:
        changes.append(
            Change(
                type=ChangeType.DEPRECATED,
                category=ChangeCategory.ENDPOINT,
                severity=Severity.WARNING,
                path=base,
                owner=base,
                description=f"Endpoint deprecated: {base}",
            )
        )

    changes.extend(compare_parameters(old.parameters, new.parameters, base))
    changes.extend(compare_request_body(old.request_body, new.request_body, base))
    changes.extend(compare_responses(old.responses, new.responses, base))
    return changes


# --- Parameters ---


def compare_parameters(old_params: list[Parameter], new_params: list[Parameter], base: str) -> list[Change]:
    old_map = _keyed(old_params, lambda p: p.key)
    new_map = _keyed(new_params, lambda p: p.key)
    changes = []

    for key, param in old_map.items():
        if key not in new_map:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.PARAMETER,
                    severity=Severity.BREAKING if param.required else Severity.WARNING,
                    path=f"{base}{LOCATOR_SEPARATOR}{key}",
                    owner=base,
                    description=f"Parameter removed: {param.name} ({param.location})",
                    old_value=_param_json(param),
                )
            )

    for key, param in new_map.items():
        if key not in old_map:
            qualifier = "required " if param.required else ""
            changes.append(
                Change(
                    type=ChangeType.ADDED,
                    category=ChangeCategory.PARAMETER,
                    severity=Severity.BREAKING if param.required else Severity.INFO,
                    path=f"{base}{LOCATOR_SEPARATOR}{key}",
                    owner=base,
                    description=f"New {qualifier}parameter: {param.name} ({param.location})",
                    new_value=_param_json(param),
                )
            )

    for key, param in new_map.items():
        if key in old_map:
            changes.extend(compare_parameter_details(old_map[key], param, base))

    return changes


def compare_parameter_details(old: Parameter, new: Parameter, base: str) -> list[Change]:
    path = f"{base}{LOCATOR_SEPARATOR}{new.key}"
    changes = []

    if not old.required and new.required:
        changes.append(
            Change(
                type=ChangeType.MODIFIED,
                category=ChangeCategory.PARAMETER,
                severity=Severity.BREAKING,
                path=path,
                owner=base,
                description=f"Parameter is now required: {new.name}",
                old_value="optional",
                new_value="required",
            )
        )

    if old.type != new.type:
        changes.append(
            Change(
                type=ChangeType.MODIFIED,
                category=ChangeCategory.PARAMETER,
                severity=Severity.BREAKING,
                path=path,
                owner=base,
                description=f"Parameter type changed: {old.type} -> {new.type}",
                old_value=old.type,
                new_value=new.type,
            )
        )

    return changes


def _param_json(param: Parameter) -> str:
    return json.dumps(param.model_dump(mode="json", by_alias=True, exclude_none=True))


# --- Request bodies and responses ---


def compare_request_body(old: RequestBody | None, new: RequestBody | None, base: str) -> list[Change]:
    path = f"{base}{LOCATOR_SEPARATOR}requestBody"

    if old is None and new is None:
        return []

    if old is None:
        return [
            Change(
                type=ChangeType.ADDED,
                category=ChangeCategory.REQUEST_BODY,
                severity=Severity.BREAKING if new.required else Severity.INFO,
                path=path,
                owner=base,
                description="Request body required" if new.required else "Request body added",
            )
        ]

    if new is None:
        return [
            Change(
                type=ChangeType.REMOVED,
                category=ChangeCategory.REQUEST_BODY,
                severity=Severity.INFO,
                path=path,
                owner=base,
                description="Request body removed",
            )
        ]

    changes = []
    if not old.required and new.required:
        changes.append(
            Change(
                type=ChangeType.MODIFIED,
                category=ChangeCategory.REQUEST_BODY,
                severity=Severity.BREAKING,
                path=path,
                owner=base,
                description="Request body is now required",
                old_value="optional",
                new_value="required",
            )
        )

    for content_type in old.content_types:
        if content_type not in new.content_types:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.REQUEST_BODY,
                    severity=Severity.BREAKING,
                    path=path,
                    owner=base,
                    description=f"Content type removed: {content_type}",
                    old_value=content_type,
                )
            )

    return changes


def compare_responses(old_responses: list[Response], new_responses: list[Response], base: str) -> list[Change]:
    old_map = _keyed(old_responses, lambda r: r.status_code)
    new_map = _keyed(new_responses, lambda r: r.status_code)
    changes = []

    for code in old_map:
        if code not in new_map:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.RESPONSE,
                    severity=Severity.WARNING,
                    path=f"{base}{LOCATOR_SEPARATOR}response:{code}",
                    owner=base,
                    description=f"Response removed: {code}",
                    old_value=code,
                )
            )

    for code, response in new_map.items():
        if code not in old_map:
            changes.append(
                Change(
                    type=ChangeType.ADDED,
                    category=ChangeCategory.RESPONSE,
                    severity=Severity.INFO,
                    path=f"{base}{LOCATOR_SEPARATOR}response:{code}",
                    owner=base,
                    description=f"New response: {code} - {response.description}",
                    new_value=code,
                )
            )

    return changes


# --- Schemas ---


def compare_schemas(old_schemas: list[Schema], new_schemas: list[Schema]) -> list[Change]:
    old_map = _keyed(old_schemas, lambda s: s.name)
    new_map = _keyed(new_schemas, lambda s: s.name)
    changes = []

    for name in old_map:
        if name not in new_map:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.SCHEMA,
                    severity=Severity.DANGEROUS,
                    path=f"{SCHEMA_PREFIX}{name}",
                    description=f"Schema removed: {name}",
                    old_value=name,
                )
            )

    for name in new_map:
        if name not in old_map:
            changes.append(
                Change(
                    type=ChangeType.ADDED,
                    category=ChangeCategory.SCHEMA,
                    severity=Severity.INFO,
                    path=f"{SCHEMA_PREFIX}{name}",
                    description=f"New schema: {name}",
                    new_value=name,
                )
            )

    for name, schema in new_map.items():
        if name in old_map:
            changes.extend(compare_schema_details(old_map[name], schema))

    return changes


def compare_schema_details(old: Schema, new: Schema) -> list[Change]:
    base = f"{SCHEMA_PREFIX}{new.name}"
    old_props = _keyed(old.properties, lambda p: p.name)
    new_props = _keyed(new.properties, lambda p: p.name)
    changes = []

    for name in old_props:
        if name not in new_props:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.SCHEMA_PROPERTY,
                    severity=Severity.DANGEROUS,
                    path=f"{base}/{name}",
                    owner=new.name,
                    description=f"Property removed from schema: {name}",
                    old_value=name,
                )
            )

    for name in new_props:
        if name not in old_props:
            required = name in new.required
            changes.append(
                Change(
                    type=ChangeType.ADDED,
                    category=ChangeCategory.SCHEMA_PROPERTY,
                    severity=Severity.WARNING if required else Severity.INFO,
                    path=f"{base}/{name}",
                    owner=new.name,
                    description=f"New property in schema: {name}{' (required)' if required else ''}",
                    new_value=name,
                )
            )

    for name, prop in new_props.items():
        if name not in old_props:
            continue
        old_prop = old_props[name]

        if old_prop.type != prop.type:
            changes.append(
                Change(
                    type=ChangeType.MODIFIED,
                    category=ChangeCategory.SCHEMA_PROPERTY,
                    severity=Severity.BREAKING,
                    path=f"{base}/{name}",
                    owner=new.name,
                    description=f"Property type changed: {old_prop.type} -> {prop.type}",
                    old_value=old_prop.type,
                    new_value=prop.type,
                )
            )

        if name not in old.required and name in new.required:
            changes.append(
                Change(
                    type=ChangeType.MODIFIED,
                    category=ChangeCategory.SCHEMA_PROPERTY,
                    severity=Severity.BREAKING,
                    path=f"{base}/{name}",
                    owner=new.name,
                    description=f"Property is now required: {name}",
                    old_value="optional",
                    new_value="required",
                )
            )

    return changes


# --- Security ---


def compare_security(old_security: list[SecurityDefinition], new_security: list[SecurityDefinition]) -> list[Change]:
    old_map = _keyed(old_security, lambda s: s.name)
    new_map = _keyed(new_security, lambda s: s.name)
    changes = []

    for name in old_map:
        if name not in new_map:
            changes.append(
                Change(
                    type=ChangeType.REMOVED,
                    category=ChangeCategory.SECURITY,
                    severity=Severity.BREAKING,
                    path=f"{SECURITY_PREFIX}{name}",
                    description=f"Security scheme removed: {name}",
                    old_value=name,
                )
            )

    for name in new_map:
        if name not in old_map:
            changes.append(
                Change(
                    type=ChangeType.ADDED,
                    category=ChangeCategory.SECURITY,
                    severity=Severity.INFO,
                    path=f"{SECURITY_PREFIX}{name}",
                    description=f"New security scheme: {name}",
                    new_value=name,
                )
            )

    return changes


# --- Summary ---


def summarize(changes: list[Change]) -> ComparisonSummary:
    """Derive the per-category counters from a change list.

    An endpoint (or schema, or parameter) counts as modified once, however
    many detail changes it has. Detail changes are grouped by their
    ``owner``; a change without one counts under its own locator.
    """
    counts = {}
    modified_endpoints = set()
    modified_schemas = set()
    modified_params = set()

    def bump(field):
        counts[field] = counts.get(field, 0) + 1

    for c in changes:
        if c.category == ChangeCategory.ENDPOINT:
            if c.type == ChangeType.ADDED:
                bump("endpoints_added")
            elif c.type == ChangeType.REMOVED:
                bump("endpoints_removed")
            elif c.type == ChangeType.DEPRECATED:
                bump("endpoints_deprecated")
                modified_endpoints.add(c.owner or c.path)
        elif c.category in (ChangeCategory.PARAMETER, ChangeCategory.REQUEST_BODY, ChangeCategory.RESPONSE):
            modified_endpoints.add(c.owner or c.path)
            if c.category == ChangeCategory.PARAMETER:
                if c.type == ChangeType.ADDED:
                    bump("parameters_added")
                elif c.type == ChangeType.REMOVED:
                    bump("parameters_removed")
                else:
                    modified_params.add(c.path)
        elif c.category == ChangeCategory.SCHEMA:
            if c.type == ChangeType.ADDED:
                bump("schemas_added")
            elif c.type == ChangeType.REMOVED:
                bump("schemas_removed")
        elif c.category == ChangeCategory.SCHEMA_PROPERTY:
            modified_schemas.add(c.owner or c.path)
        elif c.category == ChangeCategory.SECURITY:
            if c.type == ChangeType.ADDED:
                bump("security_added")
            elif c.type == ChangeType.REMOVED:
                bump("security_removed")

    return ComparisonSummary(
        **counts,
        endpoints_modified=len(modified_endpoints),
        schemas_modified=len(modified_schemas),
        parameters_modified=len(modified_params),
    )
