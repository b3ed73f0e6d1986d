"""OpenAPI / Swagger document normalizer.

Normalizes OpenAPI 3.x and Swagger 2.0 documents into an ApiSpec.
"""

from .base import (
    ApiSpec,
    Endpoint,
    Parameter,
    RequestBody,
    Response,
    Schema,
    SchemaProperty,
    SecurityDefinition,
    SpecType,
)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "options", "head")


def normalize_openapi(doc: dict) -> ApiSpec:
    """Build an ApiSpec from a decoded OpenAPI/Swagger document."""
    info = as_mapping(doc.get("info"))
    components = as_mapping(doc.get("components"))

    endpoints = []
    for path, path_item in as_mapping(doc.get("paths")).items():
        for method, operation in as_mapping(path_item).items():
            if method not in HTTP_METHODS:
                continue
            endpoints.append(_parse_endpoint(str(path), str(method), as_mapping(operation)))

    schema_source = as_mapping(components.get("schemas")) or as_mapping(doc.get("definitions"))
    schemas = [parse_schema(str(name), as_mapping(definition)) for name, definition in schema_source.items()]

    scheme_source = as_mapping(components.get("securitySchemes")) or as_mapping(doc.get("securityDefinitions"))
    security = [
        SecurityDefinition(
            name=str(name),
            type=str(as_mapping(scheme).get("type") or "unknown"),
            description=as_mapping(scheme).get("description"),
        )
        for name, scheme in scheme_source.items()
    ]

    return ApiSpec(
        name=str(info.get("title") or "Untitled API"),
        version=str(info.get("version") or "1.0.0"),
        type=SpecType.OPENAPI,
        endpoints=endpoints,
        schemas=schemas,
        security=security,
        raw=doc,
    )


def parse_schema(name: str, schema: dict) -> Schema:
    """Normalize one named schema; shared with the AsyncAPI normalizer."""
    required = [str(r) for r in schema.get("required") or [] if isinstance(r, str)]
    properties = []
    for prop_name, prop in as_mapping(schema.get("properties")).items():
        prop = as_mapping(prop)
        properties.append(
            SchemaProperty(
                name=str(prop_name),
                type=str(prop.get("type") or "any"),
                required=str(prop_name) in required,
                description=prop.get("description"),
                format=prop.get("format"),
                enum_values=prop.get("enum"),
            )
        )

    return Schema(
        name=name,
        type=str(schema.get("type") or "object"),
        properties=properties,
        required=required,
        description=schema.get("description"),
    )


def _parse_endpoint(path: str, method: str, operation: dict) -> Endpoint:
    method = method.upper()
    return Endpoint(
        id=f"{method}-{path}",
        path=path,
        method=method,
        operation_id=operation.get("operationId"),
        summary=operation.get("summary"),
        description=operation.get("description"),
        parameters=_parse_parameters(operation.get("parameters") or []),
        request_body=_parse_request_body(operation),
        responses=_parse_responses(as_mapping(operation.get("responses"))),
        deprecated=bool(operation.get("deprecated")),
        tags=[str(t) for t in operation.get("tags") or []],
    )


def _parse_parameters(params: list) -> list[Parameter]:
    result = []
    for p in params:
        if not isinstance(p, dict):
            continue
        schema = as_mapping(p.get("schema"))
        # Swagger 2 puts type/default on the parameter itself
        default = schema.get("default")
        if default is None:
            default = p.get("default")

        result.append(
            Parameter(
                name=str(p.get("name") or ""),
                location=str(p.get("in") or "query"),
                type=str(schema.get("type") or p.get("type") or "string"),
                required=bool(p.get("required")),
                description=p.get("description"),
                default_value=default,
                schema_ref=schema.get("$ref"),
            )
        )
    return result


def _parse_request_body(operation: dict) -> RequestBody | None:
    if "requestBody" not in operation:
        return None
    body = as_mapping(operation["requestBody"])
    content = as_mapping(body.get("content"))
    return RequestBody(
        content_types=[str(ct) for ct in content],
        required=bool(body.get("required")),
        schema_ref=_extract_schema_ref(content),
        description=body.get("description"),
    )


def _parse_responses(responses: dict) -> list[Response]:
    result = []
    for status_code, resp in responses.items():
        resp = as_mapping(resp)
        content = as_mapping(resp.get("content"))
        result.append(
            Response(
                status_code=str(status_code),
                description=str(resp.get("description") or ""),
                content_type=next((str(ct) for ct in content), None),
                schema_ref=_extract_schema_ref(content),
            )
        )
    return result


def _extract_schema_ref(content: dict) -> str | None:
    """Return the first ``$ref`` found among ``content.*.schema``."""
    for media in content.values():
        ref = as_mapping(as_mapping(media).get("schema")).get("$ref")
        if ref:
            return str(ref)
    return None


def as_mapping(value) -> dict:
    """Return ``value`` if it is a mapping, else an empty dict."""
    return value if isinstance(value, dict) else {}
