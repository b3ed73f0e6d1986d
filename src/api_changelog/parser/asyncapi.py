"""AsyncAPI document normalizer.

Each channel yields up to two endpoints, one per ``subscribe``/``publish``
operation. Message payloads, channel parameters and servers are not mapped.
"""

from .base import ApiSpec, Endpoint, SpecType
from .openapi import as_mapping, parse_schema

OPERATIONS = (
    ("subscribe", "SUB", "SUBSCRIBE"),
    ("publish", "PUB", "PUBLISH"),
)


def normalize_asyncapi(doc: dict) -> ApiSpec:
    """Build an ApiSpec from a decoded AsyncAPI document."""
    info = as_mapping(doc.get("info"))
    channels = as_mapping(doc.get("channels"))
    components = as_mapping(doc.get("components"))

    endpoints = []
    for channel_name, channel in channels.items():
        for key, prefix, method in OPERATIONS:
            operation = as_mapping(channel).get(key)
            if not operation:
                continue
            operation = as_mapping(operation)
            endpoints.append(
                Endpoint(
                    id=f"{prefix}-{channel_name}",
                    path=str(channel_name),
                    method=method,
                    operation_id=operation.get("operationId"),
                    summary=operation.get("summary"),
                    description=operation.get("description"),
                    deprecated=bool(operation.get("deprecated")),
                    tags=_tag_names(operation.get("tags")),
                )
            )

    schemas = [
        parse_schema(str(name), as_mapping(definition))
        for name, definition in as_mapping(components.get("schemas")).items()
    ]

    return ApiSpec(
        name=str(info.get("title") or "Untitled AsyncAPI"),
        version=str(info.get("version") or "1.0.0"),
        type=SpecType.ASYNCAPI,
        endpoints=endpoints,
        schemas=schemas,
        raw=doc,
    )


def _tag_names(tags) -> list[str]:
    # AsyncAPI tags are objects ({name: ...}); plain strings are accepted too
    names = []
    for tag in tags or []:
        if isinstance(tag, dict):
            if "name" in tag:
                names.append(str(tag["name"]))
        else:
            names.append(str(tag))
    return names
