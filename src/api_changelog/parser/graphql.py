"""GraphQL SDL normalizer.

Pattern extraction only, not a grammar: nested braces, comments and
multi-line argument lists are not understood.
"""

import re

from .base import ApiSpec, Endpoint, Response, Schema, SchemaProperty, SpecType

ROOT_TYPES = ("Query", "Mutation", "Subscription")

TYPE_RE = re.compile(r"type\s+(\w+)\s*(?:implements\s+\w+)?\s*\{([^}]+)\}")
OPERATION_RE = re.compile(r"(\w+)(?:\([^)]*\))?\s*:\s*(\[?\w+!?\]?!?)")
FIELD_RE = re.compile(r"(\w+)\s*:\s*(\[?\w+!?\]?!?)")


def parse_graphql(content: str) -> ApiSpec:
    """Build an ApiSpec from GraphQL SDL text.

    Fields of Query/Mutation/Subscription become endpoints; every other
    ``type`` block becomes a schema whose ``!``-suffixed fields are required.
    """
    endpoints = []
    schemas = []

    for match in TYPE_RE.finditer(content):
        type_name, body = match.group(1), match.group(2)

        if type_name in ROOT_TYPES:
            for field_name, return_type in OPERATION_RE.findall(body):
                endpoints.append(
                    Endpoint(
                        id=f"{type_name}-{field_name}",
                        path=field_name,
                        method=type_name.upper(),
                        operation_id=field_name,
                        responses=[Response(status_code="200", description=return_type)],
                        tags=[type_name],
                    )
                )
            continue

        properties = [
            SchemaProperty(name=name, type=type_token, required=type_token.endswith("!"))
            for name, type_token in FIELD_RE.findall(body)
        ]
        schemas.append(
            Schema(
                name=type_name,
                type="object",
                properties=properties,
                required=[p.name for p in properties if p.required],
            )
        )

    return ApiSpec(
        name="GraphQL Schema",
        version="1.0.0",
        type=SpecType.GRAPHQL,
        endpoints=endpoints,
        schemas=schemas,
        raw=content,
    )
