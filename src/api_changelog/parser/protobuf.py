"""Protocol Buffer service definition normalizer.

Like the GraphQL normalizer this scans for patterns; streaming rpcs,
nested messages, oneofs and map fields are not recognized.
"""

import re

from .base import ApiSpec, Endpoint, Parameter, Response, Schema, SchemaProperty, SpecType

SERVICE_RE = re.compile(r"service\s+(\w+)\s*\{([^}]+)\}")
RPC_RE = re.compile(r"rpc\s+(\w+)\s*\((\w+)\)\s*returns\s*\((\w+)\)")
MESSAGE_RE = re.compile(r"message\s+(\w+)\s*\{([^}]+)\}")
FIELD_RE = re.compile(r"(?:(optional|required|repeated)\s+)?(\w+)\s+(\w+)\s*=\s*\d+")


def parse_proto(content: str) -> ApiSpec:
    """Build an ApiSpec from ``.proto`` text: rpcs become endpoints, messages schemas."""
    endpoints = []
    for service in SERVICE_RE.finditer(content):
        service_name, body = service.group(1), service.group(2)
        for method, request_type, response_type in RPC_RE.findall(body):
            endpoints.append(
                Endpoint(
                    id=f"{service_name}-{method}",
                    path=f"/{service_name}/{method}",
                    method="RPC",
                    operation_id=method,
                    parameters=[Parameter(name="request", location="body", type=request_type, required=True)],
                    responses=[Response(status_code="200", description=response_type)],
                    tags=[service_name],
                )
            )

    schemas = []
    for message in MESSAGE_RE.finditer(content):
        message_name, body = message.group(1), message.group(2)
        properties = [
            SchemaProperty(name=field_name, type=field_type, required=modifier == "required")
            for modifier, field_type, field_name in FIELD_RE.findall(body)
        ]
        schemas.append(
            Schema(
                name=message_name,
                type="message",
                properties=properties,
                required=[p.name for p in properties if p.required],
            )
        )

    return ApiSpec(
        name="Protocol Buffer Service",
        version="1.0.0",
        type=SpecType.GRPC,
        endpoints=endpoints,
        schemas=schemas,
        raw=content,
    )
