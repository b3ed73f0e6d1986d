"""Canonical data models for parsed API specifications.

All normalizers (OpenAPI, AsyncAPI, GraphQL, Protobuf) convert their input
into these standard models so the comparator never sees a format-specific
structure.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CanonicalModel(BaseModel):
    """Immutable base for every model; serializes with camelCase keys."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SpecType(str, Enum):
    OPENAPI = "openapi"
    ASYNCAPI = "asyncapi"
    GRAPHQL = "graphql"
    GRPC = "grpc"
    UNKNOWN = "unknown"


class Parameter(CanonicalModel):
    """A single operation parameter. Identity is ``location:name``."""

    name: str
    location: str  # path / query / header / cookie / body
    type: str = "string"  # primitive type name, not a full schema
    required: bool = False
    description: str | None = None
    default_value: Any = None
    schema_ref: str | None = Field(default=None, alias="schema")

    @property
    def key(self) -> str:
        return f"{self.location}:{self.name}"


class RequestBody(CanonicalModel):
    content_types: list[str] = []
    required: bool = False
    schema_ref: str | None = Field(default=None, alias="schema")
    description: str | None = None


class Response(CanonicalModel):
    status_code: str  # "200", "404", "default", ...
    description: str = ""
    content_type: str | None = None
    schema_ref: str | None = Field(default=None, alias="schema")


class Endpoint(CanonicalModel):
    """A single operation: an HTTP route, a channel operation, a GraphQL field or an RPC."""

    id: str  # GET-/pets, SUB-user/signedup, Query-users, UserService-GetUser
    path: str
    method: str  # GET / POST / ... or SUBSCRIBE / PUBLISH / QUERY / MUTATION / RPC
    operation_id: str | None = None
    summary: str | None = None
    description: str | None = None
    parameters: list[Parameter] = []
    request_body: RequestBody | None = None
    responses: list[Response] = []
    deprecated: bool = False
    tags: list[str] = []

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


class SchemaProperty(CanonicalModel):
    name: str
    type: str
    required: bool = False
    description: str | None = None
    format: str | None = None
    enum_values: list[Any] | None = Field(default=None, alias="enum")


class Schema(CanonicalModel):
    """A named data type. ``required`` is kept separately from each property's flag."""

    name: str
    type: str = "object"
    properties: list[SchemaProperty] = []
    required: list[str] = []
    description: str | None = None


class SecurityDefinition(CanonicalModel):
    name: str
    type: str
    description: str | None = None


class ApiSpec(CanonicalModel):
    """Root of the canonical model, built once per parse call."""

    name: str
    version: str
    type: SpecType
    endpoints: list[Endpoint] = []
    schemas: list[Schema] = []
    security: list[SecurityDefinition] = []
    raw: Any = Field(default=None, exclude=True, repr=False)
