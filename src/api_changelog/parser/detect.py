"""Auto-detect the API specification format."""

import json

import yaml

from api_changelog.exceptions import UnsupportedFormatError

from .base import SpecType

GRAPHQL_EXTENSIONS = ("graphql", "gql")
PROTO_EXTENSIONS = ("proto",)
DOCUMENT_EXTENSIONS = ("yaml", "yml", "json")


def file_extension(filename: str) -> str:
    """Return the lower-cased text after the last dot, or '' when there is none."""
    parts = filename.split(".")
    return parts[-1].lower() if len(parts) > 1 else ""


def load_document(content: str, extension: str):
    """Decode a YAML or JSON document into a plain Python tree."""
    if extension == "json":
        return json.loads(content)
    return yaml.safe_load(content)


def classify_document(doc) -> SpecType:
    """Classify an already-decoded document by its marker keys."""
    if isinstance(doc, dict):
        if "openapi" in doc or "swagger" in doc:
            return SpecType.OPENAPI
        if "asyncapi" in doc:
            return SpecType.ASYNCAPI
    return SpecType.UNKNOWN


def detect_format(content: str, filename: str) -> SpecType:
    """Detect the format of an API specification.

    GraphQL and Protobuf are decided by extension alone. YAML/JSON documents
    are decoded and classified by their top-level keys; a document that does
    not decode is reported as ``unknown`` instead of raising.

    Raises UnsupportedFormatError for any other extension.
    """
    ext = file_extension(filename)

    if ext in GRAPHQL_EXTENSIONS:
        return SpecType.GRAPHQL
    if ext in PROTO_EXTENSIONS:
        return SpecType.GRPC
    if ext not in DOCUMENT_EXTENSIONS:
        raise UnsupportedFormatError(filename, ext)

    try:
        doc = load_document(content, ext)
    except (yaml.YAMLError, ValueError):
        return SpecType.UNKNOWN
    return classify_document(doc)
