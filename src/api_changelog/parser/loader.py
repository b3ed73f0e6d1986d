"""Parse raw specification text into the canonical ApiSpec.

One normalizer per format, selected by the format detector. Any failure
inside a normalizer is re-raised as ParseError carrying the filename.
"""

import logging

from pydantic import ValidationError
import yaml

from api_changelog.exceptions import ParseError, UnknownSpecShapeError

from .asyncapi import normalize_asyncapi
from .base import ApiSpec, SpecType
from .detect import (
    classify_document,
    detect_format,
    file_extension,
    load_document,
)
from .graphql import parse_graphql
from .openapi import normalize_openapi
from .protobuf import parse_proto

logger = logging.getLogger(__name__)

DOCUMENT_NORMALIZERS = {
    SpecType.OPENAPI: normalize_openapi,
    SpecType.ASYNCAPI: normalize_asyncapi,
}

TEXT_NORMALIZERS = {
    SpecType.GRAPHQL: parse_graphql,
    SpecType.GRPC: parse_proto,
}


def parse_spec(content: str, filename: str) -> ApiSpec:
    """Parse specification text into an ApiSpec.

    ``filename`` selects the format by extension and prefixes error messages.

    Raises:
        UnsupportedFormatError: the extension is not one of the known formats.
        UnknownSpecShapeError: a YAML/JSON document is neither OpenAPI nor AsyncAPI.
        ParseError: the document is malformed.
    """
    spec_type = detect_format(content, filename)

    try:
        if spec_type in TEXT_NORMALIZERS:
            spec = TEXT_NORMALIZERS[spec_type](content)
        else:
            spec = _parse_document(content, filename)
    except ParseError:
        raise
    except (yaml.YAMLError, ValueError, ValidationError, TypeError) as e:
        raise ParseError(filename, e) from e

    logger.debug(
        "Parsed %s as %s: %d endpoints, %d schemas, %d security schemes",
        filename,
        spec.type.value,
        len(spec.endpoints),
        len(spec.schemas),
        len(spec.security),
    )
    return spec


def _parse_document(content: str, filename: str) -> ApiSpec:
    ext = file_extension(filename)
    doc = load_document(content, ext)
    spec_type = classify_document(doc)
    if spec_type not in DOCUMENT_NORMALIZERS:
        raise UnknownSpecShapeError(filename)
    return DOCUMENT_NORMALIZERS[spec_type](doc)
