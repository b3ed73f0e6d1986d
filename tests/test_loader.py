from pathlib import Path

import pytest

from api_changelog.exceptions import (
    EXIT_PARSE_ERROR,
    EXIT_UNSUPPORTED_FORMAT,
    ParseError,
    UnknownSpecShapeError,
    UnsupportedFormatError,
)
from api_changelog.parser.base import SpecType
from api_changelog.parser.loader import parse_spec

FIXTURES = Path(__file__).parent / "fixtures"


class TestParseSpec:
    @pytest.mark.parametrize(
        "name,spec_type",
        [
            ("petstore_v1.yaml", SpecType.OPENAPI),
            ("swagger_v2.json", SpecType.OPENAPI),
            ("events.asyncapi.yaml", SpecType.ASYNCAPI),
            ("schema.graphql", SpecType.GRAPHQL),
            ("service.proto", SpecType.GRPC),
        ],
    )
    def test_dispatch_by_format(self, name, spec_type):
        spec = parse_spec((FIXTURES / name).read_text(encoding="utf-8"), name)
        assert spec.type == spec_type
        assert spec.endpoints

    def test_raw_document_kept(self):
        spec = parse_spec("openapi: 3.0.0\ninfo: {title: T, version: '1'}\n", "t.yaml")
        assert spec.raw["openapi"] == "3.0.0"

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedFormatError) as exc:
            parse_spec("{}", "spec.txt")
        assert exc.value.exit_code == EXIT_UNSUPPORTED_FORMAT

    def test_unknown_shape(self):
        with pytest.raises(UnknownSpecShapeError) as exc:
            parse_spec("title: not an api\n", "other.yaml")
        assert exc.value.file == "other.yaml"
        assert exc.value.exit_code == EXIT_PARSE_ERROR

    def test_malformed_yaml_is_parse_error(self):
        with pytest.raises(ParseError) as exc:
            parse_spec("openapi: [unclosed\n", "broken.yaml")
        assert str(exc.value).startswith("Failed to parse spec file 'broken.yaml'")

    def test_unknown_shape_is_a_parse_error(self):
        with pytest.raises(ParseError):
            parse_spec('{"name": "x"}', "x.json")
