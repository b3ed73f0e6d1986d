import pytest
from pydantic import ValidationError

from api_changelog.diff.models import BreakingChange, ChangeCategory, ChangeType, SemverBump, Severity
from api_changelog.parser.base import ApiSpec, Endpoint, Parameter, SchemaProperty, SpecType


class TestParameter:
    def test_defaults(self):
        p = Parameter(name="id", location="path")
        assert p.type == "string"
        assert p.required is False
        assert p.default_value is None

    def test_key_includes_location(self):
        assert Parameter(name="id", location="path").key == "path:id"
        assert Parameter(name="id", location="query").key != Parameter(name="id", location="path").key

    def test_schema_alias(self):
        p = Parameter(name="pet", location="body", schema="#/components/schemas/Pet")
        assert p.schema_ref == "#/components/schemas/Pet"


class TestImmutability:
    def test_cannot_assign_attribute(self):
        ep = Endpoint(id="GET-/pets", path="/pets", method="GET")
        with pytest.raises(ValidationError):
            ep.deprecated = True

    def test_model_copy_returns_new_value(self):
        ep = Endpoint(id="GET-/pets", path="/pets", method="GET")
        copy = ep.model_copy(update={"deprecated": True})
        assert copy.deprecated is True
        assert ep.deprecated is False


class TestSerialization:
    def test_camel_case_keys(self):
        ep = Endpoint(
            id="GET-/pets",
            path="/pets",
            method="GET",
            operation_id="listPets",
            parameters=[Parameter(name="limit", location="query", default_value=10)],
        )
        data = ep.model_dump(by_alias=True)
        assert data["operationId"] == "listPets"
        assert data["requestBody"] is None
        assert data["parameters"][0]["defaultValue"] == 10

    def test_enum_alias_on_property(self):
        prop = SchemaProperty(name="status", type="string", enum=["a", "b"])
        assert prop.enum_values == ["a", "b"]
        assert prop.model_dump(by_alias=True)["enum"] == ["a", "b"]

    def test_raw_is_not_serialized(self):
        spec = ApiSpec(name="x", version="1", type=SpecType.OPENAPI, raw={"big": "tree"})
        assert "raw" not in spec.model_dump()
        assert spec.model_dump(mode="json")["type"] == "openapi"


class TestBreakingChange:
    def test_impact_score_bounds(self):
        with pytest.raises(ValidationError):
            BreakingChange(
                type=ChangeType.REMOVED,
                category=ChangeCategory.ENDPOINT,
                severity=Severity.BREAKING,
                path="GET /pets",
                description="Endpoint removed: GET /pets",
                migration_suggestion="x",
                impact_score=120,
            )

    def test_severity_rank_order(self):
        ranks = [s.rank for s in (Severity.INFO, Severity.WARNING, Severity.DANGEROUS, Severity.BREAKING)]
        assert ranks == sorted(ranks)
        assert len(set(ranks)) == 4

    def test_semver_rank_order(self):
        assert SemverBump.PATCH.rank < SemverBump.MINOR.rank < SemverBump.MAJOR.rank
        assert max(SemverBump, key=lambda b: b.rank) == SemverBump.MAJOR
