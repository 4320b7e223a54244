import json
from pathlib import Path

import pytest

from class_to_schema import SchemaTransformer, TransformerConfig

TEST_DATA = Path(__file__).parent / "test_data"
REF = "#/components/schemas/"


def ref(name):
    return {"$ref": f"{REF}{name}"}


def collect_refs(schema):
    """All $ref values in a rendered schema."""
    refs = []
    if isinstance(schema, dict):
        if "$ref" in schema:
            refs.append(schema["$ref"])
        for value in schema.values():
            refs.extend(collect_refs(value))
    elif isinstance(schema, list):
        for value in schema:
            refs.extend(collect_refs(value))
    return refs


@pytest.fixture
def transformer():
    transformer = SchemaTransformer.from_declaration_file(TEST_DATA / "circular.json")
    yield transformer
    transformer.dispose()


def schema_of(transformer, name):
    return transformer.transform(name).schema.to_dict()


class TestCircularReferences:
    """True cycles become $ref, repeated use is expanded"""

    def test_self_reference(self, transformer):
        result = transformer.transform("Org")

        assert result.name == "Org"
        assert result.warnings == []
        assert result.schema.to_dict() == {
            "type": "object",
            "properties": {
                "id": {"type": "number", "format": "double"},
                "parent": ref("Org"),
            },
            "required": ["id"],
        }

    def test_self_reference_through_array(self, transformer):
        schema = schema_of(transformer, "TreeNode")
        assert schema["properties"]["children"] == {"type": "array", "items": ref("TreeNode")}
        assert schema["required"] == ["value", "children"]

    def test_two_class_cycle(self, transformer):
        schema = schema_of(transformer, "Author")
        book = schema["properties"]["books"]["items"]

        assert book["type"] == "object"
        assert book["properties"]["author"] == ref("Author")
        assert collect_refs(schema) == [f"{REF}Author"]

    def test_three_class_cycle(self, transformer):
        schema = schema_of(transformer, "A3")
        c3 = schema["properties"]["b"]["properties"]["c"]

        assert c3["properties"]["a"] == ref("A3")
        assert c3["required"] == []
        assert collect_refs(schema) == [f"{REF}A3"]

    def test_four_class_cycle_through_array(self, transformer):
        schema = schema_of(transformer, "A4")
        d4 = schema["properties"]["b"]["properties"]["c"]["properties"]["d"]

        assert d4["properties"]["a"] == {"type": "array", "items": ref("A4")}
        assert collect_refs(schema) == [f"{REF}A4"]

    @pytest.mark.parametrize("name", ["B3", "C3", "B4", "C4", "D4"])
    def test_cycle_entered_anywhere_closes_on_entry(self, transformer, name):
        schema = schema_of(transformer, name)
        assert collect_refs(schema) == [f"{REF}{name}"]

    def test_diamond_reuse_is_expanded(self, transformer):
        schema = schema_of(transformer, "Root")
        leaf = {"type": "object", "properties": {"label": {"type": "string"}}, "required": ["label"]}

        assert schema["properties"]["left"] == leaf
        assert schema["properties"]["right"] == leaf
        assert schema["properties"]["others"] == {"type": "array", "items": leaf}
        assert collect_refs(schema) == []

    def test_siblings_sharing_a_cycle(self, transformer):
        schema = schema_of(transformer, "Company")
        person = {
            "type": "object",
            "properties": {"name": {"type": "string"}, "employer": ref("Company")},
            "required": ["name"],
        }

        assert schema["properties"]["ceo"] == person
        assert schema["properties"]["cto"] == person

    def test_cached_schema_is_not_reused_inside_its_own_cycle(self, transformer):
        transformer.transform("Company")
        schema = schema_of(transformer, "Person")

        company = schema["properties"]["employer"]
        assert company["properties"]["ceo"] == ref("Person")
        assert company["properties"]["cto"] == ref("Person")

    def test_custom_ref_prefix(self):
        config = TransformerConfig(ref_prefix="#/definitions/")
        transformer = SchemaTransformer.from_declaration_file(TEST_DATA / "circular.json", config)

        schema = schema_of(transformer, "Org")
        assert schema["properties"]["parent"] == {"$ref": "#/definitions/Org"}

    def test_output_is_stable_across_calls(self, transformer):
        names = ["Org", "TreeNode", "Author", "Book", "A3", "A4", "D4", "Root", "Company", "Person"]
        first = {name: json.dumps(schema_of(transformer, name)) for name in names}
        second = {name: json.dumps(schema_of(transformer, name)) for name in names}
        assert first == second

        transformer.clear_cache()
        third = {name: json.dumps(schema_of(transformer, name)) for name in reversed(names)}
        assert first == third

    def test_cached_output_matches_fresh_synthesis(self, transformer):
        warm = {}
        for name in ["Company", "Book", "C3", "Person", "Author", "A3"]:
            warm[name] = schema_of(transformer, name)

        for name, schema in warm.items():
            fresh = SchemaTransformer.from_declaration_file(TEST_DATA / "circular.json")
            assert schema_of(fresh, name) == schema
