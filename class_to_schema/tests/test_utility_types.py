from pathlib import Path

import pytest

from class_to_schema import SchemaTransformer

TEST_DATA = Path(__file__).parent / "test_data"

USER_PROPERTIES = ["id", "createdAt", "name", "email", "nickname"]


@pytest.fixture(scope="module")
def profile():
    transformer = SchemaTransformer.from_declaration_file(TEST_DATA / "generics.json")
    schema = transformer.transform("Profile").schema.to_dict()
    transformer.dispose()
    return schema["properties"]


@pytest.fixture(scope="module")
def user():
    transformer = SchemaTransformer.from_declaration_file(TEST_DATA / "generics.json")
    return transformer.transform("User").schema.to_dict()


class TestUtilityTypes:
    """Partial, Required, Pick, Omit, Record and friends"""

    def test_user_shape(self, user):
        assert list(user["properties"]) == USER_PROPERTIES
        assert user["required"] == ["id", "createdAt", "name", "email"]
        assert user["properties"]["id"] == {"type": "number", "format": "double"}
        assert user["properties"]["email"] == {"type": "string", "format": "email"}

    def test_partial_clears_required(self, profile, user):
        assert profile["user"]["required"] == []
        assert profile["user"]["properties"] == user["properties"]

    def test_required_lists_every_property(self, profile):
        assert profile["strict"]["required"] == USER_PROPERTIES

    def test_pick(self, profile):
        assert list(profile["summary"]["properties"]) == ["id", "name"]
        assert profile["summary"]["required"] == ["id", "name"]

    def test_omit(self, profile):
        assert list(profile["publicUser"]["properties"]) == ["id", "createdAt", "name", "nickname"]
        assert profile["publicUser"]["required"] == ["id", "createdAt", "name"]

    def test_readonly_is_identity(self, profile, user):
        assert profile["frozen"] == user

    def test_nested_utilities_compose(self, profile):
        assert list(profile["draft"]["properties"]) == ["email", "nickname"]
        assert profile["draft"]["required"] == []

    def test_open_record(self, profile):
        assert profile["scores"] == {
            "type": "object",
            "properties": {},
            "required": [],
            "additionalProperties": {"type": "number", "format": "double"},
        }

    def test_keyed_record(self, profile):
        assert profile["flags"] == {
            "type": "object",
            "properties": {"a": {"type": "boolean"}, "b": {"type": "boolean"}},
            "required": ["a", "b"],
        }

    def test_open_object(self, profile):
        assert profile["meta"] == {"type": "object", "properties": {}, "additionalProperties": True}

    def test_utility_on_primitive_is_unchanged(self, profile):
        assert profile["names"] == {"type": "string"}

    def test_utilities_do_not_leak_into_cache(self):
        transformer = SchemaTransformer.from_declaration_file(TEST_DATA / "generics.json")
        before = transformer.transform("User").schema.to_dict()
        transformer.transform("Profile")
        assert transformer.transform("User").schema.to_dict() == before


class TestGenerics:
    """Generic instantiation through references and inheritance"""

    @pytest.fixture
    def transformer(self):
        return SchemaTransformer.from_declaration_file(TEST_DATA / "generics.json")

    def test_generic_argument_flows_into_nested_generic(self, transformer):
        box = transformer.transform("Holder").schema.to_dict()["properties"]["box"]
        assert box["properties"]["content"] == {
            "type": "object",
            "properties": {
                "value": {"type": "string"},
                "items": {"type": "array", "items": {"type": "string"}},
            },
            "required": ["value", "items"],
        }

    def test_nested_generic_arguments(self, transformer):
        report = transformer.transform("Holder").schema.to_dict()["properties"]["report"]
        wrapper = report["properties"]["data"]["items"]
        assert wrapper["properties"]["value"] == {"type": "boolean"}
        assert wrapper["properties"]["items"] == {"type": "array", "items": {"type": "boolean"}}

    def test_generic_base_class(self, transformer):
        page = transformer.transform("UserPage").schema.to_dict()
        assert list(page["properties"]) == ["data", "total"]
        assert list(page["properties"]["data"]["items"]["properties"]) == USER_PROPERTIES

    def test_same_class_different_arguments(self, transformer):
        strings = transformer.transform("Holder").schema.to_dict()["properties"]["box"]["properties"]["content"]
        booleans = transformer.transform("Holder").schema.to_dict()["properties"]["report"]["properties"]["data"]["items"]
        assert strings["properties"]["value"] != booleans["properties"]["value"]

    def test_unbound_parameter(self, transformer):
        schema = transformer.transform("Unbound").schema.to_dict()
        assert schema["properties"]["value"] == {"type": "object", "properties": {}, "additionalProperties": True}

    def test_override_and_missing_base(self, transformer):
        override = transformer.transform("Override").schema.to_dict()
        assert list(override["properties"]) == ["id", "createdAt", "label"]
        assert override["properties"]["id"] == {"type": "number", "format": "double"}

        orphan = transformer.transform("Orphan").schema.to_dict()
        assert orphan == {"type": "object", "properties": {"own": {"type": "boolean"}}, "required": ["own"]}

    def test_keys_through_type_parameter(self, transformer):
        viewer = transformer.transform("Viewer").schema.to_dict()["properties"]

        one = viewer["one"]["properties"]
        assert list(one["picked"]["properties"]) == ["id"]
        assert one["picked"]["required"] == ["id"]
        assert list(one["rest"]["properties"]) == ["createdAt", "name", "nickname"]

        two = viewer["two"]["properties"]
        assert list(two["picked"]["properties"]) == ["id", "name"]
        assert list(two["rest"]["properties"]) == ["createdAt", "nickname"]
        assert two["rest"]["required"] == ["createdAt"]
