from pathlib import Path

import pytest

from class_to_schema import SchemaTransformer
from class_to_schema.pipeline.synthesizer import enum_value_type

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def transformer():
    return SchemaTransformer.from_declaration_file(TEST_DATA / "annotations.json")


class TestEnums:
    """Enum value lists and their JSON type"""

    def test_string_enum(self, transformer):
        assert transformer.transform("Color").schema.to_dict() == {"type": "string", "enum": ["red", "green"]}

    def test_numeric_enum(self, transformer):
        assert transformer.transform("Level").schema.to_dict() == {"type": "number", "enum": [0, 1, 2]}

    def test_mixed_enum_is_string(self, transformer):
        assert transformer.transform("Mixed").schema.to_dict() == {"type": "string", "enum": ["yes", 0]}

    def test_auto_increment_then_string(self, transformer):
        assert transformer.transform("Sparse").schema.to_dict() == {"type": "string", "enum": [5, 6, "c"]}

    def test_enum_typed_properties(self, transformer):
        properties = transformer.transform("CreateUserDto").schema.to_dict()["properties"]
        assert properties["color"] == {"type": "string", "enum": ["red", "green"]}
        assert properties["level"] == {"type": "number", "enum": [0, 1, 2]}

    @pytest.mark.parametrize(
        "values,expected",
        [
            (["a", "b"], "string"),
            ([0, 1.5], "number"),
            (["yes", 0], "string"),
            ([True, False], "string"),
            ([], "string"),
        ],
    )
    def test_enum_value_type(self, values, expected):
        assert enum_value_type(values) == expected
