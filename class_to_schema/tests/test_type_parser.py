import pytest

from class_to_schema.pipeline.source_model import (
    ArrayTypeExpr,
    LiteralTypeExpr,
    NamedTypeExpr,
    TypeExpressionError,
    UnionTypeExpr,
    parse_type_expression,
)


class TestTypeExpressionParser:
    """Parsing of declared type text"""

    def test_simple_name(self):
        expr = parse_type_expression("string")
        assert isinstance(expr, NamedTypeExpr)
        assert expr.name == "string"
        assert expr.type_args == []

    def test_array_suffix(self):
        expr = parse_type_expression("Org[]")
        assert isinstance(expr, ArrayTypeExpr)
        assert isinstance(expr.element, NamedTypeExpr)
        assert expr.element.name == "Org"
        assert expr.source_text == "Org[]"

    def test_nested_array_suffix(self):
        expr = parse_type_expression("number[][]")
        assert isinstance(expr, ArrayTypeExpr)
        assert isinstance(expr.element, ArrayTypeExpr)
        assert expr.element.element.name == "number"

    def test_nested_generics(self):
        expr = parse_type_expression("Partial<Pick<User, 'id' | 'name'>>")
        assert expr.name == "Partial"
        pick = expr.type_args[0]
        assert pick.name == "Pick"
        assert pick.type_args[0].name == "User"

        keys = pick.type_args[1]
        assert isinstance(keys, UnionTypeExpr)
        assert [m.value for m in keys.members] == ["id", "name"]

    def test_nullable_union(self):
        expr = parse_type_expression("string | null")
        assert isinstance(expr, UnionTypeExpr)
        assert [m.name for m in expr.members] == ["string", "null"]

    def test_leading_bar_union(self):
        expr = parse_type_expression("| 'a' | 'b'")
        assert isinstance(expr, UnionTypeExpr)
        assert [m.value for m in expr.members] == ["a", "b"]

    def test_parenthesized_union_array(self):
        expr = parse_type_expression("(Tag | null)[]")
        assert isinstance(expr, ArrayTypeExpr)
        assert isinstance(expr.element, UnionTypeExpr)

    def test_dotted_name(self):
        expr = parse_type_expression("Express.Multer.File")
        assert isinstance(expr, NamedTypeExpr)
        assert expr.name == "Express.Multer.File"

    @pytest.mark.parametrize(
        "text,value",
        [("'admin'", "admin"), ('"user"', "user"), ("42", 42), ("1.5", 1.5), ("-1", -1), ("true", True), ("false", False)],
    )
    def test_literals(self, text, value):
        expr = parse_type_expression(text)
        assert isinstance(expr, LiteralTypeExpr)
        assert expr.value == value

    def test_source_text_is_normalized(self):
        expr = parse_type_expression("Record<string,number>")
        assert expr.source_text == "Record<string, number>"

    @pytest.mark.parametrize("text", ["", "   ", "Array<", "Foo>", "A & B", "Map<string,>", "()"])
    def test_invalid_expressions(self, text):
        with pytest.raises(TypeExpressionError):
            parse_type_expression(text)


if __name__ == "__main__":
    pytest.main([__file__])
