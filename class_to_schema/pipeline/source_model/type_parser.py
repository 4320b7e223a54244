"""
Parser for declared type expressions.

Turns the TypeScript-style type text found in a declaration document
(`Org[]`, `Partial<Pick<User, 'id' | 'name'>>`, `string | null`) into
TypeExpr nodes. Only the source model uses it; the synthesis core works on
the parsed nodes.
"""

from __future__ import annotations

import re

from .nodes import ArrayTypeExpr, LiteralTypeExpr, NamedTypeExpr, TypeExpr, UnionTypeExpr

_TOKEN_PATTERN = re.compile(
    r"""
    \s*(?:
        (?P<string>'[^']*'|"[^"]*")
      | (?P<number>-?\d+(?:\.\d+)?)
      | (?P<name>[A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*)
      | (?P<symbol>[<>\[\]|,()])
    )
    """,
    re.VERBOSE,
)


class TypeExpressionError(ValueError):
    """Raised when a type expression cannot be parsed."""

    pass


class TypeExpressionParser:
    """Recursive-descent parser for type expressions."""

    def parse(self, text: str) -> TypeExpr:
        """
        Parse a type expression.

        Args:
            text: The type text, e.g. "Array<Tag> | null"

        Returns:
            The root TypeExpr node

        Raises:
            TypeExpressionError: If the text is not a valid type expression
        """
        self._text = text
        self._tokens = self._tokenize(text)
        self._pos = 0

        if not self._tokens:
            raise TypeExpressionError("Empty type expression")

        node = self._parse_union()
        if self._pos != len(self._tokens):
            raise TypeExpressionError(f"Unexpected '{self._tokens[self._pos][1]}' in type expression '{text}'")
        return node

    def _tokenize(self, text: str) -> list[tuple[str, str]]:
        tokens = []
        pos = 0
        stripped_end = len(text.rstrip())
        while pos < stripped_end:
            match = _TOKEN_PATTERN.match(text, pos)
            if not match or match.end() == pos:
                raise TypeExpressionError(f"Invalid character at position {pos} in type expression '{text}'")
            kind = match.lastgroup
            tokens.append((kind, match.group(kind)))
            pos = match.end()
        return tokens

    def _peek(self) -> tuple[str, str] | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _accept(self, symbol: str) -> bool:
        token = self._peek()
        if token and token[0] == "symbol" and token[1] == symbol:
            self._pos += 1
            return True
        return False

    def _expect(self, symbol: str) -> None:
        if not self._accept(symbol):
            found = self._peek()
            found_text = found[1] if found else "end of input"
            raise TypeExpressionError(f"Expected '{symbol}' but found '{found_text}' in type expression '{self._text}'")

    def _parse_union(self) -> TypeExpr:
        start = self._pos
        # A leading bar is allowed: `| 'a' | 'b'`
        self._accept("|")
        members = [self._parse_postfix()]
        while self._accept("|"):
            members.append(self._parse_postfix())

        if len(members) == 1:
            return members[0]
        return UnionTypeExpr(members=members, source_text=self._source_between(start))

    def _parse_postfix(self) -> TypeExpr:
        start = self._pos
        node = self._parse_primary()
        while self._accept("["):
            self._expect("]")
            node = ArrayTypeExpr(element=node, source_text=self._source_between(start))
        return node

    def _parse_primary(self) -> TypeExpr:
        token = self._peek()
        if token is None:
            raise TypeExpressionError(f"Unexpected end of type expression '{self._text}'")

        kind, value = token

        if kind == "symbol" and value == "(":
            self._pos += 1
            node = self._parse_union()
            self._expect(")")
            return node

        if kind == "string":
            self._pos += 1
            return LiteralTypeExpr(value=value[1:-1], source_text=value)

        if kind == "number":
            self._pos += 1
            number = float(value) if "." in value else int(value)
            return LiteralTypeExpr(value=number, source_text=value)

        if kind == "name":
            self._pos += 1
            if value in ("true", "false"):
                return LiteralTypeExpr(value=value == "true", source_text=value)

            start = self._pos - 1
            type_args = []
            if self._accept("<"):
                type_args.append(self._parse_union())
                while self._accept(","):
                    type_args.append(self._parse_union())
                self._expect(">")
            return NamedTypeExpr(name=value, type_args=type_args, source_text=self._source_between(start))

        raise TypeExpressionError(f"Unexpected '{value}' in type expression '{self._text}'")

    def _source_between(self, start: int) -> str:
        """Rebuild normalized source text for tokens[start:pos]."""
        text = ""
        for kind, value in self._tokens[start : self._pos]:
            if kind == "symbol" and value in ("|",):
                text += f" {value} "
            elif kind == "symbol" and value == ",":
                text += ", "
            else:
                text += value
        return text.strip()


def parse_type_expression(text: str) -> TypeExpr:
    """Parse a type expression with a fresh parser."""
    return TypeExpressionParser().parse(text)
