"""
Loader for JSON declaration documents.

Builds a DeclarationModel from a document listing source files and the
classes, interfaces and enums they declare. Any structural problem in the
document is a ConfigurationError: it is raised before any transform runs.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from ..errors import ConfigurationError
from .nodes import (
    AnnotationArgument,
    AnnotationDescriptor,
    BaseClassRef,
    ClassDescriptor,
    DeclarationKind,
    EnumMember,
    LiteralArgument,
    NamedTypeExpr,
    PropertyDescriptor,
    RuntimeProbeArgument,
    TypeExpr,
    TypeRefArgument,
)
from .provider import DeclarationModel
from .type_parser import TypeExpressionError, TypeExpressionParser

logger = logging.getLogger(__name__)


class DeclarationLoader:
    """Parses a declaration document into source model nodes."""

    def __init__(self):
        self.type_parser = TypeExpressionParser()

    def load(self, path: str | Path) -> DeclarationModel:
        """
        Load a declaration document from disk.

        Args:
            path: Path to the JSON declaration document

        Returns:
            DeclarationModel holding every declaration of the document

        Raises:
            ConfigurationError: If the file is missing, unreadable or malformed
        """
        path = Path(path)
        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Declaration file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Declaration file {path} is not valid JSON: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read declaration file {path}: {e}") from e

        return self.parse(document)

    def parse(self, document: Any) -> DeclarationModel:
        """
        Parse an already-decoded declaration document.

        Args:
            document: The decoded JSON document

        Returns:
            DeclarationModel holding every declaration of the document
        """
        if not isinstance(document, dict) or not isinstance(document.get("sources"), list):
            raise ConfigurationError("Declaration document must be an object with a 'sources' list")

        constants = document.get("constants", {})
        if not isinstance(constants, dict):
            raise ConfigurationError("'constants' must be an object")

        model = DeclarationModel(constants=constants)
        for i, source in enumerate(document["sources"]):
            for declaration in self._parse_source(source, f"sources[{i}]"):
                model.add(declaration)

        logger.debug("Loaded %d declarations", sum(1 for _ in model.declarations()))
        return model

    def _parse_source(self, source: Any, where: str) -> list[ClassDescriptor]:
        if not isinstance(source, dict) or not isinstance(source.get("path"), str):
            raise ConfigurationError(f"{where}: a source needs a 'path' string")

        location = source["path"]
        is_external = bool(source.get("external", False))
        package_name = source.get("package")
        if is_external and not package_name:
            raise ConfigurationError(f"{where}: external source '{location}' needs a 'package'")

        declarations = []
        for j, raw in enumerate(source.get("declarations", [])):
            declaration = self._parse_declaration(raw, f"{location}: declarations[{j}]")
            declaration.source_location = location
            declaration.is_external = is_external
            declaration.package_name = package_name
            declarations.append(declaration)
        return declarations

    def _parse_declaration(self, raw: Any, where: str) -> ClassDescriptor:
        if not isinstance(raw, dict) or not raw.get("name"):
            raise ConfigurationError(f"{where}: a declaration needs a 'name'")

        name = raw["name"]
        where = f"{where} ({name})"

        try:
            kind = DeclarationKind(raw.get("kind", "class"))
        except ValueError as e:
            raise ConfigurationError(f"{where}: unknown declaration kind '{raw.get('kind')}'") from e

        if kind == DeclarationKind.ENUM:
            return ClassDescriptor(
                name=name,
                kind=kind,
                enum_members=self._parse_enum_members(raw.get("members", []), where),
            )

        base = None
        if raw.get("extends"):
            base = self._parse_base(raw["extends"], where)

        return ClassDescriptor(
            name=name,
            kind=kind,
            type_parameters=list(raw.get("type_parameters", [])),
            properties=[self._parse_property(m, where) for m in raw.get("members", [])],
            base=base,
        )

    def _parse_base(self, text: str, where: str) -> BaseClassRef:
        expr = self._parse_type(text, f"{where} extends")
        if not isinstance(expr, NamedTypeExpr):
            raise ConfigurationError(f"{where}: 'extends' must name a class, got '{text}'")
        return BaseClassRef(name=expr.name, type_args=expr.type_args)

    def _parse_property(self, raw: Any, where: str) -> PropertyDescriptor:
        if not isinstance(raw, dict) or not raw.get("name"):
            raise ConfigurationError(f"{where}: a member needs a 'name'")

        prop_where = f"{where}.{raw['name']}"
        type_expr = None
        if raw.get("type") is not None:
            type_expr = self._parse_type(raw["type"], prop_where)

        visibility = raw.get("visibility", "public")
        if visibility not in ("public", "protected", "private"):
            raise ConfigurationError(f"{prop_where}: unknown visibility '{visibility}'")

        return PropertyDescriptor(
            name=raw["name"],
            type_expr=type_expr,
            is_optional=bool(raw.get("optional", False)),
            annotations=[self._parse_annotation(a, prop_where) for a in raw.get("annotations", [])],
            is_static=bool(raw.get("static", False)),
            visibility=visibility,
        )

    def _parse_annotation(self, raw: Any, where: str) -> AnnotationDescriptor:
        # "@IsString()" may be written as a bare name
        if isinstance(raw, str):
            return AnnotationDescriptor(name=raw.lstrip("@"))

        if not isinstance(raw, dict) or not raw.get("name"):
            raise ConfigurationError(f"{where}: an annotation needs a 'name'")

        return AnnotationDescriptor(
            name=raw["name"].lstrip("@"),
            arguments=[self._parse_argument(a) for a in raw.get("arguments", [])],
        )

    def _parse_argument(self, raw: Any) -> AnnotationArgument:
        if isinstance(raw, dict) and len(raw) == 1:
            if "$type" in raw:
                return TypeRefArgument(name=raw["$type"])
            if "$expr" in raw:
                return RuntimeProbeArgument(expression=raw["$expr"])
        return LiteralArgument(value=raw)

    def _parse_enum_members(self, raw_members: Any, where: str) -> list[EnumMember]:
        members = []
        next_value: Any = 0

        for raw in raw_members:
            if isinstance(raw, str):
                raw = {"name": raw}
            if not isinstance(raw, dict) or not raw.get("name"):
                raise ConfigurationError(f"{where}: an enum member needs a 'name'")

            if "value" in raw:
                value = raw["value"]
            elif next_value is None:
                raise ConfigurationError(f"{where}: enum member '{raw['name']}' needs an explicit value after a string member")
            else:
                value = next_value

            members.append(EnumMember(name=raw["name"], value=value))

            # Auto-increment continues only from numeric members
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                next_value = value + 1
            else:
                next_value = None

        return members

    def _parse_type(self, text: Any, where: str) -> TypeExpr:
        if not isinstance(text, str):
            raise ConfigurationError(f"{where}: type must be a string, got {type(text).__name__}")
        try:
            return self.type_parser.parse(text)
        except TypeExpressionError as e:
            raise ConfigurationError(f"{where}: {e}") from e


def load_declaration_model(path: str | Path) -> DeclarationModel:
    """Load a declaration document into a DeclarationModel."""
    return DeclarationLoader().load(path)
