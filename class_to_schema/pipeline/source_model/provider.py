"""
Source model provider interface and the in-memory declaration model.

The synthesis core only talks to `SourceModelProvider`. `DeclarationModel`
is the concrete provider shipped with the package: it holds declarations
already parsed into source model nodes (see `loader.py`).
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any

from ..config import SourceOptions
from .nodes import (
    AnnotationArgument,
    ClassDescriptor,
    LiteralArgument,
    NamedTypeExpr,
    PropertyDescriptor,
    RuntimeProbeArgument,
    TypeExpr,
    TypeRefArgument,
)

_OBJECT_VALUES_PATTERN = re.compile(r"^Object\.values\(\s*([A-Za-z_$][\w$]*)\s*\)$")


class SourceModelProvider(ABC):
    """Abstract access to declarations, their members and constants."""

    @abstractmethod
    def find_declarations(self, name: str, options: SourceOptions | None = None) -> list[ClassDescriptor]:
        """Return every declaration named `name`, in discovery order.

        Args:
            name: Declaration name
            options: Narrow the search to a file or an external package.
                Without options, external declarations are not searched.
        """
        pass

    @abstractmethod
    def members(self, declaration: ClassDescriptor) -> list[PropertyDescriptor]:
        """Return the properties declared directly on `declaration`."""
        pass

    @abstractmethod
    def properties_of_opaque_type(self, type_expr: TypeExpr | None) -> list[PropertyDescriptor]:
        """Return structural members of a type that has no source declaration."""
        pass

    @abstractmethod
    def constant_values_of_enum(self, declaration: ClassDescriptor) -> list[Any]:
        """Return the constant values of an enum, in member order."""
        pass

    @abstractmethod
    def evaluate_annotation_argument(self, argument: AnnotationArgument) -> AnnotationArgument | None:
        """Reduce an argument to a LiteralArgument or TypeRefArgument, or None."""
        pass

    @abstractmethod
    def declarations(self) -> Iterator[ClassDescriptor]:
        """Iterate over all declarations in discovery order."""
        pass

    def find_declaration(self, name: str, hint: str | None = None) -> ClassDescriptor | None:
        """Return the declaration a reference named `name` points to.

        A declaration in the same source location as `hint` wins; otherwise
        the first one discovered.
        """
        candidates = self.find_declarations(name)
        if not candidates:
            return None
        if hint is not None:
            for candidate in candidates:
                if candidate.source_location == hint:
                    return candidate
        return candidates[0]

    def close(self) -> None:
        """Release resources held by the provider."""
        pass


class DeclarationModel(SourceModelProvider):
    """In-memory source model built from ClassDescriptors."""

    def __init__(self, declarations: Iterable[ClassDescriptor] = (), constants: dict[str, Any] | None = None):
        """
        Initialize the model.

        Args:
            declarations: Declarations in discovery order
            constants: Named constant values used to evaluate runtime probes
        """
        self._declarations: list[ClassDescriptor] = []
        self._by_name: dict[str, list[ClassDescriptor]] = {}
        self.constants: dict[str, Any] = dict(constants or {})
        for declaration in declarations:
            self.add(declaration)

    def add(self, declaration: ClassDescriptor) -> None:
        """Register a declaration (appended to the discovery order)."""
        self._declarations.append(declaration)
        self._by_name.setdefault(declaration.name, []).append(declaration)

    def declarations(self) -> Iterator[ClassDescriptor]:
        return iter(self._declarations)

    def find_declarations(self, name: str, options: SourceOptions | None = None) -> list[ClassDescriptor]:
        candidates = self._by_name.get(name, [])
        options = options or SourceOptions()

        if options.is_external:
            candidates = [c for c in candidates if c.is_external and (not options.package_name or c.package_name == options.package_name)]
        else:
            candidates = [c for c in candidates if not c.is_external]

        if options.file_path:
            candidates = [c for c in candidates if c.source_location == options.file_path]

        return list(candidates)

    def members(self, declaration: ClassDescriptor) -> list[PropertyDescriptor]:
        return list(declaration.properties)

    def properties_of_opaque_type(self, type_expr: TypeExpr | None) -> list[PropertyDescriptor]:
        # Only named references can be matched against external typings
        if not isinstance(type_expr, NamedTypeExpr):
            return []

        # `Express.Multer.File` style names are declared under their last segment
        names = [type_expr.name]
        if "." in type_expr.name:
            names.append(type_expr.name.rsplit(".", 1)[1])

        for name in names:
            for declaration in self._by_name.get(name, []):
                if declaration.is_external and not declaration.is_enum:
                    return self.members(declaration)
        return []

    def constant_values_of_enum(self, declaration: ClassDescriptor) -> list[Any]:
        return [member.value for member in declaration.enum_members]

    def evaluate_annotation_argument(self, argument: AnnotationArgument) -> AnnotationArgument | None:
        if isinstance(argument, (LiteralArgument, TypeRefArgument)):
            return argument

        if isinstance(argument, RuntimeProbeArgument):
            expression = argument.expression.strip()
            if expression in self.constants:
                return LiteralArgument(value=self.constants[expression])

            # `Object.values(Color)` enumerates the same values as `Color`
            match = _OBJECT_VALUES_PATTERN.match(expression)
            if match:
                expression = match.group(1)

            # A bare declaration name evaluates to a reference to it
            if expression in self._by_name:
                return TypeRefArgument(name=expression)

        return None

    def close(self) -> None:
        self._declarations.clear()
        self._by_name.clear()
        self.constants.clear()
