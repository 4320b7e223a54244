"""
Source model node definitions.

These nodes describe declarations as the source model provider sees them:
classes, interfaces and enums with their raw (unclassified) member types
and annotations. The synthesis core only reads them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass
class TypeExpr:
    """Base class for raw type expressions."""

    # Text the expression was parsed from (for messages and cache keys)
    source_text: str = ""


@dataclass
class NamedTypeExpr(TypeExpr):
    """A keyword or named reference, e.g. `string`, `Org`, `Partial<User>`."""

    name: str = ""
    type_args: list[TypeExpr] = field(default_factory=list)


@dataclass
class ArrayTypeExpr(TypeExpr):
    """Array syntax, e.g. `Tag[]`."""

    element: TypeExpr | None = None


@dataclass
class UnionTypeExpr(TypeExpr):
    """A union, e.g. `string | null` or `'id' | 'name'`."""

    members: list[TypeExpr] = field(default_factory=list)


@dataclass
class LiteralTypeExpr(TypeExpr):
    """A literal type, e.g. `'id'` or `42`."""

    value: Any = None


@dataclass
class AnnotationArgument:
    """Base class for annotation arguments."""

    pass


@dataclass
class LiteralArgument(AnnotationArgument):
    """A literal value written at the annotation site."""

    value: Any = None


@dataclass
class TypeRefArgument(AnnotationArgument):
    """A reference to a declaration, e.g. the `Color` in `@IsEnum(Color)`."""

    name: str = ""


@dataclass
class RuntimeProbeArgument(AnnotationArgument):
    """An expression only the provider can evaluate, e.g. a named constant."""

    expression: str = ""


@dataclass
class AnnotationDescriptor:
    """An annotation (decorator) applied to a property."""

    name: str = ""
    arguments: list[AnnotationArgument] = field(default_factory=list)


@dataclass
class PropertyDescriptor:
    """A property declared on a class or interface."""

    name: str = ""
    type_expr: TypeExpr | None = None
    is_optional: bool = False
    annotations: list[AnnotationDescriptor] = field(default_factory=list)
    is_static: bool = False
    visibility: str = "public"


@dataclass
class BaseClassRef:
    """The `extends` clause of a class."""

    name: str = ""
    type_args: list[TypeExpr] = field(default_factory=list)


class DeclarationKind(str, Enum):
    """Kind of declaration."""

    CLASS = "class"
    INTERFACE = "interface"
    ENUM = "enum"


@dataclass
class EnumMember:
    """A member of an enum declaration with its constant value."""

    name: str = ""
    value: Any = None


@dataclass(eq=False)
class ClassDescriptor:
    """A class, interface or enum declaration."""

    name: str = ""
    source_location: str = ""
    kind: DeclarationKind = DeclarationKind.CLASS
    type_parameters: list[str] = field(default_factory=list)
    properties: list[PropertyDescriptor] = field(default_factory=list)
    base: BaseClassRef | None = None
    enum_members: list[EnumMember] = field(default_factory=list)

    # Third-party declarations are only reachable through opaque introspection
    # or an explicit external lookup
    is_external: bool = False
    package_name: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        """Identity of the declaration: (source location, name)."""
        return (self.source_location, self.name)

    @property
    def is_enum(self) -> bool:
        return self.kind == DeclarationKind.ENUM

    def __repr__(self) -> str:
        return f"ClassDescriptor({self.name!r} at {self.source_location!r})"
