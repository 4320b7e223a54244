"""
Classified type definitions.

A TypeDescriptor is what the classifier makes of one declared type once
generic parameters are substituted. The synthesizer dispatches on `kind`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..source_model.nodes import ClassDescriptor, TypeExpr


class TypeKind(Enum):
    """Kind of classified type."""

    PRIMITIVE = "primitive"  # string, number, Date, Buffer, ...
    ARRAY = "array"  # T[]
    ENUM = "enum"  # Reference to an enum declaration
    CLASS = "class"  # Reference to a class or interface declaration
    UTILITY = "utility"  # Partial<T>, Pick<T, K>, Record<K, V>, ...
    OPAQUE = "opaque"  # Unresolvable or third-party type


class UtilityOperator(str, Enum):
    """Type-level operators recognized by the classifier."""

    PARTIAL = "Partial"
    REQUIRED = "Required"
    PICK = "Pick"
    OMIT = "Omit"
    RECORD = "Record"
    READONLY = "Readonly"
    NON_NULLABLE = "NonNullable"


@dataclass
class TypeDescriptor:
    """A classified type."""

    kind: TypeKind = TypeKind.OPAQUE

    # For PRIMITIVE: lowercased source keyword ("string", "date", ...)
    primitive: str = ""

    # For PRIMITIVE literal types (`'id'`, `'id' | 'name'`): the literal values
    literals: list[Any] | None = None

    # For ARRAY
    element: TypeDescriptor | None = None

    # For ENUM and CLASS
    declaration: ClassDescriptor | None = None
    type_args: list[TypeDescriptor] = field(default_factory=list)

    # For UTILITY: for RECORD, target is the value type
    operator: UtilityOperator | None = None
    target: TypeDescriptor | None = None
    keys: list[str] | None = None

    # For OPAQUE: the raw expression, kept for structural introspection
    raw: TypeExpr | None = None

    def signature(self) -> str:
        """Stable text form, used to key cached generic instantiations."""
        if self.kind == TypeKind.PRIMITIVE:
            if self.literals is not None:
                return " | ".join(repr(value) for value in self.literals)
            return self.primitive
        if self.kind == TypeKind.ARRAY:
            return f"{self.element.signature()}[]"
        if self.kind in (TypeKind.ENUM, TypeKind.CLASS):
            name = f"{self.declaration.source_location}:{self.declaration.name}"
            if self.type_args:
                name += "<" + ", ".join(arg.signature() for arg in self.type_args) + ">"
            return name
        if self.kind == TypeKind.UTILITY:
            inner = self.target.signature() if self.target else "?"
            if self.keys is not None:
                inner += ", " + " | ".join(self.keys)
            return f"{self.operator.value}<{inner}>"
        return f"opaque:{self.raw.source_text if self.raw else ''}"


# Type-parameter name -> substituted type, scoped to one descent
GenericEnvironment = dict[str, TypeDescriptor]
