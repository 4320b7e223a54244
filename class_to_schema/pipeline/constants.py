"""
Lookup tables shared by the classifier, synthesizer and overlay.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_REF_PREFIX = "#/components/schemas/"


@dataclass(frozen=True)
class PrimitiveSpec:
    """JSON Schema rendering of a primitive source type."""

    type_name: str
    format: str | None = None


# Keyed by lowercased source type name
PRIMITIVE_TYPES: dict[str, PrimitiveSpec] = {
    "string": PrimitiveSpec("string"),
    "any": PrimitiveSpec("string"),
    "unknown": PrimitiveSpec("string"),
    "symbol": PrimitiveSpec("string"),
    "number": PrimitiveSpec("number", "double"),
    "bigint": PrimitiveSpec("integer", "int64"),
    "boolean": PrimitiveSpec("boolean"),
    "null": PrimitiveSpec("null"),
    "date": PrimitiveSpec("string", "date-time"),
    "buffer": PrimitiveSpec("string", "binary"),
    "uint8array": PrimitiveSpec("string", "binary"),
    "file": PrimitiveSpec("string", "binary"),
    "uploadfile": PrimitiveSpec("string", "binary"),
}

# Union members dropped when picking the meaningful member of a union
NULLISH_TYPES = {"null", "undefined", "void"}

# Generic wrappers that mean "array of the first argument"
ARRAY_WRAPPERS = {"Array", "ReadonlyArray", "Set"}

# Names that classify as an open object rather than a declaration lookup
OPEN_OBJECT_TYPES = {"object", "Object"}


@dataclass(frozen=True)
class AnnotationSpec:
    """Type and format that a type-setting annotation forces."""

    type_name: str | None = None
    format: str | None = None


# Annotations that set (or refine) the JSON type of a property
TYPE_ANNOTATIONS: dict[str, AnnotationSpec] = {
    "IsString": AnnotationSpec("string"),
    "IsInt": AnnotationSpec("integer", "int32"),
    "IsNumber": AnnotationSpec("number", "double"),
    "IsBoolean": AnnotationSpec("boolean"),
    "IsDate": AnnotationSpec("string", "date-time"),
    "IsEmail": AnnotationSpec(None, "email"),
}

# Annotations that force a property into `required`
NOT_EMPTY_ANNOTATIONS = {"IsNotEmpty", "ArrayNotEmpty"}

OPTIONAL_ANNOTATION = "IsOptional"
