"""
Synthesizer module.

Contains the schema nodes, the recursive synthesizer, the annotation
overlay and the schema cache.
"""

from __future__ import annotations

from .cache import CacheEntry, SchemaCache
from .overlay import AnnotationOverlay, enum_value_type
from .schema_nodes import (
    ArraySchema,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    SchemaNode,
    open_object,
)
from .synthesizer import SchemaSynthesizer, SynthesisContext

__all__ = [
    "AnnotationOverlay",
    "ArraySchema",
    "CacheEntry",
    "ObjectSchema",
    "PrimitiveSchema",
    "RefSchema",
    "SchemaCache",
    "SchemaNode",
    "SchemaSynthesizer",
    "SynthesisContext",
    "enum_value_type",
    "open_object",
]
