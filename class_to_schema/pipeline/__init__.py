"""
Pipeline - declaration to JSON Schema synthesizer.

This module provides a multi-phase architecture for turning class
declarations into JSON-Schema/OpenAPI shaped schemas:

1. Source model: declarations, members and annotations from a provider
2. Analyzer: identity resolution, property extraction, type classification
3. Synthesizer: recursive, cycle-safe schema construction and annotation overlay
4. Cache: memoized class schemas shared across transform calls
"""

from __future__ import annotations

from .analyzer import ShapeEvidence
from .config import SourceOptions, TransformerConfig
from .errors import ClassToSchemaError, ConfigurationError, TransformerDisposedError
from .source_model import DeclarationModel, SourceModelProvider, load_declaration_model
from .transformer import ClassIdentifier, SchemaTransformer, TransformResult

__all__ = [
    "ClassIdentifier",
    "ClassToSchemaError",
    "ConfigurationError",
    "DeclarationModel",
    "SchemaTransformer",
    "ShapeEvidence",
    "SourceModelProvider",
    "SourceOptions",
    "TransformResult",
    "TransformerConfig",
    "TransformerDisposedError",
    "load_declaration_model",
]
