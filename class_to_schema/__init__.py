"""Class to Schema

A Python package for generating JSON Schema / OpenAPI schemas from class
declarations. Handles inheritance, generics, utility types, enums,
class-validator style annotations and circular references.
"""

__version__ = "1.0.0"

from .pipeline import (
    ClassIdentifier,
    ClassToSchemaError,
    ConfigurationError,
    DeclarationModel,
    SchemaTransformer,
    ShapeEvidence,
    SourceModelProvider,
    SourceOptions,
    TransformerConfig,
    TransformerDisposedError,
    TransformResult,
    load_declaration_model,
)

__all__ = [
    "SchemaTransformer",
    "TransformerConfig",
    "SourceOptions",
    "ClassIdentifier",
    "TransformResult",
    "ShapeEvidence",
    "SourceModelProvider",
    "DeclarationModel",
    "load_declaration_model",
    "ClassToSchemaError",
    "ConfigurationError",
    "TransformerDisposedError",
]
