"""
Exceptions raised by the schema pipeline.

Only configuration problems and misuse of a disposed engine raise. Every
condition met while synthesizing a schema (missing class, ambiguous name,
unresolvable type) degrades to a conservative schema and a warning.
"""

from __future__ import annotations


class ClassToSchemaError(Exception):
    """Base class for all errors raised by class_to_schema."""

    pass


class ConfigurationError(ClassToSchemaError):
    """Raised when the source model cannot be initialized.

    This can happen when:
    - The declaration document does not exist or cannot be read
    - The document is not valid JSON
    - A declaration is missing its name or has an unknown kind
    - A type expression cannot be parsed
    """

    pass


class TransformerDisposedError(ClassToSchemaError):
    """Raised when a disposed SchemaTransformer is used again."""

    pass
