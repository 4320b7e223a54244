"""
Source model module.

Contains the declaration nodes, the provider interface, the in-memory
declaration model and its JSON loader.
"""

from __future__ import annotations

from .loader import DeclarationLoader, load_declaration_model
from .nodes import (
    AnnotationArgument,
    AnnotationDescriptor,
    ArrayTypeExpr,
    BaseClassRef,
    ClassDescriptor,
    DeclarationKind,
    EnumMember,
    LiteralArgument,
    LiteralTypeExpr,
    NamedTypeExpr,
    PropertyDescriptor,
    RuntimeProbeArgument,
    TypeExpr,
    TypeRefArgument,
    UnionTypeExpr,
)
from .provider import DeclarationModel, SourceModelProvider
from .type_parser import TypeExpressionError, TypeExpressionParser, parse_type_expression

__all__ = [
    "AnnotationArgument",
    "AnnotationDescriptor",
    "ArrayTypeExpr",
    "BaseClassRef",
    "ClassDescriptor",
    "DeclarationKind",
    "DeclarationLoader",
    "DeclarationModel",
    "EnumMember",
    "LiteralArgument",
    "LiteralTypeExpr",
    "NamedTypeExpr",
    "PropertyDescriptor",
    "RuntimeProbeArgument",
    "SourceModelProvider",
    "TypeExpr",
    "TypeExpressionError",
    "TypeExpressionParser",
    "TypeRefArgument",
    "UnionTypeExpr",
    "load_declaration_model",
    "parse_type_expression",
]
