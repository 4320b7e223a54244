"""
Analyzer module.

Contains type classification, property extraction and identity resolution.
"""

from __future__ import annotations

from .classifier import TypeClassifier
from .extractor import ExtractedProperty, PropertyExtractor
from .identity_resolver import IdentityResolver, Resolution, ShapeEvidence
from .type_nodes import GenericEnvironment, TypeDescriptor, TypeKind, UtilityOperator

__all__ = [
    "ExtractedProperty",
    "GenericEnvironment",
    "IdentityResolver",
    "PropertyExtractor",
    "Resolution",
    "ShapeEvidence",
    "TypeClassifier",
    "TypeDescriptor",
    "TypeKind",
    "UtilityOperator",
]
