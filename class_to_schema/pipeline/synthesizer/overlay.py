"""
Annotation overlay.

Applies class-validator style annotations of a property onto the schema
node synthesized for it, and decides whether the property is required.
"""

from __future__ import annotations

import logging
from typing import Any

from ..constants import NOT_EMPTY_ANNOTATIONS, OPTIONAL_ANNOTATION, TYPE_ANNOTATIONS
from ..source_model.nodes import (
    AnnotationDescriptor,
    LiteralArgument,
    PropertyDescriptor,
    TypeRefArgument,
)
from ..source_model.provider import SourceModelProvider
from .schema_nodes import ArraySchema, ObjectSchema, PrimitiveSchema, RefSchema, SchemaNode

logger = logging.getLogger(__name__)


def enum_value_type(values: list[Any]) -> str:
    """JSON type of an enum: number when every value is numeric, else string."""
    if values and all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in values):
        return "number"
    return "string"


class AnnotationOverlay:
    """Overlays annotation constraints onto synthesized nodes."""

    def __init__(self, provider: SourceModelProvider):
        """
        Initialize the overlay.

        Args:
            provider: Source model used to evaluate annotation arguments
        """
        self.provider = provider

    def apply(self, prop: PropertyDescriptor, node: SchemaNode, hint: str | None = None) -> tuple[SchemaNode, bool]:
        """
        Apply the annotations of `prop` to `node`.

        Args:
            prop: The property carrying the annotations
            node: The node synthesized for the property's type
            hint: Source location of the declaring class, for enum lookups

        Returns:
            The (possibly replaced) node and whether the property is required
        """
        # A back-reference carries no constraints of its own
        if isinstance(node, RefSchema):
            return node, not prop.is_optional

        forced_required = False
        forced_optional = False

        for annotation in prop.annotations:
            name = annotation.name

            if name in NOT_EMPTY_ANNOTATIONS:
                forced_required = True
            if name == OPTIONAL_ANNOTATION:
                forced_optional = True

            if name in TYPE_ANNOTATIONS:
                node = self._apply_type(node, name)
            elif name == "IsEnum":
                node = self._apply_enum(node, annotation, hint)
            elif name == "IsArray":
                if not isinstance(node, ArraySchema):
                    node = ArraySchema(items=node)
            else:
                self._apply_constraint(node, annotation)

        if forced_required:
            return node, True
        if forced_optional:
            return node, False
        return node, not prop.is_optional

    def _apply_type(self, node: SchemaNode, name: str) -> SchemaNode:
        spec = TYPE_ANNOTATIONS[name]

        if isinstance(node, ArraySchema):
            if node.items is None or isinstance(node.items, RefSchema):
                return node
            node.items = self._apply_type(node.items, name)
            return node

        if not isinstance(node, PrimitiveSchema):
            # IsString() on an opaque or object-typed property: the annotation wins
            if spec.type_name is None:
                return node
            node = PrimitiveSchema(type_name=spec.type_name)

        if spec.type_name is not None:
            node.type_name = spec.type_name
        node.format = spec.format
        return node

    def _apply_enum(self, node: SchemaNode, annotation: AnnotationDescriptor, hint: str | None) -> SchemaNode:
        values = self._enum_values(annotation, hint)
        if values is None:
            logger.debug("Cannot evaluate the argument of @%s, keeping the synthesized type", annotation.name)
            return node

        leaf = PrimitiveSchema(type_name=enum_value_type(values), enum=values)
        if isinstance(node, ArraySchema):
            node.items = leaf
            return node
        if isinstance(node, PrimitiveSchema):
            leaf.min_length = node.min_length
            leaf.max_length = node.max_length
        return leaf

    def _enum_values(self, annotation: AnnotationDescriptor, hint: str | None) -> list[Any] | None:
        if not annotation.arguments:
            return None

        argument = self.provider.evaluate_annotation_argument(annotation.arguments[0])

        if isinstance(argument, TypeRefArgument):
            declaration = self.provider.find_declaration(argument.name, hint)
            if declaration is None or not declaration.is_enum:
                return None
            return self.provider.constant_values_of_enum(declaration)

        if isinstance(argument, LiteralArgument):
            value = argument.value
            if isinstance(value, dict):
                return list(value.values())
            if isinstance(value, list):
                return list(value)

        return None

    def _apply_constraint(self, node: SchemaNode, annotation: AnnotationDescriptor) -> None:
        name = annotation.name
        first = self._argument_value(annotation, 0)

        if name == "MinLength":
            self._set(node, "min_length", first)
        elif name == "MaxLength":
            self._set(node, "max_length", first)
        elif name == "Length":
            self._set(node, "min_length", first)
            second = self._argument_value(annotation, 1)
            if second is not None:
                self._set(node, "max_length", second)
        elif name == "Min":
            self._set(node, "minimum", first)
        elif name == "Max":
            self._set(node, "maximum", first)
        elif name == "IsPositive":
            self._set(node, "minimum", 0)
        elif name == "ArrayNotEmpty":
            self._set(node, "min_items", 1)
        elif name == "ArrayMinSize":
            self._set(node, "min_items", first)
        elif name == "ArrayMaxSize":
            self._set(node, "max_items", first)
        elif name not in NOT_EMPTY_ANNOTATIONS and name != OPTIONAL_ANNOTATION:
            logger.debug("Ignoring unsupported annotation @%s", name)

    def _argument_value(self, annotation: AnnotationDescriptor, index: int) -> Any:
        """Literal value of an argument, evaluating named constants through the provider."""
        if index >= len(annotation.arguments):
            return None
        argument = self.provider.evaluate_annotation_argument(annotation.arguments[index])
        if isinstance(argument, LiteralArgument):
            return argument.value
        return None

    def _set(self, node: SchemaNode, attribute: str, value: Any) -> None:
        if value is None:
            return
        # Element constraints on an array property apply to its items
        if isinstance(node, ArraySchema) and not hasattr(node, attribute) and node.items is not None:
            self._set(node.items, attribute, value)
            return
        if isinstance(node, ObjectSchema) or not hasattr(node, attribute):
            logger.debug("Constraint %s does not apply to %s", attribute, type(node).__name__)
            return
        setattr(node, attribute, value)
