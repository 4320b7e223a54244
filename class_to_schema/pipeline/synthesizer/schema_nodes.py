"""
Schema node definitions.

These nodes are the output of synthesis. They are mutated in place by the
annotation overlay while a schema is being built and are immutable once
handed back to a caller. `to_dict()` renders the JSON-Schema/OpenAPI shape.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

DeclarationKey = tuple[str, str]


@dataclass
class SchemaNode(ABC):
    """Base class for all schema nodes."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Render the node as a JSON-Schema dictionary."""
        pass

    def children(self) -> list[SchemaNode]:
        return []

    def ref_targets(self) -> set[DeclarationKey]:
        """Declarations this subtree points back to with a $ref."""
        targets: set[DeclarationKey] = set()
        for child in self.children():
            targets |= child.ref_targets()
        return targets

    def dependencies(self) -> set[DeclarationKey]:
        """Declarations this subtree expanded or refers back to."""
        keys: set[DeclarationKey] = set()
        for child in self.children():
            keys |= child.dependencies()
        return keys


@dataclass
class PrimitiveSchema(SchemaNode):
    """A leaf: string, number, integer, boolean or null, with constraints."""

    type_name: str = "string"
    format: str | None = None
    enum: list[Any] | None = None

    minimum: float | None = None
    maximum: float | None = None
    min_length: int | None = None
    max_length: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.type_name}
        if self.format is not None:
            d["format"] = self.format
        if self.enum is not None:
            d["enum"] = list(self.enum)
        if self.minimum is not None:
            d["minimum"] = self.minimum
        if self.maximum is not None:
            d["maximum"] = self.maximum
        if self.min_length is not None:
            d["minLength"] = self.min_length
        if self.max_length is not None:
            d["maxLength"] = self.max_length
        return d


@dataclass
class ArraySchema(SchemaNode):
    """An array of `items`."""

    items: SchemaNode | None = None
    min_items: int | None = None
    max_items: int | None = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": "array"}
        if self.items is not None:
            d["items"] = self.items.to_dict()
        if self.min_items is not None:
            d["minItems"] = self.min_items
        if self.max_items is not None:
            d["maxItems"] = self.max_items
        return d

    def children(self) -> list[SchemaNode]:
        return [self.items] if self.items is not None else []


@dataclass
class RefSchema(SchemaNode):
    """A back-reference to a declaration that is being expanded higher up."""

    target_name: str = ""
    ref_path: str = ""

    # Identity of the target declaration, not rendered
    target_key: DeclarationKey | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"$ref": self.ref_path}

    def ref_targets(self) -> set[DeclarationKey]:
        return {self.target_key} if self.target_key else set()

    def dependencies(self) -> set[DeclarationKey]:
        return self.ref_targets()


@dataclass
class ObjectSchema(SchemaNode):
    """An object with named properties.

    An object without a fixed property set (unknown or external shape) is
    "open": `additional_properties` is True.
    """

    properties: dict[str, SchemaNode] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)

    # True, False, a value schema (Record<string, V>) or None (not rendered)
    additional_properties: bool | SchemaNode | None = None

    # Declaration this object was expanded from, not rendered
    declaration_key: DeclarationKey | None = None

    # Whether to render an empty `required` list
    emit_empty_required: bool = True

    @property
    def is_open(self) -> bool:
        return not self.properties and self.additional_properties is True

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": "object"}
        d["properties"] = {name: node.to_dict() for name, node in self.properties.items()}
        if self.required or (self.emit_empty_required and not self.is_open):
            d["required"] = list(self.required)
        if isinstance(self.additional_properties, SchemaNode):
            d["additionalProperties"] = self.additional_properties.to_dict()
        elif self.additional_properties is not None:
            d["additionalProperties"] = self.additional_properties
        return d

    def children(self) -> list[SchemaNode]:
        nodes = list(self.properties.values())
        if isinstance(self.additional_properties, SchemaNode):
            nodes.append(self.additional_properties)
        return nodes

    def dependencies(self) -> set[DeclarationKey]:
        keys = super().dependencies()
        if self.declaration_key is not None:
            keys.add(self.declaration_key)
        return keys


def open_object(emit_empty_required: bool = True) -> ObjectSchema:
    """An object schema with no fixed property set."""
    return ObjectSchema(additional_properties=True, emit_empty_required=emit_empty_required)
