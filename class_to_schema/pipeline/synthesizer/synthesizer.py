"""
Schema synthesizer.

The recursive core: turns a classified type into a schema node. Class
references are expanded unless the class is an ancestor of the current
recursion point, in which case a $ref is emitted. A class reached twice as
siblings (diamond reuse) is expanded both times.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..analyzer.classifier import TypeClassifier
from ..analyzer.extractor import ExtractedProperty, PropertyExtractor
from ..analyzer.type_nodes import GenericEnvironment, TypeDescriptor, TypeKind, UtilityOperator
from ..config import TransformerConfig
from ..constants import PRIMITIVE_TYPES
from ..source_model.nodes import ClassDescriptor
from ..source_model.provider import SourceModelProvider
from .cache import SchemaCache
from .overlay import AnnotationOverlay, enum_value_type
from .schema_nodes import (
    ArraySchema,
    DeclarationKey,
    ObjectSchema,
    PrimitiveSchema,
    RefSchema,
    SchemaNode,
    open_object,
)


@dataclass
class SynthesisContext:
    """State of one top-level synthesis.

    Attributes:
        visited: Declarations being expanded, i.e. ancestors of the current
            recursion point (the VisitedSet)
        cache: Cross-call schema cache, or None to disable caching
        opaque_stack: Opaque shapes being introspected, by source text
        warnings: Non-fatal problems met along the way
    """

    visited: dict[DeclarationKey, ClassDescriptor] = field(default_factory=dict)
    cache: SchemaCache | None = None
    opaque_stack: set[str] = field(default_factory=set)
    warnings: list[str] = field(default_factory=list)


class SchemaSynthesizer:
    """Builds schema nodes from classified types."""

    def __init__(
        self,
        provider: SourceModelProvider,
        classifier: TypeClassifier,
        extractor: PropertyExtractor,
        overlay: AnnotationOverlay,
        config: TransformerConfig,
    ):
        self.provider = provider
        self.classifier = classifier
        self.extractor = extractor
        self.overlay = overlay
        self.config = config

    def synthesize(self, descriptor: TypeDescriptor, environment: GenericEnvironment, context: SynthesisContext) -> SchemaNode:
        """
        Synthesize the schema of a classified type.

        Args:
            descriptor: The classified type
            environment: Environment of the reference site
            context: Visited set, cache and warnings of this synthesis

        Returns:
            The schema node
        """
        kind = descriptor.kind

        if kind == TypeKind.PRIMITIVE:
            return self._synthesize_primitive(descriptor)

        if kind == TypeKind.ARRAY:
            return ArraySchema(items=self.synthesize(descriptor.element, environment, context))

        if kind == TypeKind.ENUM:
            return self._synthesize_enum(descriptor.declaration, context)

        if kind == TypeKind.UTILITY:
            return self._synthesize_utility(descriptor, environment, context)

        if kind == TypeKind.CLASS:
            return self._synthesize_class(descriptor, context)

        return self._synthesize_opaque(descriptor, environment, context)

    def synthesize_properties(self, properties: list[ExtractedProperty], context: SynthesisContext) -> ObjectSchema:
        """Build an object schema from extracted properties."""
        node = ObjectSchema(emit_empty_required=self.config.emit_empty_required)

        for prop in properties:
            descriptor = self.classifier.classify(prop.descriptor.type_expr, prop.environment, prop.hint)
            child = self.synthesize(descriptor, prop.environment, context)
            child, is_required = self.overlay.apply(prop.descriptor, child, prop.hint)

            node.properties[prop.name] = child
            if is_required:
                node.required.append(prop.name)

        return node

    def _synthesize_primitive(self, descriptor: TypeDescriptor) -> SchemaNode:
        spec = PRIMITIVE_TYPES.get(descriptor.primitive)
        if spec is None:
            return PrimitiveSchema(type_name="string")
        return PrimitiveSchema(type_name=spec.type_name, format=spec.format)

    def _synthesize_enum(self, declaration: ClassDescriptor, context: SynthesisContext) -> SchemaNode:
        def compute() -> SchemaNode:
            values = self.provider.constant_values_of_enum(declaration)
            return PrimitiveSchema(type_name=enum_value_type(values), enum=values)

        if context.cache is None:
            return compute()
        key = SchemaCache.key_for(declaration.source_location, declaration.name, "enum")
        return context.cache.get_or_compute(key, compute)

    def _synthesize_class(self, descriptor: TypeDescriptor, context: SynthesisContext) -> SchemaNode:
        declaration = descriptor.declaration
        key = declaration.key

        # Only a live ancestor breaks the recursion
        if key in context.visited:
            return RefSchema(
                target_name=declaration.name,
                ref_path=f"{self.config.ref_prefix}{declaration.name}",
                target_key=key,
            )

        signature = ", ".join(arg.signature() for arg in descriptor.type_args)
        cache_key = SchemaCache.key_for(declaration.source_location, declaration.name, signature)

        # Inside an opaque introspection the result also depends on the opaque stack
        use_cache = context.cache is not None and not context.opaque_stack
        if use_cache:
            cached = context.cache.get(cache_key, active=context.visited)
            if cached is not None:
                return cached

        outer = set(context.visited)
        context.visited[key] = declaration
        try:
            environment = self.classifier.bind_type_arguments(declaration, descriptor.type_args)
            properties = self.extractor.extract(declaration, environment)
            node = self.synthesize_properties(properties, context)
        finally:
            del context.visited[key]

        node.declaration_key = key

        # A subtree pointing above itself depends on where it was reached
        if use_cache and not (node.ref_targets() & outer):
            context.cache.put(cache_key, node)

        return node

    def _synthesize_utility(self, descriptor: TypeDescriptor, environment: GenericEnvironment, context: SynthesisContext) -> SchemaNode:
        operator = descriptor.operator

        if operator == UtilityOperator.RECORD:
            return self._synthesize_record(descriptor, environment, context)

        node = self.synthesize(descriptor.target, environment, context)
        if not isinstance(node, ObjectSchema) or node.is_open:
            return node

        if operator == UtilityOperator.PARTIAL:
            node.required = []
        elif operator == UtilityOperator.REQUIRED:
            node.required = list(node.properties)
        elif operator in (UtilityOperator.PICK, UtilityOperator.OMIT):
            keys = set(descriptor.keys or [])
            keep = keys if operator == UtilityOperator.PICK else set(node.properties) - keys
            node.properties = {name: child for name, child in node.properties.items() if name in keep}
            node.required = [name for name in node.required if name in keep]

        return node

    def _synthesize_record(self, descriptor: TypeDescriptor, environment: GenericEnvironment, context: SynthesisContext) -> SchemaNode:
        if descriptor.keys:
            node = ObjectSchema(emit_empty_required=self.config.emit_empty_required)
            for key in descriptor.keys:
                node.properties[key] = self.synthesize(descriptor.target, environment, context)
                node.required.append(key)
            return node

        return ObjectSchema(
            additional_properties=self.synthesize(descriptor.target, environment, context),
            emit_empty_required=self.config.emit_empty_required,
        )

    def _synthesize_opaque(self, descriptor: TypeDescriptor, environment: GenericEnvironment, context: SynthesisContext) -> SchemaNode:
        members = [m for m in self.provider.properties_of_opaque_type(descriptor.raw) if self.extractor.is_visible(m)]
        marker = descriptor.raw.source_text if descriptor.raw else ""

        if not members:
            if descriptor.raw is not None:
                context.warnings.append(f"Type {marker} could not be resolved, using an open object")
            return open_object(self.config.emit_empty_required)

        if marker in context.opaque_stack:
            return open_object(self.config.emit_empty_required)

        context.opaque_stack.add(marker)
        try:
            properties = [ExtractedProperty(descriptor=m, environment=environment) for m in members]
            return self.synthesize_properties(properties, context)
        finally:
            context.opaque_stack.discard(marker)
