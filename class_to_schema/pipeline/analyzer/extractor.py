"""
Property extractor.

Turns one class declaration into the ordered list of its properties,
inherited ones first, each paired with the generic environment its type
has to be classified in.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..source_model.nodes import ClassDescriptor, PropertyDescriptor
from ..source_model.provider import SourceModelProvider
from .classifier import TypeClassifier
from .type_nodes import GenericEnvironment

logger = logging.getLogger(__name__)


@dataclass
class ExtractedProperty:
    """A property together with where and how to classify its type."""

    descriptor: PropertyDescriptor
    declaring_class: ClassDescriptor | None = None
    environment: GenericEnvironment = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def hint(self) -> str | None:
        """Source location used to resolve names in the property type."""
        return self.declaring_class.source_location if self.declaring_class else None


class PropertyExtractor:
    """Collects own and inherited properties of a declaration."""

    def __init__(self, provider: SourceModelProvider, classifier: TypeClassifier, include_non_public: bool = False):
        """
        Initialize the extractor.

        Args:
            provider: Source model used for members and base lookups
            classifier: Classifier used for `extends`-site type arguments
            include_non_public: Keep private/protected members
        """
        self.provider = provider
        self.classifier = classifier
        self.include_non_public = include_non_public

    def extract(self, declaration: ClassDescriptor, environment: GenericEnvironment) -> list[ExtractedProperty]:
        """
        Extract the properties of a declaration.

        Args:
            declaration: The class or interface declaration
            environment: Environment already bound for this declaration's
                own type parameters

        Returns:
            Base-first ordered properties; a redeclared name replaces the
            inherited entry at its original position
        """
        collected: dict[str, ExtractedProperty] = {}
        self._collect(declaration, environment, collected, set())
        return list(collected.values())

    def _collect(
        self,
        declaration: ClassDescriptor,
        environment: GenericEnvironment,
        collected: dict[str, ExtractedProperty],
        lineage: set[tuple[str, str]],
    ) -> None:
        # Inheritance loops contribute nothing past the first visit
        if declaration.key in lineage:
            return
        lineage.add(declaration.key)

        if declaration.base is not None:
            self._collect_base(declaration, environment, collected, lineage)

        for prop in self.provider.members(declaration):
            if not self.is_visible(prop):
                continue
            collected[prop.name] = ExtractedProperty(
                descriptor=prop,
                declaring_class=declaration,
                environment=environment,
            )

    def _collect_base(
        self,
        declaration: ClassDescriptor,
        environment: GenericEnvironment,
        collected: dict[str, ExtractedProperty],
        lineage: set[tuple[str, str]],
    ) -> None:
        base_ref = declaration.base
        base = self.provider.find_declaration(base_ref.name, declaration.source_location)
        if base is None or base.is_enum:
            logger.debug("Base class %s of %s is not available, skipping inherited members", base_ref.name, declaration.name)
            return

        # Arguments at the extends site are resolved in the current environment
        type_args = [self.classifier.classify(arg, environment, declaration.source_location) for arg in base_ref.type_args]
        base_environment = self.classifier.bind_type_arguments(base, type_args)
        self._collect(base, base_environment, collected, lineage)

    def is_visible(self, prop: PropertyDescriptor) -> bool:
        """Static members never appear in a schema; non-public ones only on request."""
        if prop.is_static:
            return False
        if prop.visibility != "public" and not self.include_non_public:
            return False
        return True
