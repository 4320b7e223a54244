"""
Identity resolver for class names.

Finds the declaration a caller means by a class name. When several
declarations share the name, candidates are scored against structural
evidence about the caller's class (property names and, when available,
observed values); the best unique match wins.
"""

from __future__ import annotations

import datetime
import enum
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any

from ..config import SourceOptions
from ..constants import PRIMITIVE_TYPES
from ..source_model.nodes import ClassDescriptor
from ..source_model.provider import SourceModelProvider
from .classifier import TypeClassifier
from .extractor import PropertyExtractor
from .type_nodes import TypeDescriptor, TypeKind

logger = logging.getLogger(__name__)

# Primitive keywords that accept any observed value
_UNTYPED_PRIMITIVES = {"any", "unknown", "symbol"}


@dataclass
class ShapeEvidence:
    """What is known about the shape of the class a caller asks for."""

    property_names: set[str] = field(default_factory=set)
    observed_values: dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.property_names and not self.observed_values

    @classmethod
    def from_object(cls, obj: Any, allow_instantiation: bool = False) -> ShapeEvidence:
        """
        Gather evidence from a Python class or instance.

        Annotated names and public data attributes are read without running
        any user code. With `allow_instantiation`, a class is also
        instantiated without arguments and its instance attributes observed;
        a constructor that fails is ignored.

        Args:
            obj: A class or an instance
            allow_instantiation: Whether calling the class is allowed
        """
        evidence = cls()
        klass = obj if inspect.isclass(obj) else type(obj)

        for base in reversed(klass.__mro__):
            if base is object:
                continue
            evidence.property_names.update(inspect.get_annotations(base))
            for name, value in vars(base).items():
                if _is_data_attribute(name, value):
                    evidence.property_names.add(name)
                    evidence.observed_values[name] = value

        instance = None
        if not inspect.isclass(obj):
            instance = obj
        elif allow_instantiation:
            try:
                instance = obj()
            except Exception as e:
                logger.debug("Could not instantiate %s for shape evidence: %s", klass.__name__, e)

        if instance is not None and hasattr(instance, "__dict__"):
            for name, value in vars(instance).items():
                if _is_data_attribute(name, value):
                    evidence.property_names.add(name)
                    evidence.observed_values[name] = value

        return evidence


def _is_data_attribute(name: str, value: Any) -> bool:
    if name.startswith("_"):
        return False
    return not (callable(value) or isinstance(value, (staticmethod, classmethod, property)))


@dataclass
class Resolution:
    """Outcome of resolving a class name."""

    declaration: ClassDescriptor | None = None
    candidates: list[ClassDescriptor] = field(default_factory=list)
    ambiguous: bool = False
    warnings: list[str] = field(default_factory=list)


class IdentityResolver:
    """Disambiguates same-named declarations."""

    def __init__(self, provider: SourceModelProvider, classifier: TypeClassifier, extractor: PropertyExtractor):
        """
        Initialize the resolver.

        Args:
            provider: Source model to search
            classifier: Used to type-check observed values
            extractor: Used to list candidate properties, inherited ones included
        """
        self.provider = provider
        self.classifier = classifier
        self.extractor = extractor

    def resolve(self, name: str, options: SourceOptions | None = None, evidence: ShapeEvidence | None = None) -> Resolution:
        """
        Resolve a class name to one declaration.

        Args:
            name: Class name
            options: Where to search (file, external package)
            evidence: Structural evidence used to break name collisions

        Returns:
            Resolution with the chosen declaration (None when not found)
        """
        candidates = self.provider.find_declarations(name, options)
        resolution = Resolution(candidates=candidates)

        if not candidates:
            return resolution

        if len(candidates) == 1:
            resolution.declaration = candidates[0]
            return resolution

        if evidence is None or evidence.is_empty:
            return self._ambiguous(resolution, name, candidates, "no structural evidence")

        scores = [self.score(candidate, evidence) for candidate in candidates]
        best = max(scores)
        winners = [candidate for candidate, score in zip(candidates, scores) if score == best]
        logger.debug("Candidate scores for %s: %s", name, dict(zip((c.source_location for c in candidates), scores)))

        if len(winners) > 1:
            return self._ambiguous(resolution, name, winners, f"{len(winners)} candidates score {best}")

        resolution.declaration = winners[0]
        return resolution

    def score(self, declaration: ClassDescriptor, evidence: ShapeEvidence) -> int:
        """Score how well a declaration matches the evidence."""
        environment = self.classifier.bind_type_arguments(declaration, [])
        declared = {prop.name: prop for prop in self.extractor.extract(declaration, environment)}

        score = 0
        for name in evidence.property_names:
            score += 1 if name in declared else -1

        for name, value in evidence.observed_values.items():
            prop = declared.get(name)
            if prop is None:
                continue
            descriptor = self.classifier.classify(prop.descriptor.type_expr, prop.environment, prop.hint)
            matches = self._value_matches(value, descriptor)
            if matches is not None:
                score += 1 if matches else -1

        return score

    def _ambiguous(self, resolution: Resolution, name: str, winners: list[ClassDescriptor], reason: str) -> Resolution:
        chosen = winners[0]
        message = f"Class {name} is declared {len(resolution.candidates)} times ({reason}); using the one in {chosen.source_location}"
        logger.warning(message)
        resolution.declaration = chosen
        resolution.ambiguous = True
        resolution.warnings.append(message)
        return resolution

    def _value_matches(self, value: Any, descriptor: TypeDescriptor) -> bool | None:
        """Whether an observed value fits a type; None when it says nothing."""
        if value is None:
            return None

        kind = descriptor.kind

        if kind == TypeKind.PRIMITIVE:
            return self._primitive_matches(value, descriptor.primitive)

        if kind == TypeKind.ARRAY:
            if not isinstance(value, (list, tuple, set, frozenset)):
                return False
            for item in value:
                if self._value_matches(item, descriptor.element) is False:
                    return False
            return True

        if kind == TypeKind.ENUM:
            if isinstance(value, enum.Enum):
                value = value.value
            return value in self.provider.constant_values_of_enum(descriptor.declaration)

        if kind in (TypeKind.CLASS, TypeKind.UTILITY):
            return not isinstance(value, (str, bytes, int, float, bool, list, tuple))

        return None

    def _primitive_matches(self, value: Any, primitive: str) -> bool | None:
        if primitive in _UNTYPED_PRIMITIVES:
            return None

        spec = PRIMITIVE_TYPES[primitive]
        if spec.format == "date-time":
            return isinstance(value, (datetime.date, str))
        if spec.format == "binary":
            return isinstance(value, (bytes, bytearray, memoryview, str))
        if spec.type_name == "string":
            return isinstance(value, str)
        if spec.type_name in ("number", "integer"):
            return isinstance(value, (int, float)) and not isinstance(value, bool)
        if spec.type_name == "boolean":
            return isinstance(value, bool)
        return None
