"""
Schema transformer engine.

`SchemaTransformer` wires the phases together around one source model
provider, one schema cache and one configuration:

1. Identity: resolve the requested class to a declaration
2. Extraction: list its own and inherited properties
3. Classification: classify each property type, substituting generics
4. Synthesis: build schema nodes recursively, breaking true cycles
5. Overlay: apply annotation constraints and optionality per property
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .analyzer.classifier import TypeClassifier
from .analyzer.extractor import PropertyExtractor
from .analyzer.identity_resolver import IdentityResolver, ShapeEvidence
from .config import SourceOptions, TransformerConfig
from .errors import TransformerDisposedError
from .source_model.loader import load_declaration_model
from .source_model.nodes import DeclarationKind
from .source_model.provider import SourceModelProvider
from .synthesizer.cache import SchemaCache
from .synthesizer.overlay import AnnotationOverlay
from .synthesizer.schema_nodes import SchemaNode, open_object
from .synthesizer.synthesizer import SchemaSynthesizer, SynthesisContext

logger = logging.getLogger(__name__)


@dataclass
class ClassIdentifier:
    """A class name plus what helps to tell same-named classes apart."""

    name: str = ""
    file_path: str | None = None
    evidence: ShapeEvidence | None = None


@dataclass
class TransformResult:
    """The schema of one class."""

    name: str = ""
    schema: SchemaNode | None = None
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "schema": self.schema.to_dict() if self.schema else {}}


class SchemaTransformer:
    """Converts class declarations into JSON-Schema shaped nodes.

    An instance is single-threaded: callers needing parallelism use one
    transformer per thread.
    """

    def __init__(self, provider: SourceModelProvider, config: TransformerConfig | None = None):
        """
        Initialize the transformer.

        Args:
            provider: Source model the declarations come from
            config: Transformer configuration (defaults when omitted)
        """
        self.config = config or TransformerConfig()
        self.cache = SchemaCache(self.config.max_cache_size, self.config.auto_cleanup)
        self._bind(provider)

    @classmethod
    def from_declaration_file(cls, path: str | Path, config: TransformerConfig | None = None) -> SchemaTransformer:
        """Build a transformer over a JSON declaration document.

        Raises:
            ConfigurationError: If the document cannot be loaded
        """
        return cls(load_declaration_model(path), config)

    def _bind(self, provider: SourceModelProvider | None) -> None:
        self.provider = provider
        if provider is None:
            self.classifier = None
            self.extractor = None
            self.resolver = None
            self.synthesizer = None
            return

        self.classifier = TypeClassifier(provider)
        self.extractor = PropertyExtractor(provider, self.classifier, self.config.include_non_public)
        self.resolver = IdentityResolver(provider, self.classifier, self.extractor)
        self.synthesizer = SchemaSynthesizer(
            provider,
            self.classifier,
            self.extractor,
            AnnotationOverlay(provider),
            self.config,
        )

    @property
    def is_disposed(self) -> bool:
        return self.provider is None

    def transform(self, identifier: Any, source_options: SourceOptions | None = None) -> TransformResult:
        """
        Build the schema of a class.

        Args:
            identifier: A class name, a ClassIdentifier, or a Python class
                (or instance) whose name and shape identify the declaration
            source_options: Where to look the class up

        Returns:
            TransformResult with the class name, its schema and any warnings.
            A class that cannot be found yields an open object schema.
        """
        self._check_alive()
        name, options, evidence = self._identify(identifier, source_options)

        resolution = self.resolver.resolve(name, options, evidence)
        warnings = list(resolution.warnings)

        if resolution.declaration is None:
            message = f"Class {name} not found in any source file"
            logger.warning(message)
            warnings.append(message)
            return TransformResult(name=name, schema=open_object(self.config.emit_empty_required), warnings=warnings)

        context = SynthesisContext(cache=self.cache)
        descriptor = self.classifier.describe_declaration(resolution.declaration)
        schema = self.synthesizer.synthesize(descriptor, {}, context)
        warnings.extend(context.warnings)

        return TransformResult(name=name, schema=schema, warnings=warnings)

    def transform_all(self, names: list[str] | None = None, source_options: SourceOptions | None = None) -> dict[str, TransformResult]:
        """
        Transform several classes; a missing one does not stop the batch.

        Args:
            names: Class names; every non-external declaration when omitted
            source_options: Where to look the classes up
        """
        self._check_alive()
        if names is None:
            names = []
            for declaration in self.provider.declarations():
                if declaration.is_external or declaration.name in names:
                    continue
                if declaration.kind in (DeclarationKind.CLASS, DeclarationKind.INTERFACE, DeclarationKind.ENUM):
                    names.append(declaration.name)

        return {name: self.transform(name, source_options) for name in names}

    def clear_cache(self) -> None:
        """Drop every cached schema; the provider stays bound."""
        self._check_alive()
        self.cache.clear()

    def dispose(self) -> None:
        """Release the provider. The transformer cannot be used afterwards."""
        if self.provider is not None:
            self.provider.close()
        self.cache.clear()
        self._bind(None)

    def _check_alive(self) -> None:
        if self.is_disposed:
            raise TransformerDisposedError("SchemaTransformer has been disposed; create a new one")

    def _identify(self, identifier: Any, source_options: SourceOptions | None) -> tuple[str, SourceOptions | None, ShapeEvidence | None]:
        if isinstance(identifier, str):
            return identifier, source_options, None

        if isinstance(identifier, ClassIdentifier):
            options = source_options
            if identifier.file_path:
                options = replace(source_options or SourceOptions(), file_path=identifier.file_path)
            return identifier.name, options, identifier.evidence

        name = getattr(identifier, "__name__", None) or type(identifier).__name__
        evidence = ShapeEvidence.from_object(identifier, self.config.allow_instantiation)
        return name, source_options, evidence
