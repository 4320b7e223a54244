"""
Configuration for the schema transformer.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import DEFAULT_REF_PREFIX


@dataclass
class TransformerConfig:
    """Configuration options for schema synthesis."""

    # Number of cached schemas kept before the oldest half is evicted
    max_cache_size: int = 100

    # Whether to evict automatically once max_cache_size is exceeded
    auto_cleanup: bool = True

    # Prefix of the $ref path emitted for circular back-references
    ref_prefix: str = DEFAULT_REF_PREFIX

    # Include private/protected members in object schemas
    include_non_public: bool = False

    # Allow instantiating Python classes to gather collision evidence
    allow_instantiation: bool = False

    # Emit "required": [] on objects without required properties
    emit_empty_required: bool = True

    @staticmethod
    def from_dict(d: dict) -> TransformerConfig:
        """Create a config from a dictionary."""
        config = TransformerConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "max_cache_size": self.max_cache_size,
            "auto_cleanup": self.auto_cleanup,
            "ref_prefix": self.ref_prefix,
            "include_non_public": self.include_non_public,
            "allow_instantiation": self.allow_instantiation,
            "emit_empty_required": self.emit_empty_required,
        }


@dataclass
class SourceOptions:
    """Where to look for the class being transformed.

    Attributes:
        is_external: Look among third-party (external) declarations
        package_name: Package the external declaration belongs to
        file_path: Restrict the lookup to one source location
    """

    is_external: bool = False
    package_name: str | None = None
    file_path: str | None = None
