"""
Schema cache.

Memoizes completed class schemas across transform calls. An entry records
the declarations its subtree depends on; it is only served while none of
them is being expanded, so a cached answer is always the answer a fresh
synthesis would give.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Collection
from dataclasses import dataclass, field

from .schema_nodes import DeclarationKey, SchemaNode

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str, str]


@dataclass
class CacheEntry:
    """A cached schema and the declarations it was built from."""

    node: SchemaNode
    dependencies: frozenset[DeclarationKey] = field(default_factory=frozenset)


class SchemaCache:
    """Cache of completed schemas keyed by declaration identity."""

    def __init__(self, max_size: int = 100, auto_cleanup: bool = True):
        """
        Initialize the cache.

        Args:
            max_size: Number of entries kept before the oldest half is evicted
            auto_cleanup: Whether eviction happens automatically
        """
        self.max_size = max_size
        self.auto_cleanup = auto_cleanup
        self._entries: dict[CacheKey, CacheEntry] = {}

    @staticmethod
    def key_for(source_location: str, name: str, type_signature: str = "") -> CacheKey:
        """Build the key of a declaration (plus its generic arguments)."""
        return (source_location, name, type_signature)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    def get(self, key: CacheKey, active: Collection[DeclarationKey] = ()) -> SchemaNode | None:
        """
        Return a copy of the cached node, or None.

        Args:
            key: Cache key of the declaration
            active: Declarations currently being expanded; an entry that
                depends on any of them is not served
        """
        entry = self._entries.get(key)
        if entry is None:
            return None
        if any(dependency in entry.dependencies for dependency in active):
            return None
        return copy.deepcopy(entry.node)

    def put(self, key: CacheKey, node: SchemaNode) -> None:
        """Store a copy of `node`; overwriting an entry is harmless."""
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(node=copy.deepcopy(node), dependencies=frozenset(node.dependencies()))
        if self.auto_cleanup and len(self._entries) > self.max_size:
            self.evict()

    def get_or_compute(
        self,
        key: CacheKey,
        compute: Callable[[], SchemaNode],
        active: Collection[DeclarationKey] = (),
    ) -> SchemaNode:
        """Return the cached node for `key`, computing and storing it if needed."""
        node = self.get(key, active)
        if node is None:
            node = compute()
            self.put(key, node)
        return node

    def evict(self) -> None:
        """Remove the oldest half of the entries."""
        count = len(self._entries) // 2
        for key in list(self._entries)[:count]:
            del self._entries[key]
        logger.debug("Evicted %d cached schemas, %d left", count, len(self._entries))

    def clear(self) -> None:
        self._entries.clear()
