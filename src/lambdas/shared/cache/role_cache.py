"""In-process cache for role documents.

Role documents are rarely-changing reference data read on most requests.
RoleCache keeps a denormalized copy of each role keyed by role name inside a
fixed namespace. Writes to the role store refresh the entry; there is no
staleness check beyond an optional TTL.

Absence is cached too: ``set(name, None)`` records that the last lookup found
nothing. ``get`` returns None for both a miss and a cached absence, so callers
treat any falsy result as "no such role".
"""

from __future__ import annotations

import copy
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any

ROLES_CACHE_NAMESPACE = "roles"


@dataclass
class CacheStats:
    """Statistics for cache performance monitoring."""

    hits: int = 0
    misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Calculate hit rate as hits / total operations."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total

    def reset(self) -> None:
        """Reset all counters to zero."""
        self.hits = 0
        self.misses = 0


@dataclass
class CacheEntry:
    """A single cache entry with optional TTL."""

    data: dict[str, Any] | None
    created_at: float  # time.time() when entry was created
    ttl_seconds: float | None = None

    @property
    def is_expired(self) -> bool:
        """Check if entry has exceeded its TTL."""
        if self.ttl_seconds is None:
            return False
        return time.time() - self.created_at > self.ttl_seconds


class RoleCache:
    """Keyed role cache with optional TTL and LRU eviction.

    Thread-safe: every operation holds an internal lock.

    Attributes:
        namespace: Cache region; keys are (namespace, role_name).
        max_entries: Maximum number of entries before LRU eviction.
        ttl_seconds: Entry lifetime, None for no expiry.
        stats: Cache statistics for monitoring.

    Example:
        cache = RoleCache()
        service = RoleAccessService(table, cache)
    """

    def __init__(
        self,
        namespace: str = ROLES_CACHE_NAMESPACE,
        max_entries: int = 256,
        ttl_seconds: float | None = None,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.namespace = namespace
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self.stats = CacheStats()
        self._lock = threading.Lock()
        # OrderedDict maintains insertion order for LRU tracking
        self._entries: OrderedDict[tuple[str, str], CacheEntry] = OrderedDict()

    def _key(self, role_name: str) -> tuple[str, str]:
        return (self.namespace, role_name)

    def get(self, role_name: str) -> dict[str, Any] | None:
        """Get a copy of the cached role document.

        Args:
            role_name: Role name

        Returns:
            Cached document if present and not expired, None otherwise
            (including when absence was cached).
        """
        key = self._key(role_name)
        with self._lock:
            entry = self._entries.get(key)

            if entry is None:
                self.stats.misses += 1
                return None

            if entry.is_expired:
                del self._entries[key]
                self.stats.misses += 1
                return None

            self._entries.move_to_end(key)
            self.stats.hits += 1
            return copy.deepcopy(entry.data)

    def set(self, role_name: str, value: dict[str, Any] | None) -> None:
        """Store a copy of a role document (or None to record absence)."""
        key = self._key(role_name)
        with self._lock:
            if key in self._entries:
                del self._entries[key]

            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)

            self._entries[key] = CacheEntry(
                data=copy.deepcopy(value),
                created_at=time.time(),
                ttl_seconds=self.ttl_seconds,
            )

    def contains(self, role_name: str) -> bool:
        """Check whether a live entry exists, including cached absence."""
        with self._lock:
            entry = self._entries.get(self._key(role_name))
            return entry is not None and not entry.is_expired

    def invalidate(self, role_name: str) -> None:
        """Drop the entry for a role name if present."""
        with self._lock:
            self._entries.pop(self._key(role_name), None)

    def clear(self) -> None:
        """Remove all entries and reset stats."""
        with self._lock:
            self._entries.clear()
            self.stats.reset()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
