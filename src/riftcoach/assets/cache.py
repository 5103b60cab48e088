# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Expiring in-memory cache for catalog lookups."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass
class CacheEntry:
    """Cached value and the clock reading when it was stored."""

    value: Any
    created_at: float


class AssetCache:
    """Keyed cache with a single TTL.

    The clock is injected so tests can move time without sleeping.
    """

    def __init__(self, ttl_seconds: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        """Initialize cache.

        Args:
            ttl_seconds: Time-to-live for cache entries (default 1 hour)
            clock: Monotonic time source in seconds
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None when absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() - entry.created_at > self.ttl_seconds:
            del self._entries[key]
            return None

        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, created_at=self._clock())

    def invalidate(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Clear all cache entries."""
        self._entries.clear()
