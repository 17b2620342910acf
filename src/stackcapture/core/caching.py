"""Memoizing wrapper around a Resolver."""

from __future__ import annotations

import threading

from cachetools import LRUCache

from stackcapture.interfaces.resolver import Resolver
from stackcapture.models.symbol import Symbol

_MISSING = object()


class CachingResolver:
    """Resolver that remembers results by raw address.

    Resolution is idempotent, so caching never changes what a frame
    renders; it only saves repeated line-table walks when the same
    trace is formatted many times. Misses are cached as well.

    Example:
        resolver = CachingResolver(process_table(), maxsize=4096)
        stack = capture(resolver=resolver)
    """

    def __init__(self, resolver: Resolver, maxsize: int = 1024) -> None:
        if maxsize < 1:
            raise ValueError(f"maxsize must be positive, got {maxsize}")
        self._resolver = resolver
        self._lock = threading.Lock()
        self._cache: LRUCache[int, Symbol | None] = LRUCache(maxsize=maxsize)

    @property
    def resolver(self) -> Resolver:
        """The wrapped resolver."""
        return self._resolver

    @property
    def maxsize(self) -> int:
        return int(self._cache.maxsize)

    def __len__(self) -> int:
        return len(self._cache)

    def resolve(self, pc: int) -> Symbol | None:
        with self._lock:
            cached = self._cache.get(pc, _MISSING)
        if cached is not _MISSING:
            return cached  # type: ignore[return-value]

        symbol = self._resolver.resolve(pc)
        with self._lock:
            self._cache[pc] = symbol
        return symbol

    def clear(self) -> None:
        """Drop every cached entry."""
        with self._lock:
            self._cache.clear()
