"""
Cached Loader - Memoizing Wrapper for Expensive Lookups.

Wraps a loader callable (template compiler, route resolver, ...) so that
repeated calls with the same parameters are served from a BoundedCache.

Design Notes:
    - Decorator/Wrapper pattern
    - Keys built with BoundedCache.make_key(operation, **params)
    - Tracks hits/misses and compute time via an optional MetricsCollector
    - A loader result of None is cached like any other value
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Generic, Optional, Protocol, TypeVar

from bounded_cache.caching.bounded_cache import MISSING, BoundedCache
from bounded_cache.config.models import CacheSettings

logger = logging.getLogger(__name__)

V = TypeVar("V")


class MetricsCollectorProtocol(Protocol):
    """Protocol for metrics collection."""

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a count metric."""
        ...

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a timing metric."""
        ...


class CachedLoader(Generic[V]):
    """
    Memoizing wrapper around a loader callable.

    Usage:
        compile_template = CachedLoader(compiler.compile, operation="template")

        # First call: cache miss, runs the compiler
        tpl = compile_template.load(path="views/index.html")

        # Second call with same params: cache hit
        tpl = compile_template.load(path="views/index.html")
    """

    def __init__(
        self,
        loader: Callable[..., V],
        cache: Optional[BoundedCache] = None,
        settings: Optional[CacheSettings] = None,
        metrics_collector: Optional[MetricsCollectorProtocol] = None,
        operation: str = "load",
    ) -> None:
        """
        Initialize cached loader.

        Args:
            loader: Callable invoked with keyword parameters on a miss
            cache: Cache instance (creates one if None)
            settings: Cache settings (used if cache is None)
            metrics_collector: Optional metrics collector for tracking
            operation: Operation name, used as key prefix and metric tag
        """
        self.loader = loader
        if cache is None:
            cache = BoundedCache.from_settings(settings or CacheSettings())
        self.cache = cache
        self.metrics = metrics_collector
        self.operation = operation

        self._hits = 0
        self._misses = 0

    def load(self, **params: Any) -> V:
        """
        Return the cached result for ``params``, loading it on a miss.

        Args:
            **params: Keyword parameters passed to the loader

        Returns:
            Loader result
        """
        cache_key = BoundedCache.make_key(self.operation, **params)

        cached = self.cache.get(cache_key)
        if cached is not MISSING:
            self._record("cache_hit")
            return cached

        self._record("cache_miss")
        logger.debug(f"Cache MISS for {self.operation}, loading {cache_key}")

        started = time.perf_counter()
        result = self.loader(**params)
        elapsed = time.perf_counter() - started
        if self.metrics:
            self.metrics.record_timing(
                "compute_seconds",
                elapsed,
                tags={"operation": self.operation},
            )

        return self.cache.set(cache_key, result)

    def __call__(self, **params: Any) -> V:
        return self.load(**params)

    def invalidate(self, **params: Any) -> bool:
        """
        Drop the cached result for ``params``.

        Returns:
            True if an entry was removed
        """
        removed = self.cache.delete(BoundedCache.make_key(self.operation, **params))
        return removed is not MISSING

    def get_cache_stats(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dict with cache stats and this loader's hit/miss counts
        """
        stats = self.cache.get_stats()
        return {
            "cache": {
                "hits": stats.hits,
                "misses": stats.misses,
                "hit_rate": stats.hit_rate,
                "evictions": stats.evictions,
                "expirations": stats.expirations,
                "entries": stats.current_entries,
            },
            "operation": {
                "name": self.operation,
                "hits": self._hits,
                "misses": self._misses,
            },
        }

    def _record(self, metric: str) -> None:
        if metric == "cache_hit":
            self._hits += 1
        else:
            self._misses += 1

        if self.metrics:
            self.metrics.record_count(
                metric,
                1,
                tags={"operation": self.operation},
            )
