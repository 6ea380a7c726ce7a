"""
Adapters Package - Callers of the Cache.

Loaders:
    - CachedLoader: Memoizing wrapper for expensive lookups

Metrics:
    - InMemoryMetricsCollector: Simple in-memory collection
"""

from bounded_cache.adapters.cached_loader import CachedLoader
from bounded_cache.adapters.metrics_collector import InMemoryMetricsCollector

__all__ = [
    "CachedLoader",
    "InMemoryMetricsCollector",
]
