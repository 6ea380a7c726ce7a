"""
Unit Tests for CachedLoader.

Tests for:
    - Cache hits and misses
    - Loader delegation
    - Statistics tracking
    - Cache invalidation
"""

from __future__ import annotations

from unittest.mock import Mock, call

import pytest

from bounded_cache.adapters.cached_loader import CachedLoader
from bounded_cache.adapters.metrics_collector import InMemoryMetricsCollector
from bounded_cache.caching.bounded_cache import BoundedCache
from bounded_cache.config.models import CacheSettings


@pytest.fixture
def compiler() -> Mock:
    """Fake template compiler."""
    compiler = Mock()
    compiler.side_effect = lambda path: f"<compiled {path}>"
    return compiler


class TestCachedLoader:
    """Tests for CachedLoader."""

    def test_first_call_misses_second_hits(self, compiler: Mock) -> None:
        """Loader runs only on the first call for given params."""
        loader = CachedLoader(compiler, operation="template")

        first = loader.load(path="index.html")
        second = loader.load(path="index.html")

        assert first == second == "<compiled index.html>"
        compiler.assert_called_once_with(path="index.html")

    def test_different_params_load_separately(self, compiler: Mock) -> None:
        """Each parameter set has its own entry."""
        loader = CachedLoader(compiler, operation="template")

        loader(path="a.html")
        loader(path="b.html")

        assert compiler.call_args_list == [call(path="a.html"), call(path="b.html")]

    def test_none_result_is_cached(self) -> None:
        """A loader result of None is not reloaded."""
        route_lookup = Mock(return_value=None)
        loader = CachedLoader(route_lookup, operation="route")

        assert loader.load(path="/missing") is None
        assert loader.load(path="/missing") is None
        route_lookup.assert_called_once()

    def test_uses_given_cache(self, compiler: Mock, hook) -> None:
        """A caller-supplied cache receives the entries."""
        cache = BoundedCache(max_count=1, eviction_hook=hook)
        loader = CachedLoader(compiler, cache=cache, operation="template")

        loader.load(path="a.html")
        loader.load(path="b.html")

        assert loader.cache is cache
        assert len(hook.calls) == 1
        assert hook.calls[0][1] == "<compiled a.html>"

    def test_builds_cache_from_settings(self, compiler: Mock) -> None:
        """Settings are used when no cache is given."""
        loader = CachedLoader(compiler, settings=CacheSettings(max_count=3))
        assert loader.cache.max_count == 3

    def test_invalidate(self, compiler: Mock) -> None:
        """Invalidated params are loaded again."""
        loader = CachedLoader(compiler, operation="template")
        loader.load(path="a.html")

        assert loader.invalidate(path="a.html") is True
        assert loader.invalidate(path="a.html") is False

        loader.load(path="a.html")
        assert compiler.call_count == 2

    def test_loader_error_is_not_cached(self) -> None:
        """Exceptions propagate and leave no entry behind."""
        failing = Mock(side_effect=[OSError("disk"), "ok"])
        loader = CachedLoader(failing)

        with pytest.raises(OSError):
            loader.load(path="x")

        assert loader.load(path="x") == "ok"

    def test_get_cache_stats(self, compiler: Mock) -> None:
        """Stats combine cache counters and loader counters."""
        loader = CachedLoader(compiler, operation="template")
        loader.load(path="a.html")
        loader.load(path="a.html")
        loader.load(path="b.html")

        stats = loader.get_cache_stats()

        assert stats["cache"]["hits"] == 1
        assert stats["cache"]["misses"] == 2
        assert stats["cache"]["entries"] == 2
        assert stats["operation"] == {"name": "template", "hits": 1, "misses": 2}

    def test_reports_metrics(self, compiler: Mock) -> None:
        """Hits, misses and compute time reach the collector."""
        metrics = InMemoryMetricsCollector()
        loader = CachedLoader(compiler, metrics_collector=metrics, operation="template")

        loader.load(path="a.html")
        loader.load(path="a.html")

        summary = metrics.get_metrics()
        assert summary["cache_miss"]["count"] == 1
        assert summary["cache_hit"]["count"] == 1
        assert summary["compute_seconds"]["count"] == 1
        assert metrics.get_samples("cache_hit")[0].tags == {"operation": "template"}
