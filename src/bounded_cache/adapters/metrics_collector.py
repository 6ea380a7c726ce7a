"""
In-Memory Metrics Collector.

Keeps the hit/miss counts and compute timings reported by CachedLoader.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class MetricSample:
    """One recorded value."""

    kind: str
    value: float
    tags: Dict[str, str] = field(default_factory=dict)
    recorded_at: datetime = field(default_factory=datetime.now)


class InMemoryMetricsCollector:
    """Collects samples per metric name."""

    def __init__(self) -> None:
        self._samples: Dict[str, List[MetricSample]] = {}

    def record_count(
        self,
        name: str,
        value: int,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a count metric."""
        self._add(name, MetricSample("count", value, dict(tags or {})))

    def record_timing(
        self,
        name: str,
        duration_seconds: float,
        tags: Optional[Dict[str, str]] = None,
    ) -> None:
        """Record a timing metric."""
        self._add(name, MetricSample("timing", duration_seconds, dict(tags or {})))

    def get_metrics(self) -> Dict[str, Dict[str, Any]]:
        """
        Summarize collected metrics.

        Returns:
            Per metric name: number of samples, their total and the last value
        """
        return {
            name: {
                "count": len(samples),
                "total": sum(s.value for s in samples),
                "last": samples[-1].value,
            }
            for name, samples in self._samples.items()
        }

    def get_samples(self, name: str) -> List[MetricSample]:
        """Samples recorded under a metric name, oldest first."""
        return list(self._samples.get(name, []))

    def clear(self) -> None:
        self._samples.clear()

    def _add(self, name: str, sample: MetricSample) -> None:
        self._samples.setdefault(name, []).append(sample)
