"""
Pytest Configuration and Shared Fixtures.

This module contains fixtures available to all tests.
"""

from __future__ import annotations

import random
from typing import Any, Hashable, List, Tuple

import pytest


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingHook:
    """Eviction hook that remembers every (key, value) it was called with."""

    def __init__(self) -> None:
        self.calls: List[Tuple[Hashable, Any]] = []

    def __call__(self, key: Hashable, value: Any) -> None:
        self.calls.append((key, value))

    @property
    def keys(self) -> List[Hashable]:
        return [key for key, _ in self.calls]


@pytest.fixture(autouse=True)
def set_random_seed():
    """Ensure all tests are deterministic."""
    random.seed(42)
    yield


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def hook() -> RecordingHook:
    """Recording eviction hook."""
    return RecordingHook()
