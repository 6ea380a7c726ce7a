"""
Error Types.

Only construction can fail. A missing key is a normal outcome and is
reported with the ``MISSING`` marker, never with an exception.
"""

from __future__ import annotations

from typing import Any


class BoundedCacheError(Exception):
    """Base class for all bounded_cache errors."""
    pass


class InvalidConfiguration(BoundedCacheError, ValueError):
    """Raised when a cache is constructed with invalid options."""

    def __init__(self, option: str, value: Any, reason: str = "") -> None:
        self.option = option
        self.value = value
        message = f"invalid {option} {value!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
