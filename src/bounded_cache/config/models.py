"""
Configuration Models - Pydantic Models for Type-Safe Config.

All configuration is validated at load time using Pydantic.
"""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field


class CacheSettings(BaseModel):
    """Settings for a single cache instance."""

    max_count: Optional[int] = Field(default=None, gt=0)
    ttl_seconds: Optional[float] = Field(default=None, gt=0)
    log_access: bool = False

    model_config = {"extra": "forbid"}


class LoggingConfig(BaseModel):
    """Logging settings applied by configure_logging()."""

    level: str = Field(default="INFO")
    format: str = Field(default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")


class CacheRegistryConfig(BaseModel):
    """Root configuration object: named caches plus logging."""

    version: str = "1.0"
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    caches: Dict[str, CacheSettings] = Field(default_factory=dict)
