"""
Configuration Package - Models and Loaders.

This package handles all configuration aspects of bounded_cache:
    - Pydantic models for type-safe configuration
    - YAML loader with validation
    - Support for configuration profiles

Configuration Structure:
    - CacheRegistryConfig: Root configuration object
    - CacheSettings: Limits for one named cache
    - LoggingConfig: Log level and format

Design Principles:
    - Type-safe via Pydantic
    - Validation on load (fail fast)
    - Support for profiles (e.g. development, production)
"""

from bounded_cache.config.loader import ConfigLoader, build_caches, load_config, merge_settings
from bounded_cache.config.models import (
    CacheRegistryConfig,
    CacheSettings,
    LoggingConfig,
)

__all__ = [
    "CacheRegistryConfig",
    "CacheSettings",
    "ConfigLoader",
    "LoggingConfig",
    "build_caches",
    "load_config",
    "merge_settings",
]
