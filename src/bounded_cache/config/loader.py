"""
Configuration Loader - YAML Loading with Validation.

Reads a cache registry file, optionally overlays a named profile from
``<base_path>/<profiles_dir>/<profile>.yaml``, and validates the result
with the Pydantic models. Value errors surface as InvalidConfiguration,
like a bad constructor call.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Union

import yaml
from pydantic import ValidationError

from bounded_cache.caching.bounded_cache import BoundedCache, EvictionHook
from bounded_cache.config.models import CacheRegistryConfig
from bounded_cache.errors import InvalidConfiguration

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def merge_settings(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Overlay one settings tree onto another.

    Nested mappings are merged key by key; any other overlay value
    replaces the base value. Neither input is modified.
    """
    merged = dict(base)
    for key, value in overlay.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = value
    return merged


class ConfigLoader:
    """Builds a CacheRegistryConfig from YAML files or plain dicts."""

    def __init__(
        self,
        base_path: Optional[Path] = None,
        profiles_dir: PathLike = Path("config") / "profiles",
    ) -> None:
        """
        Args:
            base_path: Directory relative paths are resolved against
            profiles_dir: Profile directory, relative to base_path
        """
        self._base_path = Path(base_path) if base_path else Path(".")
        self._profiles_dir = self._base_path / profiles_dir

    def load(self, config_path: PathLike, profile: Optional[str] = None) -> CacheRegistryConfig:
        """
        Load, overlay and validate a configuration file.

        Args:
            config_path: YAML file, absolute or relative to base_path
            profile: Optional profile name overlaid on the file

        Returns:
            Validated CacheRegistryConfig object

        Raises:
            FileNotFoundError: If the file or the profile doesn't exist
            InvalidConfiguration: If the contents are invalid
        """
        path = Path(config_path)
        if not path.is_absolute():
            path = self._base_path / path
        settings = self._read(path)

        if profile:
            profile_path = self._profiles_dir / f"{profile}.yaml"
            if not profile_path.exists():
                raise FileNotFoundError(f"Profile not found: {profile}")
            settings = merge_settings(settings, self._read(profile_path))
            logger.debug(f"Applied profile {profile!r} from {profile_path}")

        return self.load_from_dict(settings)

    def load_from_dict(self, config_dict: Mapping[str, Any]) -> CacheRegistryConfig:
        """
        Validate an already-parsed configuration.

        Raises:
            InvalidConfiguration: Naming the first invalid option
        """
        try:
            return CacheRegistryConfig.model_validate(config_dict)
        except ValidationError as e:
            first = e.errors()[0]
            option = ".".join(str(part) for part in first["loc"]) or "config"
            raise InvalidConfiguration(option, first.get("input"), first["msg"]) from e

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise InvalidConfiguration(str(path), type(data).__name__, "top level must be a mapping")
        return data


def load_config(
    config_path: Union[str, Path],
    profile: Optional[str] = None,
    base_path: Optional[Path] = None,
) -> CacheRegistryConfig:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to YAML config file
        profile: Optional profile name
        base_path: Base path for resolving relative paths

    Returns:
        Validated CacheRegistryConfig object
    """
    loader = ConfigLoader(base_path=base_path)
    return loader.load(config_path, profile)


def build_caches(
    config: CacheRegistryConfig,
    eviction_hooks: Optional[Mapping[str, EvictionHook]] = None,
    clock: Callable[[], float] = time.time,
) -> Dict[str, BoundedCache]:
    """
    Create one cache per configured name.

    Args:
        config: Validated configuration
        eviction_hooks: Optional hook per cache name
        clock: Clock shared by all caches

    Returns:
        Caches by name
    """
    hooks = eviction_hooks or {}
    unknown = set(hooks) - set(config.caches)
    if unknown:
        raise InvalidConfiguration("eviction_hooks", sorted(unknown), "no such cache")

    caches = {
        name: BoundedCache.from_settings(settings, eviction_hook=hooks.get(name), clock=clock)
        for name, settings in config.caches.items()
    }
    logger.info(f"Built {len(caches)} caches: {', '.join(caches) or '-'}")
    return caches
