"""Content cache configuration.

Loads and validates configuration from ~/.content_cache/config.json.
Uses Pydantic for schema validation with sensible defaults. The namespace
and cascade tables live here as plain data; ``build_registry`` and
``build_cascades`` turn them into the runtime tables a ContentCache is
constructed with.

Usage:
    from content_cache.config import get_config
    from content_cache import ContentCache

    config = get_config()
    cache = ContentCache.from_config(config)
"""

from __future__ import annotations

import json
import logging
import os
import threading
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError, field_validator

from content_cache.errors import ConfigurationError, ErrorCode
from content_cache.registry import (
    DEFAULT_CASCADES,
    DEFAULT_NAMESPACE_TTLS,
    CascadeTable,
    NamespaceRegistry,
)

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".content_cache" / "config.json"

# Current config schema version
CONFIG_VERSION = 1


class LogConfig(BaseModel):
    """Logging preferences.

    Attributes:
        level: Root log level name.
        structured: Emit single-line JSON records instead of plain text.
    """

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    structured: bool = False


class CacheConfig(BaseModel):
    """Root configuration for a content cache instance.

    Attributes:
        max_entries: Capacity of the store, in entries.
        sweep_interval_seconds: Period of the background expiry sweeper.
        start_sweeper: Start the sweeper thread when the cache is built.
        namespaces: Namespace name -> TTL in seconds.
        cascades: Mutation kind -> ordered namespaces to invalidate.
        log: Logging preferences for the CLI and embedding applications.
    """

    config_version: int = CONFIG_VERSION
    max_entries: int = Field(default=100, ge=1, le=100_000)
    sweep_interval_seconds: float = Field(default=60.0, ge=1.0, le=3600.0)
    start_sweeper: bool = True
    namespaces: dict[str, float] = Field(default_factory=lambda: dict(DEFAULT_NAMESPACE_TTLS))
    cascades: dict[str, list[str]] = Field(
        default_factory=lambda: {kind: list(namespaces) for kind, namespaces in DEFAULT_CASCADES}
    )
    log: LogConfig = Field(default_factory=LogConfig)

    @field_validator("namespaces")
    @classmethod
    def _ttls_positive(cls, value: dict[str, float]) -> dict[str, float]:
        bad = [name for name, ttl in value.items() if ttl <= 0]
        if bad:
            raise ValueError(f"TTLs must be positive: {', '.join(bad)}")
        return value

    def build_registry(self) -> NamespaceRegistry:
        return NamespaceRegistry(self.namespaces)

    def build_cascades(self, registry: NamespaceRegistry | None = None) -> CascadeTable:
        return CascadeTable(self.cascades, registry=registry or self.build_registry())


# Module-level copy of the loaded configuration (not of any cache instance)
_config: CacheConfig | None = None
_config_lock = threading.Lock()


def load_config(config_path: Path | None = None) -> CacheConfig:
    """Load configuration from file, return defaults if missing/invalid.

    Args:
        config_path: Optional path to config file. Defaults to
            ~/.content_cache/config.json.

    Returns:
        CacheConfig instance with loaded or default values.
    """
    path = config_path or CONFIG_PATH

    if not path.exists():
        logger.debug("Config file not found at %s, using defaults", path)
        return CacheConfig()

    try:
        with path.open() as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.warning("Invalid JSON in config file %s: %s, using defaults", path, e)
        return CacheConfig()
    except OSError as e:
        logger.warning("Cannot read config file %s: %s, using defaults", path, e)
        return CacheConfig()

    try:
        return CacheConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Config validation failed: %s, using defaults", e)
        return CacheConfig()


def load_config_strict(config_path: Path) -> CacheConfig:
    """Load configuration, raising ConfigurationError instead of falling back."""
    if not config_path.exists():
        raise ConfigurationError(
            f"Config file not found: {config_path}",
            config_path=str(config_path),
            code=ErrorCode.CFG_MISSING,
        )
    try:
        with config_path.open() as f:
            return CacheConfig.model_validate(json.load(f))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigurationError(
            f"Cannot load config from {config_path}: {e}",
            config_path=str(config_path),
            cause=e,
        ) from e


def save_config(config: CacheConfig, config_path: Path | None = None) -> bool:
    """Save configuration to file.

    The file is written next to its final location and moved into place, so
    a crash never leaves a truncated config behind.

    Returns:
        True if saved successfully, False otherwise.
    """
    path = config_path or CONFIG_PATH
    tmp_path = path.with_suffix(path.suffix + ".tmp")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with tmp_path.open("w") as f:
            json.dump(config.model_dump(), f, indent=2)
        os.replace(tmp_path, path)
        logger.debug("Configuration saved to %s", path)
        return True

    except OSError as e:
        logger.error("Failed to save config to %s: %s", path, e)
        tmp_path.unlink(missing_ok=True)
        return False


def get_config() -> CacheConfig:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = load_config()
    return _config


def reset_config() -> None:
    """Forget the loaded configuration (used by tests)."""
    global _config
    with _config_lock:
        _config = None
