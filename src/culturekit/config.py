"""Configuration for culturekit.

Settings are merged from ordered sources, later (higher priority) sources
overriding earlier ones:

    DictConfigSource (defaults, priority 0)
         |
    FileConfigSource (YAML, JSON, TOML; priority 50)
         |
    EnvConfigSource  (CULTUREKIT_*; priority 100)
         |
         v
    ConfigManager -> CultureConfig

Recognized settings:

- ``supported_cultures``: list or comma-separated string; the first entry
  is the default culture
- ``default_culture``: moved to the front of ``supported_cultures``
- ``locale_files``: extra JSON locale bundles to load at startup
- ``log_level``: DEBUG, INFO, WARNING, ERROR or CRITICAL

Usage:
    >>> from culturekit.config import load_config
    >>> config = load_config(config_path="culturekit.yaml")
    >>> config.supported_cultures
    ['en-GB', 'de', 'ar-EG']

    # Environment overrides
    # CULTUREKIT_SUPPORTED_CULTURES=de,en-GB
    # CULTUREKIT_DEFAULT_CULTURE=de
"""

from __future__ import annotations

import json
import logging
import os
import threading
import tomllib
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from culturekit.errors import CultureKitError
from culturekit.locale_data import builtin_locales
from culturekit.log import LogLevel
from culturekit.protocols import canonical_tag


logger = logging.getLogger(__name__)


# =============================================================================
# Exceptions
# =============================================================================


class ConfigError(CultureKitError):
    """Base configuration error."""

    pass


class ConfigValidationError(ConfigError):
    """Configuration validation error."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Configuration validation failed: {'; '.join(errors)}")


class ConfigSourceError(ConfigError):
    """Configuration source error."""

    pass


# =============================================================================
# Configuration Sources
# =============================================================================


class ConfigSource(ABC):
    """Abstract base class for configuration sources.

    Sources are applied in priority order; higher priority overrides lower.
    """

    def __init__(self, priority: int = 0) -> None:
        self._priority = priority

    @property
    def priority(self) -> int:
        return self._priority

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration values from the source."""
        pass


class DictConfigSource(ConfigSource):
    """In-memory configuration, used for defaults and programmatic overrides."""

    def __init__(self, values: Mapping[str, Any], priority: int = 0) -> None:
        super().__init__(priority)
        self._values = dict(values)

    def load(self) -> dict[str, Any]:
        return dict(self._values)


class EnvConfigSource(ConfigSource):
    """Environment variable configuration source.

    Example:
        CULTUREKIT_SUPPORTED_CULTURES=en-GB,de
        CULTUREKIT_LOG_LEVEL=DEBUG

        Will produce:
        {"supported_cultures": "en-GB,de", "log_level": "DEBUG"}

    Values stay strings except JSON arrays/objects and ``null``. Words such
    as "no" or "on" are not read as booleans ("no" is Norwegian).
    """

    def __init__(
        self,
        prefix: str = "CULTUREKIT",
        nested_separator: str = "__",
        priority: int = 100,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize environment source.

        Args:
            prefix: Environment variable prefix.
            nested_separator: Separator for nested keys.
            priority: Source priority.
            environ: Mapping to read instead of ``os.environ``.
        """
        super().__init__(priority)
        self._prefix = prefix
        self._separator = nested_separator
        self._environ = environ

    def load(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        prefix = f"{self._prefix}_"
        environ = os.environ if self._environ is None else self._environ

        for key, value in environ.items():
            if not key.startswith(prefix):
                continue
            parts = key[len(prefix):].lower().split(self._separator)

            current = result
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_value(value)

        return result

    def _parse_value(self, value: str) -> Any:
        if value.lower() in ("null", "none", ""):
            return None
        if value.startswith(("[", "{")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass
        return value


class FileConfigSource(ConfigSource):
    """File-based configuration source.

    Supports YAML, JSON and TOML, detected from the file extension. A
    ``[culturekit]`` table (TOML) or ``culturekit:`` section (YAML/JSON) is
    used when present, so the settings can live in a shared file.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        required: bool = False,
        priority: int = 50,
    ) -> None:
        super().__init__(priority)
        self._path = Path(path)
        self._required = required

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        if not self._path.exists():
            if self._required:
                raise ConfigSourceError(f"Configuration file not found: {self._path}")
            return {}

        suffix = self._path.suffix.lower()
        try:
            content = self._path.read_text(encoding="utf-8")
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            elif suffix == ".toml":
                data = tomllib.loads(content)
            else:
                raise ConfigSourceError(f"Unsupported file format: {suffix}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            # tomllib and json decode errors are ValueErrors
            raise ConfigSourceError(f"Failed to load config {self._path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigSourceError(f"Configuration in {self._path} must be a mapping")
        section = data.get("culturekit")
        return dict(section) if isinstance(section, dict) else data


# =============================================================================
# Typed Configuration
# =============================================================================


# Every culture with built-in data; "en" first
DEFAULT_SUPPORTED_CULTURES = builtin_locales()


@dataclass
class CultureConfig:
    """Validated culturekit settings.

    Attributes:
        supported_cultures: Canonical culture tags, default culture first
        locale_files: JSON locale bundles loaded in addition to the
            built-in data
        log_level: Log level name for the ``culturekit`` logger
    """
    supported_cultures: list[str] = field(default_factory=lambda: list(DEFAULT_SUPPORTED_CULTURES))
    locale_files: list[str] = field(default_factory=list)
    log_level: str = "WARNING"

    @property
    def default_culture(self) -> str:
        return self.supported_cultures[0]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CultureConfig":
        """Build and validate configuration from merged source values.

        Raises:
            ConfigValidationError: If any setting is invalid
        """
        errors: list[str] = []

        cultures: list[str] = []
        for raw in _as_list(data.get("supported_cultures", DEFAULT_SUPPORTED_CULTURES)):
            try:
                tag = canonical_tag(str(raw))
            except ValueError:
                errors.append(f"supported_cultures: invalid culture {raw!r}")
                continue
            if tag not in cultures:
                cultures.append(tag)
        if not cultures and not errors:
            errors.append("supported_cultures: at least one culture is required")

        default = data.get("default_culture")
        if default:
            try:
                default_tag = canonical_tag(str(default))
            except ValueError:
                errors.append(f"default_culture: invalid culture {default!r}")
            else:
                if default_tag in cultures:
                    cultures.remove(default_tag)
                    cultures.insert(0, default_tag)
                else:
                    errors.append(
                        f"default_culture: {default_tag!r} is not in supported_cultures"
                    )

        log_level = str(data.get("log_level") or "WARNING").upper()
        if log_level not in LogLevel.__members__:
            errors.append(f"log_level: unknown level {log_level!r}")

        if errors:
            raise ConfigValidationError(errors)

        return cls(
            supported_cultures=cultures,
            locale_files=[str(path) for path in _as_list(data.get("locale_files", []))],
            log_level=log_level,
        )


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# =============================================================================
# Manager
# =============================================================================


class ConfigManager:
    """Merges configuration sources into a :class:`CultureConfig`.

    Example:
        >>> manager = ConfigManager()
        >>> manager.add_source(FileConfigSource("culturekit.toml"))
        >>> manager.add_source(EnvConfigSource())
        >>> config = manager.load()
    """

    def __init__(self) -> None:
        self._sources: list[ConfigSource] = []
        self._lock = threading.RLock()

    @property
    def sources(self) -> list[ConfigSource]:
        with self._lock:
            return list(self._sources)

    def add_source(self, source: ConfigSource) -> "ConfigManager":
        """Add a configuration source.

        Returns:
            Self for chaining.
        """
        with self._lock:
            self._sources.append(source)
            self._sources.sort(key=lambda s: s.priority)
        return self

    def merged(self) -> dict[str, Any]:
        """Merge raw values from all sources in priority order."""
        merged: dict[str, Any] = {}
        with self._lock:
            for source in self._sources:
                self._merge_config(merged, source.load())
        return merged

    def load(self) -> CultureConfig:
        """Load and validate configuration from all sources.

        Raises:
            ConfigSourceError: If a required source cannot be read
            ConfigValidationError: If the merged settings are invalid
        """
        config = CultureConfig.from_dict(self.merged())
        logger.debug(f"Loaded configuration: cultures={config.supported_cultures}")
        return config

    def _merge_config(self, base: dict[str, Any], override: dict[str, Any]) -> None:
        """Deep merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            elif value is not None:
                base[key] = value


def load_config(
    *,
    config_path: str | Path | None = None,
    env_prefix: str = "CULTUREKIT",
    overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> CultureConfig:
    """Load configuration from defaults, an optional file and the environment.

    Args:
        config_path: YAML, JSON or TOML file. Must exist when given.
        env_prefix: Environment variable prefix.
        overrides: Values applied over every other source.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Validated CultureConfig.
    """
    manager = ConfigManager()
    manager.add_source(DictConfigSource({
        "supported_cultures": list(DEFAULT_SUPPORTED_CULTURES),
        "log_level": "WARNING",
    }))
    if config_path:
        manager.add_source(FileConfigSource(config_path, required=True))
    manager.add_source(EnvConfigSource(prefix=env_prefix, environ=environ))
    if overrides:
        manager.add_source(DictConfigSource(overrides, priority=200))
    return manager.load()
