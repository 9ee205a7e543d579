"""
Configuration loaded from modeinjector.toml.

Example::

    [store]
    path = "variables.json"

    [report]
    error_limit = 10

    [colors]
    strict_hex = false

    [logging]
    level = "INFO"
    dir = ".modeinjector/logs"

Every section and key is optional. Environment variables override the
file: MODEINJECTOR_STORE for the store path, MODEINJECTOR_LOG_LEVEL for
the log level.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError
from .ir import DEFAULT_ERROR_LIMIT

CONFIG_FILE = "modeinjector.toml"
DEFAULT_STORE_FILE = "variables.json"

ENV_STORE = "MODEINJECTOR_STORE"
ENV_LOG_LEVEL = "MODEINJECTOR_LOG_LEVEL"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class StoreConfig:
    """Where the JSON store snapshot lives."""

    path: str = DEFAULT_STORE_FILE


@dataclass
class ReportConfig:
    """Summary report settings."""

    error_limit: int = DEFAULT_ERROR_LIMIT  # errors shown before "+K more"


@dataclass
class ColorConfig:
    """Color parsing settings."""

    strict_hex: bool = False  # malformed hex becomes an error instead of black


@dataclass
class LoggingConfig:
    level: str = "INFO"
    dir: str | None = None  # JSONL log directory; console only when unset


@dataclass
class InjectorConfig:
    """Top-level configuration."""

    root: Path = field(default_factory=Path.cwd)
    store: StoreConfig = field(default_factory=StoreConfig)
    report: ReportConfig = field(default_factory=ReportConfig)
    colors: ColorConfig = field(default_factory=ColorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def store_path(self) -> Path:
        path = Path(self.store.path)
        return path if path.is_absolute() else self.root / path

    @property
    def log_dir(self) -> Path | None:
        if self.logging.dir is None:
            return None
        path = Path(self.logging.dir)
        return path if path.is_absolute() else self.root / path


def _get(section: dict[str, Any], name: str, key: str, expected: type, default: Any) -> Any:
    value = section.get(key, default)
    if value is None:
        return value
    # bool is an int subclass; reject it for int settings
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        raise ConfigError(
            f"[{name}] {key} must be {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _parse_log_level(level: str) -> str:
    level = level.upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"Unknown log level '{level}'. Expected one of: {', '.join(LOG_LEVELS)}")
    return level


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> InjectorConfig:
    """
    Load configuration from a TOML file plus environment overrides.

    Args:
        path: Path to modeinjector.toml; defaults to ./modeinjector.toml.
            A missing file yields the defaults.
        env: Environment mapping (defaults to os.environ)

    Returns:
        InjectorConfig

    Raises:
        ConfigError: If the file is not valid TOML or holds wrongly typed values
    """
    env = os.environ if env is None else env
    path = path or Path.cwd() / CONFIG_FILE

    data: dict[str, Any] = {}
    if path.exists():
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {path}: {e}") from e

    store_data = _section(data, "store")
    report_data = _section(data, "report")
    colors_data = _section(data, "colors")
    logging_data = _section(data, "logging")

    error_limit = _get(report_data, "report", "error_limit", int, DEFAULT_ERROR_LIMIT)
    if error_limit < 0:
        raise ConfigError("[report] error_limit must not be negative")

    config = InjectorConfig(
        root=path.parent.resolve(),
        store=StoreConfig(path=_get(store_data, "store", "path", str, DEFAULT_STORE_FILE)),
        report=ReportConfig(error_limit=error_limit),
        colors=ColorConfig(
            strict_hex=_get(colors_data, "colors", "strict_hex", bool, False),
        ),
        logging=LoggingConfig(
            level=_parse_log_level(_get(logging_data, "logging", "level", str, "INFO")),
            dir=_get(logging_data, "logging", "dir", str, None),
        ),
    )

    if env.get(ENV_STORE):
        config.store.path = env[ENV_STORE]
    if env.get(ENV_LOG_LEVEL):
        config.logging.level = _parse_log_level(env[ENV_LOG_LEVEL])

    return config
