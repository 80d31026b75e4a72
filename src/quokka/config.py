# src/quokka/config.py

"""
Settings for quokka.

Sources, lowest priority first:
- built-in defaults,
- optional YAML config file (`quokka.yml` or $QUOKKA_CONFIG),
- environment variables QUOKKA_* (a local .env is loaded first),
- explicit overrides passed by the CLI.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Final, Mapping, Optional

import yaml
from dotenv import load_dotenv

from .engine.actions import DEFAULT_CAPACITY

ENV_PREFIX: Final[str] = "QUOKKA"
DEFAULT_CONFIG_NAME: Final[str] = "quokka.yml"
DEFAULT_DATA_DIR: Final[Path] = Path(".local/quokka")
DATA_FILE_NAME: Final[str] = "tasks.txt"

_LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigError(Exception):
    """
    Raised when the config file or an override is invalid.
    """

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


# ---------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Settings:
    data_dir: Path
    data_file: Path
    capacity: int
    log_level: str
    log_dir: Path

    def with_overrides(
        self,
        *,
        data_file: Optional[str | Path] = None,
        capacity: Optional[int] = None,
        log_level: Optional[str] = None,
    ) -> Settings:
        """Return a copy with the non-None overrides applied and validated."""
        out = self
        if data_file is not None:
            out = replace(out, data_file=Path(data_file).expanduser())
        if capacity is not None:
            out = replace(out, capacity=_check_capacity("--capacity", capacity))
        if log_level is not None:
            out = replace(out, log_level=_check_log_level("--log-level", log_level))
        return out


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def load_settings(
    config_path: Optional[str | Path] = None,
    *,
    env: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> Settings:
    """
    Build Settings from defaults, the YAML file and the environment.

    `config_path` wins over $QUOKKA_CONFIG. A missing default config file
    is fine; a missing explicitly named file is an error.
    """
    if env is None:
        if use_dotenv:
            load_dotenv(override=False)
        env = os.environ

    explicit = config_path or env.get(_k("CONFIG"))
    path = Path(explicit).expanduser() if explicit else Path(DEFAULT_CONFIG_NAME)
    if explicit and not path.is_file():
        raise ConfigError(str(path), "Config file not found")

    data = _read_yaml(path) if path.is_file() else {}
    source = str(path)

    data_dir = Path(_get(env, "DATA_DIR", data, "data_dir", str(DEFAULT_DATA_DIR))).expanduser()
    data_file = Path(_get(env, "DATA_FILE", data, "data_file", str(data_dir / DATA_FILE_NAME))).expanduser()
    log_dir = Path(_get(env, "LOG_DIR", data, "log_dir", str(data_dir))).expanduser()

    raw_capacity = _get(env, "CAPACITY", data, "capacity", DEFAULT_CAPACITY)
    try:
        capacity = int(raw_capacity)
    except (TypeError, ValueError) as e:
        raise ConfigError(source, f"capacity must be an integer, got {raw_capacity!r}") from e

    return Settings(
        data_dir=data_dir,
        data_file=data_file,
        capacity=_check_capacity(source, capacity),
        log_level=_check_log_level(source, str(_get(env, "LOG_LEVEL", data, "log_level", "WARNING"))),
        log_dir=log_dir,
    )


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(path), f"Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(str(path), f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(path), "YAML root must be a mapping/dictionary")

    return data


def _get(env: Mapping[str, str], env_suffix: str, data: Mapping[str, Any], key: str, default: Any) -> Any:
    raw = env.get(_k(env_suffix))
    if raw is not None and raw.strip() != "":
        return raw.strip()
    value = data.get(key)
    return default if value is None else value


def _check_capacity(source: str, capacity: int) -> int:
    if capacity < 1:
        raise ConfigError(source, f"capacity must be >= 1, got {capacity}")
    return capacity


def _check_log_level(source: str, level: str) -> str:
    name = level.strip().upper()
    if name not in _LOG_LEVELS:
        raise ConfigError(source, f"Invalid log level '{level}' (allowed: {', '.join(_LOG_LEVELS)})")
    return name
