"""Configuration loading utilities for sqlgrid."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from decimal import Decimal
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError

DEFAULT_NUMBER_FORMAT = "default"

# One sample per numeric family a driver can report.
_NUMBER_FORMAT_SAMPLES: tuple[object, ...] = (0, 0.0, Decimal(0))


@dataclass(frozen=True, slots=True)
class DatabaseSettings:
    """Database-related configuration."""

    path: Path


@dataclass(frozen=True, slots=True)
class DisplaySettings:
    """How query results are turned into display rows."""

    number_format: str  # Python format spec, or "default" for str(value)
    read_lob_fields: bool
    lob_start_offset: int
    lob_read_length: int
    incremental: bool
    max_column_width: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    database: DatabaseSettings
    display: DisplaySettings

    def with_database_path(self, new_path: str | Path) -> AppConfig:
        """Return a copy with an updated database path."""
        resolved = paths.resolve_path(new_path)
        new_db = replace(self.database, path=resolved)
        return replace(self, database=new_db)

    def with_display(self, **changes: Any) -> AppConfig:
        """Return a copy with selected display settings replaced."""
        display = replace(self.display, **changes)
        _validate_display(display)
        return replace(self, display=display)


def _default_config(env: Mapping[str, str]) -> dict[str, Any]:
    return {
        "database": {"path": str(paths.default_database_path(env=env))},
        "display": {
            "number_format": DEFAULT_NUMBER_FORMAT,
            "read_lob_fields": True,
            "lob_start_offset": 0,
            "lob_read_length": 1024,
            "incremental": False,
            "max_column_width": 15,
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "database.path": (paths.DATABASE_PATH_ENV, str),
    "display.number_format": ("SQLGRID_NUMBER_FORMAT", str),
    "display.read_lob_fields": ("SQLGRID_READ_LOB_FIELDS", bool),
    "display.lob_start_offset": ("SQLGRID_LOB_START_OFFSET", int),
    "display.lob_read_length": ("SQLGRID_LOB_READ_LENGTH", int),
    "display.incremental": ("SQLGRID_INCREMENTAL", bool),
    "display.max_column_width": ("SQLGRID_MAX_COLUMN_WIDTH", int),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(env or os.environ)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    defaults = _default_config(env)
    merged: dict[str, Any] = _deep_merge(defaults, file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(
    config_path: str | Path | None, env: Mapping[str, str]
) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    if expected_type is int:
        return int(cleaned)
    return cleaned


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def check_number_format(pattern: str | None) -> None:
    """Raise ConfigurationError unless ``pattern`` formats ints, floats and decimals."""
    if not pattern or pattern == DEFAULT_NUMBER_FORMAT:
        return
    for sample in _NUMBER_FORMAT_SAMPLES:
        try:
            format(sample, pattern)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(
                f"Invalid number format '{pattern}' for {type(sample).__name__} values: {exc}"
            ) from exc


def _validate_display(display: DisplaySettings) -> None:
    check_number_format(display.number_format)
    if display.lob_start_offset < 0:
        raise ConfigurationError("display.lob_start_offset must be zero or greater.")
    if display.lob_read_length <= 0:
        raise ConfigurationError("display.lob_read_length must be greater than zero.")
    if display.max_column_width < 0:
        raise ConfigurationError("display.max_column_width must be zero or greater.")


def _as_bool(value: Any) -> bool:
    # YAML hands back quoted values such as "false" as strings.
    if isinstance(value, str):
        return _coerce_env_value(value, bool)
    return bool(value)


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        database = DatabaseSettings(path=paths.resolve_path(data["database"]["path"]))
        display_cfg = data["display"]
        display = DisplaySettings(
            number_format=str(display_cfg["number_format"]),
            read_lob_fields=_as_bool(display_cfg["read_lob_fields"]),
            lob_start_offset=int(display_cfg["lob_start_offset"]),
            lob_read_length=int(display_cfg["lob_read_length"]),
            incremental=_as_bool(display_cfg["incremental"]),
            max_column_width=int(display_cfg["max_column_width"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    _validate_display(display)
    return AppConfig(source_path=source_path, database=database, display=display)
