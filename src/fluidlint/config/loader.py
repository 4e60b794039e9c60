"""Config loading and normalization for fluidlint."""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from fluidlint.config.model import FluidLintConfig
from fluidlint.constants.catalog import CATEGORIES, VALID_SEVERITIES
from fluidlint.constants.config import (
    ALLOWED_CONFIG_KEYS,
    CONFIG_FILENAME,
    DEFAULT_FAIL_ON,
    DEFAULT_INCLUDE_GLOBS,
    DEFAULT_MAX_FILE_KB,
)
from fluidlint.exceptions import ConfigError


def load_config(root: Path, config_path: Path | None = None) -> FluidLintConfig:
    """Load and validate config from ``fluidlint.yaml`` under ``root`` or an explicit path."""
    root = root.resolve()
    path = config_path.resolve() if config_path else (root / CONFIG_FILENAME)
    if not path.exists():
        if config_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return FluidLintConfig()

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML config file at {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must be a YAML mapping")
    return build_config(raw)


def build_config(raw: dict[str, Any]) -> FluidLintConfig:
    """Validate a raw config mapping and build a FluidLintConfig."""
    unknown = set(raw) - ALLOWED_CONFIG_KEYS
    if unknown:
        raise ConfigError(f"unknown config keys: {sorted(map(str, unknown))}")

    categories = _ensure_string_list(raw.get("categories", list(CATEGORIES)), "categories")
    invalid_categories = sorted(set(categories) - set(CATEGORIES))
    if invalid_categories:
        raise ConfigError(f"categories must be drawn from {list(CATEGORIES)}, got {invalid_categories}")

    overrides_raw = raw.get("severity_overrides", {})
    if overrides_raw is None:
        overrides_raw = {}
    if not isinstance(overrides_raw, dict):
        raise ConfigError("severity_overrides must be a mapping")
    for rule_id, severity in overrides_raw.items():
        if not isinstance(rule_id, str) or severity not in VALID_SEVERITIES:
            raise ConfigError(
                f"severity_overrides.{rule_id} must be one of {sorted(VALID_SEVERITIES)}, got {severity!r}"
            )

    fail_on = raw.get("fail_on", DEFAULT_FAIL_ON)
    if fail_on not in VALID_SEVERITIES:
        raise ConfigError(f"fail_on must be one of {sorted(VALID_SEVERITIES)}, got {fail_on!r}")

    max_file_kb = raw.get("max_file_kb", DEFAULT_MAX_FILE_KB)
    if isinstance(max_file_kb, bool) or not isinstance(max_file_kb, int) or max_file_kb <= 0:
        raise ConfigError("max_file_kb must be a positive integer")

    include = _ensure_string_list(raw.get("include", list(DEFAULT_INCLUDE_GLOBS)), "include")
    if not include:
        raise ConfigError("include must list at least one glob")

    return FluidLintConfig(
        categories=tuple(category for category in CATEGORIES if category in categories),
        disabled_rules=tuple(sorted(set(_ensure_string_list(raw.get("disabled_rules", []), "disabled_rules")))),
        severity_overrides=MappingProxyType(dict(sorted(overrides_raw.items()))),
        fail_on=fail_on,
        include=tuple(include),
        max_file_kb=max_file_kb,
    )


def _ensure_string_list(value: Any, key_name: str) -> list[str]:
    """Coerce a value to a list of strings, raising ConfigError on type mismatch."""
    if value is None:
        return []
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key_name} must be a list of strings")
    return [item.strip() for item in value if item.strip()]
