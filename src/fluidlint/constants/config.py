"""Configuration defaults and filenames."""

from __future__ import annotations

CONFIG_FILENAME: str = "fluidlint.yaml"

ALLOWED_CONFIG_KEYS: frozenset[str] = frozenset(
    {"categories", "disabled_rules", "severity_overrides", "fail_on", "include", "max_file_kb"}
)

DEFAULT_INCLUDE_GLOBS: tuple[str, ...] = ("**/*.css", "**/*.html", "**/*.htm")
DEFAULT_FAIL_ON: str = "low"
DEFAULT_MAX_FILE_KB: int = 512
