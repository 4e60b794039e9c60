"""Configuration-related exceptions."""

from __future__ import annotations

from fluidlint.exceptions.base import FluidLintError


class ConfigError(FluidLintError, ValueError):
    """Raised when linter configuration is invalid."""
