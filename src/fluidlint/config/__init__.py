"""Configuration loading and validation for fluidlint runs."""

from __future__ import annotations

from fluidlint.config.loader import build_config, load_config
from fluidlint.config.model import FluidLintConfig

__all__ = ["FluidLintConfig", "build_config", "load_config"]
