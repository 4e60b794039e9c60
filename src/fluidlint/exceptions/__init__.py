"""Shared exception hierarchy for fluidlint."""

from __future__ import annotations

from .base import FluidLintError
from .catalog import CatalogLoadError
from .config import ConfigError
from .decisions import FactsError, IncompleteFactsError, InvalidFactError
from .parsing import ParseError

__all__ = [
    "CatalogLoadError",
    "ConfigError",
    "FactsError",
    "FluidLintError",
    "IncompleteFactsError",
    "InvalidFactError",
    "ParseError",
]
