"""Root exception for fluidlint."""

from __future__ import annotations


class FluidLintError(Exception):
    """Base class for all errors raised by fluidlint."""
