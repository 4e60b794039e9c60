"""Catalog loading exceptions."""

from __future__ import annotations

from fluidlint.exceptions.base import FluidLintError


class CatalogLoadError(FluidLintError, ValueError):
    """Raised when rule or decision-tree definitions are malformed or cyclic."""
