"""Parsing-related exceptions."""

from __future__ import annotations

from fluidlint.exceptions.base import FluidLintError


class ParseError(FluidLintError, ValueError):
    """Raised when a fragment cannot be parsed as CSS or HTML."""

    def __init__(self, message: str, *, path: str, kind: str, line: int | None = None, column: int | None = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.kind = kind
        self.line = line
        self.column = column
