"""Branding constants for terminal output."""

from __future__ import annotations

BRAND_NAME: str = "FLUIDLINT"
ASCII_LOGO_LINES: tuple[str, ...] = (
    ">_ FLUIDLINT",
    "     // fluid design system checks for CSS and HTML",
)
LINT_SUMMARY_TITLE: str = "Lint summary"
CLI_DESCRIPTION: str = "\n".join((*ASCII_LOGO_LINES, "", f"{BRAND_NAME} rule linter"))
