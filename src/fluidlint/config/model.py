"""Config data model for fluidlint runs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from fluidlint.constants.catalog import CATEGORIES
from fluidlint.constants.config import DEFAULT_FAIL_ON, DEFAULT_INCLUDE_GLOBS, DEFAULT_MAX_FILE_KB
from fluidlint.types import Severity


@dataclass(frozen=True)
class FluidLintConfig:
    """Resolved linter config."""

    categories: tuple[str, ...] = CATEGORIES
    disabled_rules: tuple[str, ...] = ()
    severity_overrides: Mapping[str, Severity] = field(default_factory=lambda: MappingProxyType({}))
    fail_on: Severity = DEFAULT_FAIL_ON  # type: ignore[assignment]
    include: tuple[str, ...] = DEFAULT_INCLUDE_GLOBS
    max_file_kb: int = DEFAULT_MAX_FILE_KB

