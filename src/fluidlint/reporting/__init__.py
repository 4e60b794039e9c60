"""Reporter: result aggregation, JSON output and stdout rendering."""

from __future__ import annotations

from .reporter import aggregate, violation_sort_key
from .stdout import StdoutReporter
from .writer import render_json, write_result

__all__ = ["StdoutReporter", "aggregate", "render_json", "violation_sort_key", "write_result"]
