"""File discovery and fragment evaluation."""

from .discovery import discover_fragments
from .engine import FragmentOutcome, Linter, evaluate_fragment, lint_paths

__all__ = ["FragmentOutcome", "Linter", "discover_fragments", "evaluate_fragment", "lint_paths"]
