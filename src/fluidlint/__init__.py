"""fluidlint: rule linter and decision-tree engine for Fluid Design System CSS/HTML."""

__version__ = "0.3.0"
