"""PatternMatcher: decides whether a fragment violates or satisfies a rule."""

from .base import applies_to, evaluate, evaluate_all
from .registry import STRATEGY_REGISTRY, Strategy

__all__ = ["STRATEGY_REGISTRY", "Strategy", "applies_to", "evaluate", "evaluate_all"]
