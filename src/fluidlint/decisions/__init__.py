"""Decision-tree evaluation."""

from .evaluator import normalize_answer, recommend

__all__ = ["normalize_answer", "recommend"]
