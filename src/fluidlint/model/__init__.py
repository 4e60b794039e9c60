"""Core data models for fluidlint."""

from .entities import (
    DecisionNode,
    DecisionTree,
    EvaluationResult,
    MatchSpec,
    ParseIssue,
    Recommendation,
    Rule,
    SourceFragment,
    SourceLocation,
    Violation,
)

__all__ = [
    "DecisionNode",
    "DecisionTree",
    "EvaluationResult",
    "MatchSpec",
    "ParseIssue",
    "Recommendation",
    "Rule",
    "SourceFragment",
    "SourceLocation",
    "Violation",
]
