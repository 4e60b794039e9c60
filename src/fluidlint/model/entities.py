"""Frozen entities shared by the catalog, matchers, decision trees and reporting."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from fluidlint.constants.parsing import INLINE_FRAGMENT_PATH
from fluidlint.types import Answer, Category, FragmentKind, JsonObject, Polarity, Severity


@dataclass(frozen=True)
class SourceLocation:
    """Position of a match inside a fragment (1-based line and column)."""

    path: str
    line: int | None = None
    column: int | None = None

    def sort_key(self) -> tuple[str, int, int]:
        """Key that orders locations by path, then line, then column."""
        return (self.path, self.line or 0, self.column or 0)

    def format(self) -> str:
        """Render as ``path:line:column`` omitting unknown parts."""
        text = self.path
        if self.line is not None:
            text = f"{text}:{self.line}"
            if self.column is not None:
                text = f"{text}:{self.column}"
        return text

    def to_dict(self) -> JsonObject:
        return {"path": self.path, "line": self.line, "column": self.column}


@dataclass(frozen=True)
class MatchSpec:
    """How a rule is matched: fragment source, strategy name and its parameters."""

    source: FragmentKind
    strategy: str
    params: Mapping[str, Any]


@dataclass(frozen=True)
class Rule:
    """A single forbidden or required pattern with its rationale."""

    rule_id: str
    category: Category
    polarity: Polarity
    severity: Severity
    title: str
    rationale: str
    match: MatchSpec
    see_tree: str | None = None
    source_path: str = ""


@dataclass(frozen=True)
class Recommendation:
    """Terminal payload of a decision tree: a utility class plus usage notes."""

    tree_id: str
    recommendation_id: str
    utility: str
    notes: str = ""
    trail: tuple[tuple[str, Answer], ...] = ()

    def to_dict(self) -> JsonObject:
        return {
            "treeId": self.tree_id,
            "id": self.recommendation_id,
            "utility": self.utility,
            "notes": self.notes,
            "answers": [{"question": question, "answer": answer} for question, answer in self.trail],
        }


@dataclass(frozen=True)
class DecisionNode:
    """A question and the branch taken for each accepted answer."""

    node_id: str
    question: str
    branches: tuple[tuple[Answer, DecisionNode | Recommendation], ...]
    prompt: str = ""

    @property
    def accepted_answers(self) -> tuple[Answer, ...]:
        return tuple(answer for answer, _ in self.branches)

    def branch_for(self, answer: Answer) -> DecisionNode | Recommendation | None:
        """Return the branch for an already-normalized answer, or None."""
        for candidate, target in self.branches:
            # bool is an int subclass; keep True from matching a string "1" style key.
            if type(candidate) is type(answer) and candidate == answer:
                return target
        return None


@dataclass(frozen=True)
class DecisionTree:
    """A rooted decision tree for one decision category."""

    tree_id: str
    title: str
    category: Category
    root: DecisionNode
    source_path: str = ""

    def iter_nodes(self) -> Iterator[DecisionNode]:
        """Yield question nodes depth-first in definition order."""
        stack: list[DecisionNode] = [self.root]
        seen: set[str] = set()
        while stack:
            node = stack.pop()
            if node.node_id in seen:
                continue
            seen.add(node.node_id)
            yield node
            children = [target for _, target in node.branches if isinstance(target, DecisionNode)]
            stack.extend(reversed(children))

    def iter_recommendations(self) -> Iterator[Recommendation]:
        """Yield each distinct terminal recommendation once."""
        seen: set[str] = set()
        for node in self.iter_nodes():
            for _, target in node.branches:
                if isinstance(target, Recommendation) and target.recommendation_id not in seen:
                    seen.add(target.recommendation_id)
                    yield target

    @property
    def questions(self) -> tuple[str, ...]:
        return tuple(dict.fromkeys(node.question for node in self.iter_nodes()))


@dataclass(frozen=True)
class Violation:
    """A detected breach of a rule at one location of a fragment."""

    rule_id: str
    category: Category
    polarity: Polarity
    severity: Severity
    message: str
    rationale: str
    location: SourceLocation
    snippet: str = ""
    see_tree: str | None = None

    def to_dict(self) -> JsonObject:
        return {
            "ruleId": self.rule_id,
            "category": self.category,
            "polarity": self.polarity,
            "severity": self.severity,
            "message": self.message,
            "rationale": self.rationale,
            "location": self.location.to_dict(),
            "snippet": self.snippet,
            "seeTree": self.see_tree,
        }


@dataclass(frozen=True)
class ParseIssue:
    """Result-level record of a fragment that could not be parsed."""

    location: SourceLocation
    kind: FragmentKind
    message: str

    def to_dict(self) -> JsonObject:
        return {"location": self.location.to_dict(), "kind": self.kind, "message": self.message}


@dataclass(frozen=True)
class EvaluationResult:
    """Violations, recommendations and parse errors of one evaluation run."""

    violations: tuple[Violation, ...] = ()
    recommendations: tuple[Recommendation, ...] = ()
    parse_errors: tuple[ParseIssue, ...] = ()

    @property
    def has_parse_errors(self) -> bool:
        return bool(self.parse_errors)

    def to_dict(self) -> JsonObject:
        return {
            "violations": [violation.to_dict() for violation in self.violations],
            "recommendations": [recommendation.to_dict() for recommendation in self.recommendations],
            "parseErrors": [issue.to_dict() for issue in self.parse_errors],
        }


@dataclass(frozen=True)
class SourceFragment:
    """A unit of CSS or HTML text submitted for evaluation."""

    text: str
    kind: FragmentKind
    path: str = INLINE_FRAGMENT_PATH
