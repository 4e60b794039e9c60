"""Helpers shared by match strategies."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from fluidlint.model import Rule, SourceLocation, Violation


def build_violation(rule: Rule, location: SourceLocation, snippet: str = "") -> Violation:
    """Build a violation of ``rule`` at ``location``."""
    return Violation(
        rule_id=rule.rule_id,
        category=rule.category,
        polarity=rule.polarity,
        severity=rule.severity,
        message=rule.title,
        rationale=rule.rationale,
        location=location,
        snippet=snippet,
        see_tree=rule.see_tree,
    )


def lowered_set(params: Mapping[str, Any], key: str, default: Iterable[str] = ()) -> frozenset[str]:
    """Read a string-list parameter as a lower-cased frozenset."""
    return frozenset(item.lower() for item in params.get(key, default))


def dedupe_violations(violations: list[Violation]) -> list[Violation]:
    """Drop repeats sharing rule and location."""
    seen: set[tuple[str, str, int | None, int | None]] = set()
    deduped: list[Violation] = []
    for violation in violations:
        key = (
            violation.rule_id,
            violation.location.path,
            violation.location.line,
            violation.location.column,
        )
        if key in seen:
            continue
        seen.add(key)
        deduped.append(violation)
    return deduped
