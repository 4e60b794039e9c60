"""Reporter: aggregates evaluation output into an EvaluationResult."""

from __future__ import annotations

from collections.abc import Iterable

from fluidlint.constants.catalog import CATEGORY_RANK
from fluidlint.matchers.shared import dedupe_violations
from fluidlint.model import EvaluationResult, ParseIssue, Recommendation, Violation


def violation_sort_key(violation: Violation) -> tuple[int, str, int, int, str]:
    """Category rank, then path, line, column and rule id."""
    path, line, column = violation.location.sort_key()
    return (CATEGORY_RANK.get(violation.category, len(CATEGORY_RANK)), path, line, column, violation.rule_id)


def aggregate(
    violations: Iterable[Violation],
    recommendations: Iterable[Recommendation] = (),
    parse_errors: Iterable[ParseIssue] = (),
) -> EvaluationResult:
    """Build a deterministic EvaluationResult.

    Violations are ordered by ``violation_sort_key``; recommendations are
    deduplicated on (tree id, recommendation id) keeping the first seen, then
    sorted; parse errors are sorted by location.
    """
    ordered_violations = sorted(dedupe_violations(list(violations)), key=violation_sort_key)

    unique: dict[tuple[str, str], Recommendation] = {}
    for recommendation in recommendations:
        unique.setdefault((recommendation.tree_id, recommendation.recommendation_id), recommendation)
    ordered_recommendations = [unique[key] for key in sorted(unique)]

    ordered_issues = sorted(
        dict.fromkeys(parse_errors),
        key=lambda issue: (*issue.location.sort_key(), issue.kind, issue.message),
    )
    return EvaluationResult(
        violations=tuple(ordered_violations),
        recommendations=tuple(ordered_recommendations),
        parse_errors=tuple(ordered_issues),
    )
