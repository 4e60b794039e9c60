"""Tests for result aggregation and JSON output."""

from __future__ import annotations

import json
from pathlib import Path

from fluidlint.model import ParseIssue, Recommendation, SourceLocation, Violation
from fluidlint.reporting import aggregate, render_json, write_result
from fluidlint.types import Category, Severity


def _violation(
    rule_id: str = "LAYOUT_FIXED_BREAKPOINT",
    *,
    category: Category = "layout",
    severity: Severity = "high",
    path: str = "a.css",
    line: int = 1,
    column: int = 1,
) -> Violation:
    return Violation(
        rule_id=rule_id,
        category=category,
        polarity="forbidden",
        severity=severity,
        message=f"{rule_id} message",
        rationale="Because.",
        location=SourceLocation(path=path, line=line, column=column),
    )


def _recommendation(tree_id: str, recommendation_id: str) -> Recommendation:
    return Recommendation(tree_id=tree_id, recommendation_id=recommendation_id, utility=f".{recommendation_id}")


def test_violations_ordered_by_category_then_location() -> None:
    """Category order wins over path; location then rule id break ties."""
    result = aggregate(
        [
            _violation("COLOR_HARDCODED_VALUE", category="color", path="a.css"),
            _violation("SPACING_FIXED_PIXELS", category="spacing", path="b.css", line=3),
            _violation("SPACING_FIXED_PIXELS", category="spacing", path="b.css", line=1, column=9),
            _violation("LAYOUT_FIXED_GRID_TRACKS", category="layout", path="z.css"),
            _violation("LAYOUT_FIXED_BREAKPOINT", category="layout", path="z.css"),
            _violation("TYPOGRAPHY_FIXED_FONT_SIZE", category="typography", path="a.css"),
        ]
    )

    assert [(v.rule_id, v.location.path, v.location.line) for v in result.violations] == [
        ("LAYOUT_FIXED_BREAKPOINT", "z.css", 1),
        ("LAYOUT_FIXED_GRID_TRACKS", "z.css", 1),
        ("TYPOGRAPHY_FIXED_FONT_SIZE", "a.css", 1),
        ("SPACING_FIXED_PIXELS", "b.css", 1),
        ("SPACING_FIXED_PIXELS", "b.css", 3),
        ("COLOR_HARDCODED_VALUE", "a.css", 1),
    ]


def test_duplicate_violations_are_dropped() -> None:
    result = aggregate([_violation(), _violation()])

    assert len(result.violations) == 1


def test_recommendations_deduplicated_and_sorted() -> None:
    result = aggregate(
        [],
        [
            _recommendation("type-scale", "step-0"),
            _recommendation("layout-approach", "stack"),
            _recommendation("type-scale", "step-0"),
        ],
    )

    assert [(r.tree_id, r.recommendation_id) for r in result.recommendations] == [
        ("layout-approach", "stack"),
        ("type-scale", "step-0"),
    ]


def test_parse_errors_always_surface_sorted() -> None:
    issues = [
        ParseIssue(location=SourceLocation(path="b.html", line=2, column=1), kind="html", message="bad"),
        ParseIssue(location=SourceLocation(path="a.css", line=9, column=4), kind="css", message="bad"),
    ]

    result = aggregate([], [], issues)

    assert [issue.location.path for issue in result.parse_errors] == ["a.css", "b.html"]
    assert result.has_parse_errors
    assert result.violations == ()


def test_render_json_is_byte_stable() -> None:
    """Input order does not change the serialized bytes."""
    first = aggregate([_violation(path="a.css"), _violation(path="b.css")], [_recommendation("type-scale", "step-0")])
    second = aggregate([_violation(path="b.css"), _violation(path="a.css")], [_recommendation("type-scale", "step-0")])

    rendered = render_json(first)

    assert rendered == render_json(second)
    assert rendered.endswith("}\n")
    payload = json.loads(rendered)
    assert list(payload) == ["parseErrors", "recommendations", "violations"]
    assert payload["violations"][0]["ruleId"] == "LAYOUT_FIXED_BREAKPOINT"
    assert payload["violations"][0]["location"] == {"path": "a.css", "line": 1, "column": 1}


def test_write_result_matches_render_json(tmp_path: Path) -> None:
    result = aggregate([_violation()])
    target = tmp_path / "out" / "result.json"

    write_result(target, result)

    assert target.read_text(encoding="utf-8") == render_json(result)
    assert [path.name for path in target.parent.iterdir()] == ["result.json"]
