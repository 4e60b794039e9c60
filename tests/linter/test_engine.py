"""Tests for the linter engine and library entry points."""

from __future__ import annotations

from pathlib import Path

import pytest

from fluidlint.catalog import RuleCatalog
from fluidlint.config import FluidLintConfig, build_config
from fluidlint.exceptions import ConfigError, IncompleteFactsError
from fluidlint.linter import Linter, evaluate_fragment, lint_paths
from fluidlint.model import SourceFragment
from fluidlint.reporting import render_json

from ..conftest import css, html


def test_evaluate_fragment_reports_every_enabled_rule(catalog: RuleCatalog) -> None:
    result = evaluate_fragment(
        css("@media (min-width: 768px) {\n  .card { font-size: 18px; margin: 12px; }\n}\n"),
        catalog=catalog,
    )

    assert [violation.rule_id for violation in result.violations] == [
        "LAYOUT_FIXED_BREAKPOINT",
        "TYPOGRAPHY_FIXED_FONT_SIZE",
        "SPACING_FIXED_PIXELS",
    ]
    assert result.recommendations == ()
    assert result.parse_errors == ()


def test_same_fragment_twice_serializes_identically(catalog: RuleCatalog) -> None:
    fragment = html('<html><head></head><body><img src="a.png"><input></body></html>')

    first = render_json(evaluate_fragment(fragment, catalog=catalog))
    second = render_json(evaluate_fragment(fragment, catalog=catalog))

    assert first == second


def test_unparseable_fragment_reports_only_the_parse_error(catalog: RuleCatalog) -> None:
    result = evaluate_fragment(html("<div><img src=a.png></span>"), catalog=catalog)

    assert result.violations == ()
    assert len(result.parse_errors) == 1
    assert result.parse_errors[0].kind == "html"


def test_config_filters_categories_and_rules(catalog: RuleCatalog) -> None:
    config = build_config(
        {
            "categories": ["layout", "typography"],
            "disabled_rules": ["TYPOGRAPHY_FIXED_FONT_SIZE"],
        }
    )
    linter = Linter(catalog, config)

    rule_ids = [rule.rule_id for rule in linter.rules]
    assert "TYPOGRAPHY_FIXED_FONT_SIZE" not in rule_ids
    assert {rule.category for rule in linter.rules} == {"layout", "typography"}

    result = linter.evaluate(css(".a { font-size: 18px; margin: 12px }"))
    assert result.violations == ()


def test_severity_override_applies_to_violations(catalog: RuleCatalog) -> None:
    linter = Linter(catalog, build_config({"severity_overrides": {"SPACING_FIXED_PIXELS": "high"}}))

    result = linter.evaluate(css(".a { margin: 12px }"))

    assert [(v.rule_id, v.severity) for v in result.violations] == [("SPACING_FIXED_PIXELS", "high")]
    assert catalog.rule("SPACING_FIXED_PIXELS").severity == "low"


@pytest.mark.parametrize(
    "raw",
    [
        pytest.param({"disabled_rules": ["NOT_A_RULE"]}, id="disabled"),
        pytest.param({"severity_overrides": {"NOT_A_RULE": "low"}}, id="override"),
    ],
)
def test_unknown_rule_ids_in_config(catalog: RuleCatalog, raw: dict) -> None:
    with pytest.raises(ConfigError, match="unknown rule ids"):
        Linter(catalog, build_config(raw))


def test_trees_selected_by_root_fact(catalog: RuleCatalog) -> None:
    """Without explicit ids, trees whose root question is answered are evaluated."""
    result = evaluate_fragment(
        css(".a { color: var(--ink) }"),
        catalog=catalog,
        facts={"needFixedColumns": False, "contentDeterminesColumns": True, "textRole": "small"},
    )

    assert [(r.tree_id, r.recommendation_id) for r in result.recommendations] == [
        ("layout-approach", "fluid-grid"),
        ("type-scale", "step-minus-1"),
    ]


def test_explicit_tree_requires_complete_facts(catalog: RuleCatalog) -> None:
    linter = Linter(catalog, FluidLintConfig())

    with pytest.raises(IncompleteFactsError) as exc_info:
        linter.recommendations({}, ["spacing-scale"])

    assert exc_info.value.question == "spacingContext"


def test_unknown_tree_id(catalog: RuleCatalog) -> None:
    with pytest.raises(ConfigError, match="unknown decision tree ids"):
        Linter(catalog).recommendations({"x": True}, ["nope"])


def test_lint_paths_is_independent_of_jobs(catalog: RuleCatalog, project_dir: Path) -> None:
    """Output is identical whether files are checked serially or on four threads."""
    for index in range(8):
        (project_dir / f"extra_{index}.css").write_text(
            f".x{index} {{ padding: {index + 2}px; color: #{index}{index}{index}; }}\n",
            encoding="utf-8",
        )

    serial = lint_paths([project_dir], catalog=catalog, jobs=1)
    parallel = lint_paths([project_dir], catalog=catalog, jobs=4)

    assert render_json(serial) == render_json(parallel)
    assert len(serial.violations) > 8


def test_lint_paths_reports_unreadable_files_as_parse_errors(catalog: RuleCatalog, tmp_path: Path) -> None:
    (tmp_path / "bad.css").write_bytes(b".a { color: \xff }")
    (tmp_path / "good.css").write_text(".a { margin: 12px }", encoding="utf-8")

    result = lint_paths([tmp_path], catalog=catalog)

    assert [issue.location.path for issue in result.parse_errors] == [(tmp_path / "bad.css").as_posix()]
    assert [violation.rule_id for violation in result.violations] == ["SPACING_FIXED_PIXELS"]


def test_evaluate_many_rejects_zero_jobs(catalog: RuleCatalog) -> None:
    with pytest.raises(ValueError, match="jobs must be >= 1"):
        Linter(catalog).evaluate_many([], jobs=0)


def test_check_keeps_fragment_path(catalog: RuleCatalog) -> None:
    outcome = Linter(catalog).check(SourceFragment(text=".a { gap: 3px }", kind="css", path="inline"))

    assert outcome.path == "inline"
    assert [violation.location.path for violation in outcome.violations] == ["inline"]


def test_deeply_nested_css_is_a_parse_error_not_a_crash(catalog: RuleCatalog, tmp_path: Path) -> None:
    """A pathologically nested file is reported and the other files are still checked."""
    depth = 5000
    (tmp_path / "deep.css").write_text("@media " + "(" * depth + "x" + ")" * depth + " {}\n", encoding="utf-8")
    (tmp_path / "good.css").write_text(".a { margin: 12px }", encoding="utf-8")

    result = lint_paths([tmp_path], catalog=catalog)

    assert [issue.location.path for issue in result.parse_errors] == [(tmp_path / "deep.css").as_posix()]
    assert "nesting too deep" in result.parse_errors[0].message
    assert [violation.rule_id for violation in result.violations] == ["SPACING_FIXED_PIXELS"]
