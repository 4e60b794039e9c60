"""Tests for rule definition schema validation and rule building."""

from __future__ import annotations

from typing import Any

import pytest

from fluidlint.catalog.schema import build_rule, validate_rule
from fluidlint.exceptions import CatalogLoadError

from .conftest import _minimal_rule


def test_valid_minimal_rule() -> None:
    """Minimal valid rule passes schema validation."""
    validate_rule(_minimal_rule(), "<test>")


def test_rejects_non_mapping() -> None:
    """A rule file that is not a mapping is rejected."""
    with pytest.raises(CatalogLoadError, match="rule must be a mapping"):
        validate_rule(["not", "a", "rule"], "<test>")


def test_rejects_unknown_top_key() -> None:
    """Unknown top-level keys are rejected."""
    with pytest.raises(CatalogLoadError, match="unknown top-level keys"):
        validate_rule(_minimal_rule(bogus="bad"), "<test>")


def test_rejects_missing_rule_id() -> None:
    """Missing rule_id is rejected."""
    rule = _minimal_rule()
    del rule["rule_id"]
    with pytest.raises(CatalogLoadError, match="missing required key 'rule_id'"):
        validate_rule(rule, "<test>")


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        pytest.param({"rule_id": "lower_case"}, "UPPER_SNAKE_CASE", id="rule-id-case"),
        pytest.param({"version": 2}, "'version' must be 1", id="version"),
        pytest.param({"version": True}, "'version' must be 1", id="version-bool"),
        pytest.param({"category": "motion"}, "category must be one of", id="category"),
        pytest.param({"polarity": "maybe"}, "polarity must be one of", id="polarity"),
        pytest.param({"severity": "critical"}, "severity must be one of", id="severity"),
        pytest.param({"title": "  "}, "'title' must be a non-empty string", id="title"),
        pytest.param({"rationale": 3}, "'rationale' must be a non-empty string", id="rationale"),
        pytest.param({"see_tree": "Not A Tree"}, "'see_tree' must be a decision tree id", id="see-tree"),
        pytest.param({"match": "fixed_breakpoint"}, "'match' must be a mapping", id="match-type"),
    ],
)
def test_rejects_invalid_field(overrides: dict[str, Any], message: str) -> None:
    """Each top-level field is checked for type and allowed values."""
    with pytest.raises(CatalogLoadError, match=message):
        validate_rule(_minimal_rule(**overrides), "<test>")


def test_rejects_unknown_strategy() -> None:
    """Unknown match.strategy is rejected."""
    rule = _minimal_rule()
    rule["match"]["strategy"] = "guess"
    with pytest.raises(CatalogLoadError, match="match.strategy must be one of"):
        validate_rule(rule, "<test>")


def test_rejects_invalid_source() -> None:
    """Invalid match.source is rejected."""
    rule = _minimal_rule()
    rule["match"]["source"] = "markdown"
    with pytest.raises(CatalogLoadError, match="match.source"):
        validate_rule(rule, "<test>")


def test_rejects_strategy_on_wrong_source() -> None:
    """A CSS strategy cannot be bound to HTML sources."""
    rule = _minimal_rule()
    rule["match"]["source"] = "html"
    with pytest.raises(CatalogLoadError, match="matches css sources, not html"):
        validate_rule(rule, "<test>")


def test_rejects_strategy_with_wrong_polarity() -> None:
    """A forbidden-pattern strategy cannot back a required rule."""
    with pytest.raises(CatalogLoadError, match="only valid for forbidden rules"):
        validate_rule(_minimal_rule(polarity="required"), "<test>")


def test_rejects_unknown_strategy_parameter() -> None:
    """Parameters the strategy does not declare are rejected."""
    rule = _minimal_rule()
    rule["match"]["threshold"] = 3
    with pytest.raises(CatalogLoadError, match="unknown parameters for 'fixed_breakpoint'"):
        validate_rule(rule, "<test>")


def test_rejects_missing_required_parameter() -> None:
    """Required strategy parameters must be present."""
    rule = _minimal_rule(
        match={"source": "css", "strategy": "forbidden_declaration", "properties": ["font-size"]},
    )
    with pytest.raises(CatalogLoadError, match="requires parameter 'units'"):
        validate_rule(rule, "<test>")


def test_rejects_missing_one_of_parameter() -> None:
    """forbidden_declaration needs either properties or property_pattern."""
    rule = _minimal_rule(match={"source": "css", "strategy": "forbidden_declaration", "units": ["px"]})
    with pytest.raises(CatalogLoadError, match="needs one of"):
        validate_rule(rule, "<test>")


@pytest.mark.parametrize(
    ("key", "value"),
    [
        pytest.param("property_pattern", "(unclosed", id="regex"),
        pytest.param("units", [], id="empty-list"),
        pytest.param("units", "px", id="string-not-list"),
        pytest.param("exempt_values", [True], id="bool-number"),
    ],
)
def test_rejects_invalid_parameter_values(key: str, value: Any) -> None:
    """Parameter values are checked against their declared kind."""
    match: dict[str, Any] = {
        "source": "css",
        "strategy": "forbidden_declaration",
        "properties": ["margin"],
        "units": ["px"],
    }
    match[key] = value
    with pytest.raises(CatalogLoadError, match=f"match.{key} is not a valid"):
        validate_rule(_minimal_rule(match=match), "<test>")


def test_build_rule_freezes_parameters() -> None:
    """Built rules carry tuple parameters and a folded rationale."""
    rule = build_rule(
        _minimal_rule(rationale="Line one\n  line two.\n", see_tree="layout-approach"),
        "rules/test_rule.yaml",
    )

    assert rule.rule_id == "TEST_RULE"
    assert rule.rationale == "Line one line two."
    assert rule.see_tree == "layout-approach"
    assert rule.source_path == "rules/test_rule.yaml"
    assert rule.match.strategy == "fixed_breakpoint"
    assert rule.match.params["units"] == ("px",)
    with pytest.raises(TypeError):
        rule.match.params["units"] = ("em",)  # type: ignore[index]
