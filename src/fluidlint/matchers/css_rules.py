"""Match strategies evaluated against parsed CSS."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import Any

from fluidlint.matchers.shared import build_violation, lowered_set
from fluidlint.model import Rule, Violation
from fluidlint.parsers.css import CssAtRule, CssDeclaration, iter_paren_blocks, iter_value_tokens
from fluidlint.parsers.fragment import ParsedFragment

DEFAULT_BREAKPOINT_FEATURES: tuple[str, ...] = (
    "width",
    "min-width",
    "max-width",
    "device-width",
    "min-device-width",
    "max-device-width",
    "inline-size",
    "min-inline-size",
    "max-inline-size",
)
DEFAULT_COLOR_FUNCTIONS: tuple[str, ...] = (
    "rgb",
    "rgba",
    "hsl",
    "hsla",
    "hwb",
    "lab",
    "lch",
    "oklab",
    "oklch",
    "color",
)


def _at_rules(parsed: ParsedFragment) -> Iterator[CssAtRule]:
    for stylesheet in parsed.stylesheets:
        yield from stylesheet.at_rules


def _declarations(parsed: ParsedFragment) -> Iterator[CssDeclaration]:
    for stylesheet in parsed.stylesheets:
        yield from stylesheet.declarations


def run_fixed_breakpoint(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Flag media queries whose width conditions use fixed units."""
    params = rule.match.params
    at_rule_names = lowered_set(params, "at_rules", ("media",))
    features = lowered_set(params, "features", DEFAULT_BREAKPOINT_FEATURES)
    units = lowered_set(params, "units", ("px",))

    violations: list[Violation] = []
    for at_rule in _at_rules(parsed):
        if at_rule.name not in at_rule_names:
            continue
        if any(_is_fixed_condition(block, features, units) for block in iter_paren_blocks(at_rule.prelude)):
            violations.append(build_violation(rule, at_rule.location, at_rule.snippet))
    return violations


def _is_fixed_condition(block: list[Any], features: frozenset[str], units: frozenset[str]) -> bool:
    """Check one ``(...)`` condition, covering both ``min-width: 48px`` and range syntax."""
    names = {token.lower_value for token in block if token.type == "ident"}
    if not names & features:
        return False
    return any(token.type == "dimension" and token.lower_unit in units for token in block)


def run_forbidden_declaration(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Flag declarations of matching properties that use forbidden units."""
    params = rule.match.params
    properties = lowered_set(params, "properties")
    pattern_text = params.get("property_pattern")
    pattern = re.compile(pattern_text, re.IGNORECASE) if pattern_text else None
    units = lowered_set(params, "units")
    exempt_functions = lowered_set(params, "exempt_functions")
    exempt_values = tuple(params.get("exempt_values", (0,)))
    stop_literals = {name.lower(): literal for name, literal in params.get("stop_at_literal", {}).items()}

    violations: list[Violation] = []
    for declaration in _declarations(parsed):
        if declaration.name not in properties and not (pattern and pattern.fullmatch(declaration.name)):
            continue
        value = _until_literal(declaration.value, stop_literals.get(declaration.name))
        for token in iter_value_tokens(value, skip_functions=exempt_functions):
            if token.type == "dimension" and token.lower_unit in units and token.value not in exempt_values:
                violations.append(build_violation(rule, declaration.location, declaration.snippet))
                break
    return violations


def _until_literal(value: tuple[Any, ...], literal: str | None) -> tuple[Any, ...]:
    """Top-level tokens of ``value`` before the first ``literal`` token."""
    if literal is None:
        return value
    for index, token in enumerate(value):
        if token.type == "literal" and token.value == literal:
            return value[:index]
    return value


def run_hardcoded_color(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Flag colour literals in colour properties instead of custom properties."""
    params = rule.match.params
    properties = lowered_set(params, "properties")
    color_functions = lowered_set(params, "color_functions", DEFAULT_COLOR_FUNCTIONS)
    exempt_functions = lowered_set(params, "exempt_functions", ("var",))

    violations: list[Violation] = []
    for declaration in _declarations(parsed):
        if declaration.name not in properties:
            continue
        for token in iter_value_tokens(declaration.value, skip_functions=exempt_functions):
            if token.type == "hash" or (token.type == "function" and token.lower_name in color_functions):
                violations.append(build_violation(rule, declaration.location, declaration.snippet))
                break
    return violations


def run_conditional_media_feature(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Require a media feature query whenever a triggering property is declared."""
    params = rule.match.params
    when_properties = lowered_set(params, "when_properties")
    feature = str(params["media_feature"]).lower()
    at_rule_names = lowered_set(params, "at_rules", ("media",))
    ignore_values = lowered_set(params, "ignore_values", ("none",))

    for at_rule in _at_rules(parsed):
        if at_rule.name in at_rule_names and _names_feature(at_rule, feature):
            return []

    triggers = [
        declaration
        for declaration in _declarations(parsed)
        if declaration.name in when_properties and not _is_ignored_value(declaration, ignore_values)
    ]
    if not triggers:
        return []
    first = min(triggers, key=lambda declaration: declaration.location.sort_key())
    return [build_violation(rule, first.location, first.snippet)]


def _names_feature(at_rule: CssAtRule, feature: str) -> bool:
    return any(
        token.type == "ident" and token.lower_value == feature
        for block in iter_paren_blocks(at_rule.prelude)
        for token in block
    )


def _is_ignored_value(declaration: CssDeclaration, ignore_values: frozenset[str]) -> bool:
    idents = [token for token in declaration.value if token.type != "whitespace"]
    return len(idents) == 1 and idents[0].type == "ident" and idents[0].lower_value in ignore_values
