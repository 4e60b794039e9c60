"""Central registry of match strategies.

Maps strategy names to their implementation and the parameters a rule may
pass to them. Only registered strategies can be referenced from rule files.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TypeAlias

from fluidlint.matchers.css_rules import (
    run_conditional_media_feature,
    run_fixed_breakpoint,
    run_forbidden_declaration,
    run_hardcoded_color,
)
from fluidlint.matchers.html_rules import run_labelled_control, run_required_attribute, run_required_element
from fluidlint.model import Rule, Violation
from fluidlint.parsers.fragment import ParsedFragment
from fluidlint.types import FragmentKind, Polarity

StrategyFn: TypeAlias = Callable[[Rule, ParsedFragment], list[Violation]]

# Parameter kinds understood by the catalog schema.
PARAM_STR = "str"
PARAM_BOOL = "bool"
PARAM_REGEX = "regex"
PARAM_STR_LIST = "str_list"
PARAM_NUMBER_LIST = "number_list"
PARAM_STR_MAP = "str_map"


@dataclass(frozen=True)
class Strategy:
    """A registered strategy with its parameter contract."""

    run: StrategyFn
    source: FragmentKind
    polarity: Polarity
    params: Mapping[str, str]
    required: frozenset[str] = field(default_factory=frozenset)
    # At least one of these must be present when non-empty.
    one_of: frozenset[str] = field(default_factory=frozenset)


STRATEGY_REGISTRY: dict[str, Strategy] = {
    "fixed_breakpoint": Strategy(
        run=run_fixed_breakpoint,
        source="css",
        polarity="forbidden",
        params={"at_rules": PARAM_STR_LIST, "features": PARAM_STR_LIST, "units": PARAM_STR_LIST},
    ),
    "forbidden_declaration": Strategy(
        run=run_forbidden_declaration,
        source="css",
        polarity="forbidden",
        params={
            "properties": PARAM_STR_LIST,
            "property_pattern": PARAM_REGEX,
            "units": PARAM_STR_LIST,
            "exempt_functions": PARAM_STR_LIST,
            "exempt_values": PARAM_NUMBER_LIST,
            "stop_at_literal": PARAM_STR_MAP,
        },
        required=frozenset({"units"}),
        one_of=frozenset({"properties", "property_pattern"}),
    ),
    "hardcoded_color": Strategy(
        run=run_hardcoded_color,
        source="css",
        polarity="forbidden",
        params={"properties": PARAM_STR_LIST, "color_functions": PARAM_STR_LIST, "exempt_functions": PARAM_STR_LIST},
        required=frozenset({"properties"}),
    ),
    "conditional_media_feature": Strategy(
        run=run_conditional_media_feature,
        source="css",
        polarity="required",
        params={
            "when_properties": PARAM_STR_LIST,
            "media_feature": PARAM_STR,
            "at_rules": PARAM_STR_LIST,
            "ignore_values": PARAM_STR_LIST,
        },
        required=frozenset({"when_properties", "media_feature"}),
    ),
    "required_attribute": Strategy(
        run=run_required_attribute,
        source="html",
        polarity="required",
        params={
            "elements": PARAM_STR_LIST,
            "attribute": PARAM_STR,
            "non_empty": PARAM_BOOL,
            "filename_attribute": PARAM_STR,
            "placeholder_values": PARAM_STR_LIST,
        },
        required=frozenset({"elements", "attribute"}),
    ),
    "labelled_control": Strategy(
        run=run_labelled_control,
        source="html",
        polarity="required",
        params={"elements": PARAM_STR_LIST, "exempt_input_types": PARAM_STR_LIST},
    ),
    "required_element": Strategy(
        run=run_required_element,
        source="html",
        polarity="required",
        params={
            "element": PARAM_STR,
            "attributes": PARAM_STR_MAP,
            "attribute_contains": PARAM_STR_MAP,
            "when_present": PARAM_STR,
        },
        required=frozenset({"element"}),
    ),
}
