"""Strict schema validation for rule definition files.

Validates parsed YAML dicts at load time. Raises CatalogLoadError on any
violation; a catalog either loads completely or not at all.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fluidlint.constants.catalog import (
    ALLOWED_RULE_KEYS,
    CATALOG_VERSION,
    CATEGORIES,
    REQUIRED_RULE_KEYS,
    RULE_ID_PATTERN,
    TREE_ID_PATTERN,
    VALID_POLARITIES,
    VALID_SEVERITIES,
    VALID_SOURCES,
)
from fluidlint.exceptions import CatalogLoadError
from fluidlint.matchers.registry import (
    PARAM_BOOL,
    PARAM_NUMBER_LIST,
    PARAM_REGEX,
    PARAM_STR,
    PARAM_STR_LIST,
    PARAM_STR_MAP,
    STRATEGY_REGISTRY,
)
from fluidlint.model import MatchSpec, Rule


def validate_rule(data: Any, source_path: str) -> None:
    """Validate a YAML rule dict. Raises CatalogLoadError on any violation."""
    if not isinstance(data, dict):
        raise CatalogLoadError(f"{source_path}: rule must be a mapping, got {type(data).__name__}")

    unknown_top = set(data.keys()) - ALLOWED_RULE_KEYS
    if unknown_top:
        raise CatalogLoadError(f"{source_path}: unknown top-level keys: {sorted(map(str, unknown_top))}")

    for key in sorted(REQUIRED_RULE_KEYS):
        if key not in data:
            raise CatalogLoadError(f"{source_path}: missing required key '{key}'")

    rule_id = data["rule_id"]
    if not isinstance(rule_id, str) or not RULE_ID_PATTERN.match(rule_id):
        raise CatalogLoadError(f"{source_path}: 'rule_id' must be UPPER_SNAKE_CASE, got {rule_id!r}")
    validate_version(data["version"], source_path)
    _validate_choice(data["category"], CATEGORIES, "category", source_path)
    _validate_choice(data["polarity"], VALID_POLARITIES, "polarity", source_path)
    _validate_choice(data["severity"], VALID_SEVERITIES, "severity", source_path)
    for key in ("title", "rationale"):
        if not isinstance(data[key], str) or not data[key].strip():
            raise CatalogLoadError(f"{source_path}: '{key}' must be a non-empty string")

    see_tree = data.get("see_tree")
    if see_tree is not None and (not isinstance(see_tree, str) or not TREE_ID_PATTERN.match(see_tree)):
        raise CatalogLoadError(f"{source_path}: 'see_tree' must be a decision tree id, got {see_tree!r}")

    _validate_match(data["match"], data["polarity"], source_path)


def validate_version(value: Any, path: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value != CATALOG_VERSION:
        raise CatalogLoadError(f"{path}: 'version' must be {CATALOG_VERSION}, got {value!r}")


def _validate_choice(value: Any, allowed: Any, key: str, path: str) -> None:
    if value not in allowed:
        raise CatalogLoadError(f"{path}: {key} must be one of {sorted(allowed)}, got {value!r}")


def _validate_match(match: Any, polarity: str, path: str) -> None:
    if not isinstance(match, dict):
        raise CatalogLoadError(f"{path}: 'match' must be a mapping")
    for key in ("source", "strategy"):
        if key not in match:
            raise CatalogLoadError(f"{path}: match missing '{key}'")
    _validate_choice(match["source"], VALID_SOURCES, "match.source", path)

    strategy_name = match["strategy"]
    strategy = STRATEGY_REGISTRY.get(strategy_name) if isinstance(strategy_name, str) else None
    if strategy is None:
        raise CatalogLoadError(
            f"{path}: match.strategy must be one of {sorted(STRATEGY_REGISTRY)}, got {strategy_name!r}"
        )
    if strategy.source != match["source"]:
        raise CatalogLoadError(
            f"{path}: strategy '{strategy_name}' matches {strategy.source} sources, not {match['source']}"
        )
    if strategy.polarity != polarity:
        raise CatalogLoadError(f"{path}: strategy '{strategy_name}' is only valid for {strategy.polarity} rules")

    params = {key: value for key, value in match.items() if key not in {"source", "strategy"}}
    unknown = set(params) - set(strategy.params)
    if unknown:
        raise CatalogLoadError(f"{path}: unknown parameters for '{strategy_name}': {sorted(map(str, unknown))}")
    for key in sorted(strategy.required):
        if key not in params:
            raise CatalogLoadError(f"{path}: strategy '{strategy_name}' requires parameter '{key}'")
    if strategy.one_of and not strategy.one_of & set(params):
        raise CatalogLoadError(f"{path}: strategy '{strategy_name}' needs one of {sorted(strategy.one_of)}")
    for key, value in params.items():
        _validate_param(value, strategy.params[key], f"match.{key}", path)


def _validate_param(value: Any, kind: str, key: str, path: str) -> None:
    if kind == PARAM_STR:
        valid = isinstance(value, str) and bool(value.strip())
    elif kind == PARAM_BOOL:
        valid = isinstance(value, bool)
    elif kind == PARAM_STR_LIST:
        valid = isinstance(value, list) and bool(value) and all(isinstance(item, str) for item in value)
    elif kind == PARAM_NUMBER_LIST:
        valid = isinstance(value, list) and all(
            isinstance(item, (int, float)) and not isinstance(item, bool) for item in value
        )
    elif kind == PARAM_STR_MAP:
        valid = isinstance(value, dict) and all(
            isinstance(k, str) and isinstance(v, str) for k, v in value.items()
        )
    elif kind == PARAM_REGEX:
        valid = isinstance(value, str) and _compiles(value)
    else:
        valid = False
    if not valid:
        raise CatalogLoadError(f"{path}: {key} is not a valid {kind} value: {value!r}")


def _compiles(pattern: str) -> bool:
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


def build_rule(data: dict[str, Any], source_path: str) -> Rule:
    """Validate and build an immutable Rule."""
    validate_rule(data, source_path)
    match = data["match"]
    params = {key: _freeze(value) for key, value in match.items() if key not in {"source", "strategy"}}
    return Rule(
        rule_id=data["rule_id"],
        category=data["category"],
        polarity=data["polarity"],
        severity=data["severity"],
        title=data["title"].strip(),
        rationale=" ".join(data["rationale"].split()),
        match=MatchSpec(source=match["source"], strategy=match["strategy"], params=MappingProxyType(params)),
        see_tree=data.get("see_tree"),
        source_path=source_path,
    )


def _freeze(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value
