"""Schema constants for rule and decision-tree definition files."""

from __future__ import annotations

import re

CATEGORIES: tuple[str, ...] = ("layout", "typography", "spacing", "accessibility", "color")
CATEGORY_RANK: dict[str, int] = {name: index for index, name in enumerate(CATEGORIES)}

VALID_POLARITIES: frozenset[str] = frozenset({"forbidden", "required"})
VALID_SEVERITIES: frozenset[str] = frozenset({"low", "medium", "high"})
VALID_SOURCES: frozenset[str] = frozenset({"css", "html"})

RULE_ID_PATTERN: re.Pattern[str] = re.compile(r"^[A-Z][A-Z0-9_]+$")
TREE_ID_PATTERN: re.Pattern[str] = re.compile(r"^[a-z][a-z0-9-]*$")

CATALOG_VERSION: int = 1

REQUIRED_RULE_KEYS: frozenset[str] = frozenset(
    {"rule_id", "version", "category", "polarity", "severity", "title", "rationale", "match"}
)
ALLOWED_RULE_KEYS: frozenset[str] = REQUIRED_RULE_KEYS | {"see_tree"}

REQUIRED_TREE_KEYS: frozenset[str] = frozenset(
    {"tree_id", "version", "title", "category", "root", "nodes", "recommendations"}
)
ALLOWED_TREE_KEYS: frozenset[str] = REQUIRED_TREE_KEYS
ALLOWED_NODE_KEYS: frozenset[str] = frozenset({"question", "prompt", "answers"})
ALLOWED_BRANCH_KEYS: frozenset[str] = frozenset({"next", "recommend"})
ALLOWED_RECOMMENDATION_KEYS: frozenset[str] = frozenset({"utility", "notes"})

RULES_SUBDIR: str = "rules"
TREES_SUBDIR: str = "trees"
DEFINITION_GLOB: str = "*.yaml"

# String answers read as booleans in facts and tree definitions.
TRUE_ANSWERS: frozenset[str] = frozenset({"true", "yes", "on"})
FALSE_ANSWERS: frozenset[str] = frozenset({"false", "no", "off"})
