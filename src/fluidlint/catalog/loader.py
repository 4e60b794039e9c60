"""RuleCatalog: immutable registry of rules and decision trees.

Definitions are YAML files, one rule per file under ``rules/`` and one tree
per file under ``trees/``, read in sorted file-name order. That order is the
definition order every query returns.
"""

from __future__ import annotations

import hashlib
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from fluidlint.catalog.schema import build_rule
from fluidlint.catalog.trees import build_tree
from fluidlint.constants.catalog import CATEGORIES, DEFINITION_GLOB, RULES_SUBDIR, TREES_SUBDIR
from fluidlint.exceptions import CatalogLoadError
from fluidlint.model import DecisionTree, Rule

logger = logging.getLogger(__name__)

BUNDLED_CATALOG_DIR: Path = Path(__file__).parent


class RuleCatalog:
    """Rules and decision trees, validated once and read-only afterwards."""

    def __init__(self, rules: tuple[Rule, ...], trees: tuple[DecisionTree, ...], fingerprint: str = "") -> None:
        self._rules = rules
        self._rules_by_id = MappingProxyType({rule.rule_id: rule for rule in rules})
        self._trees = trees
        self._trees_by_id = MappingProxyType({tree.tree_id: tree for tree in trees})
        self._fingerprint = fingerprint

    @classmethod
    def load(cls, source: Path | None = None) -> RuleCatalog:
        """Load ``<source>/rules/*.yaml`` and ``<source>/trees/*.yaml``.

        Uses the bundled catalog when ``source`` is None. Raises
        CatalogLoadError on the first malformed, duplicate, dangling or
        cyclic definition.
        """
        root = (source if source is not None else BUNDLED_CATALOG_DIR).resolve()
        if not root.is_dir():
            raise CatalogLoadError(f"Catalog directory does not exist: {root}")

        digest = hashlib.sha256()
        trees: list[DecisionTree] = []
        for path in _definition_paths(root / TREES_SUBDIR):
            raw, content = _read_definition(path)
            digest.update(f"{TREES_SUBDIR}/{path.name}\0".encode())
            digest.update(content)
            tree = build_tree(raw, str(path))
            if any(existing.tree_id == tree.tree_id for existing in trees):
                raise CatalogLoadError(f"Duplicate tree_id '{tree.tree_id}' in {path}")
            trees.append(tree)
            logger.debug("Loaded decision tree: %s", tree.tree_id)

        tree_ids = {tree.tree_id for tree in trees}
        rules: list[Rule] = []
        rule_sources: dict[str, Path] = {}
        for path in _definition_paths(root / RULES_SUBDIR):
            raw, content = _read_definition(path)
            digest.update(f"{RULES_SUBDIR}/{path.name}\0".encode())
            digest.update(content)
            rule = build_rule(raw, str(path))
            previous = rule_sources.get(rule.rule_id)
            if previous is not None:
                raise CatalogLoadError(f"Duplicate rule_id '{rule.rule_id}' loaded from {previous} and {path}")
            if rule.see_tree is not None and rule.see_tree not in tree_ids:
                raise CatalogLoadError(f"{path}: see_tree references unknown decision tree '{rule.see_tree}'")
            rule_sources[rule.rule_id] = path
            rules.append(rule)
            logger.debug("Loaded rule: %s (%s, %s)", rule.rule_id, rule.category, rule.polarity)

        logger.debug("Catalog %s: %d rules, %d decision trees", root, len(rules), len(trees))
        return cls(tuple(rules), tuple(trees), digest.hexdigest())

    @property
    def rules(self) -> tuple[Rule, ...]:
        """All rules in definition order."""
        return self._rules

    @property
    def rule_ids(self) -> tuple[str, ...]:
        return tuple(rule.rule_id for rule in self._rules)

    @property
    def trees(self) -> tuple[DecisionTree, ...]:
        return self._trees

    @property
    def tree_ids(self) -> tuple[str, ...]:
        return tuple(tree.tree_id for tree in self._trees)

    def rules_for(self, category: str) -> tuple[Rule, ...]:
        """Rules of one category in definition order."""
        if category not in CATEGORIES:
            raise ValueError(f"unknown category {category!r}; expected one of {list(CATEGORIES)}")
        return tuple(rule for rule in self._rules if rule.category == category)

    def rule(self, rule_id: str) -> Rule:
        """Return a rule by id. Raises KeyError when unknown."""
        return self._rules_by_id[rule_id]

    def tree(self, tree_id: str) -> DecisionTree:
        """Return a decision tree by id. Raises KeyError when unknown."""
        return self._trees_by_id[tree_id]

    def fingerprint(self) -> str:
        """Stable hash of the definition files this catalog was built from."""
        return self._fingerprint


def load(source: Path | None = None) -> RuleCatalog:
    """Load a catalog; see ``RuleCatalog.load``."""
    return RuleCatalog.load(source)


@lru_cache(maxsize=1)
def bundled_catalog() -> RuleCatalog:
    """Bundled catalog, loaded on first use and shared for the process lifetime."""
    return RuleCatalog.load()


def _definition_paths(directory: Path) -> tuple[Path, ...]:
    if not directory.exists():
        return ()
    if not directory.is_dir():
        raise CatalogLoadError(f"Catalog path is not a directory: {directory}")
    return tuple(sorted(directory.glob(DEFINITION_GLOB)))


def _read_definition(path: Path) -> tuple[Any, bytes]:
    try:
        with path.open("rb") as handle:
            content = handle.read()
    except OSError as exc:
        raise CatalogLoadError(f"Failed to read definition file {path}: {exc}") from exc

    try:
        raw = yaml.safe_load(content.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise CatalogLoadError(f"Definition file {path} is not valid UTF-8") from exc
    except yaml.YAMLError as exc:
        raise CatalogLoadError(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise CatalogLoadError(f"Definition file {path} must contain a mapping")
    return raw, content
