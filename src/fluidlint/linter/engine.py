"""Linter: evaluates fragments against the enabled rules of a catalog.

Each fragment is parsed once; every enabled rule is evaluated against the
parsed view. Results are aggregated by the reporter, so the output does not
depend on rule order, fragment order within a batch or the number of worker
threads.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from pathlib import Path

from fluidlint.catalog import RuleCatalog, bundled_catalog
from fluidlint.config import FluidLintConfig
from fluidlint.decisions import recommend
from fluidlint.exceptions import ConfigError, ParseError
from fluidlint.linter.discovery import discover_fragments
from fluidlint.matchers import evaluate_all
from fluidlint.model import EvaluationResult, ParseIssue, Recommendation, Rule, SourceFragment, Violation
from fluidlint.parsers.fragment import issue_from_error, parse_fragment, read_fragment
from fluidlint.reporting import aggregate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FragmentOutcome:
    """Violations and parse issues of one fragment."""

    path: str
    violations: tuple[Violation, ...] = ()
    issues: tuple[ParseIssue, ...] = ()


class Linter:
    """Applies a config to a catalog and evaluates fragments against the result."""

    def __init__(self, catalog: RuleCatalog | None = None, config: FluidLintConfig | None = None) -> None:
        self._catalog = catalog if catalog is not None else bundled_catalog()
        self._config = config if config is not None else FluidLintConfig()
        self._rules = self._select_rules()

    @property
    def catalog(self) -> RuleCatalog:
        return self._catalog

    @property
    def config(self) -> FluidLintConfig:
        return self._config

    @property
    def rules(self) -> tuple[Rule, ...]:
        """Enabled rules, with severity overrides applied, in definition order."""
        return self._rules

    def _select_rules(self) -> tuple[Rule, ...]:
        known = set(self._catalog.rule_ids)
        for key_name, rule_ids in (
            ("disabled_rules", self._config.disabled_rules),
            ("severity_overrides", tuple(self._config.severity_overrides)),
        ):
            unknown = sorted(set(rule_ids) - known)
            if unknown:
                raise ConfigError(f"{key_name} names unknown rule ids: {unknown}")

        selected: list[Rule] = []
        for rule in self._catalog.rules:
            if rule.category not in self._config.categories or rule.rule_id in self._config.disabled_rules:
                logger.debug("Rule %s disabled by config", rule.rule_id)
                continue
            override = self._config.severity_overrides.get(rule.rule_id)
            selected.append(replace(rule, severity=override) if override else rule)
        return tuple(selected)

    def check(self, fragment: SourceFragment) -> FragmentOutcome:
        """Parse ``fragment`` once and evaluate every enabled rule against it."""
        parsed = parse_fragment(fragment)
        if not parsed.parsed_ok:
            return FragmentOutcome(path=fragment.path, issues=parsed.issues)
        violations: list[Violation] = []
        for rule in self._rules:
            violations.extend(evaluate_all(rule, parsed))
        logger.debug("Checked %s: %d violation(s)", fragment.path, len(violations))
        return FragmentOutcome(path=fragment.path, violations=tuple(violations))

    def check_path(self, path: Path) -> FragmentOutcome:
        """Read and check one file; unreadable or undecodable files become parse issues."""
        try:
            fragment = read_fragment(path)
        except ParseError as exc:
            return FragmentOutcome(path=exc.path, issues=(issue_from_error(exc),))
        return self.check(fragment)

    def recommendations(
        self,
        facts: Mapping[str, object] | None,
        tree_ids: Sequence[str] = (),
    ) -> list[Recommendation]:
        """Evaluate decision trees against ``facts``.

        Explicit ``tree_ids`` are all evaluated and must be answerable.
        Without them, every tree whose root question appears in ``facts`` is
        evaluated.
        """
        facts = facts or {}
        if tree_ids:
            unknown = sorted(set(tree_ids) - set(self._catalog.tree_ids))
            if unknown:
                raise ConfigError(f"unknown decision tree ids: {unknown}")
            trees = [self._catalog.tree(tree_id) for tree_id in dict.fromkeys(tree_ids)]
        else:
            trees = [tree for tree in self._catalog.trees if tree.root.question in facts]
        return [recommend(tree, facts) for tree in trees]

    def evaluate(
        self,
        fragment: SourceFragment,
        *,
        facts: Mapping[str, object] | None = None,
        tree_ids: Sequence[str] = (),
    ) -> EvaluationResult:
        """Evaluate one fragment and any selected decision trees."""
        outcome = self.check(fragment)
        return aggregate(outcome.violations, self.recommendations(facts, tree_ids), outcome.issues)

    def evaluate_many(
        self,
        paths: Sequence[Path],
        *,
        jobs: int = 1,
        facts: Mapping[str, object] | None = None,
        tree_ids: Sequence[str] = (),
    ) -> EvaluationResult:
        """Check files, optionally on a thread pool, and aggregate the outcomes."""
        if jobs < 1:
            raise ValueError(f"jobs must be >= 1, got {jobs}")
        recommendations = self.recommendations(facts, tree_ids)

        if jobs == 1 or len(paths) <= 1:
            outcomes = [self.check_path(path) for path in paths]
        else:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                # map() yields in submission order regardless of completion order.
                outcomes = list(executor.map(self.check_path, paths))

        violations = [violation for outcome in outcomes for violation in outcome.violations]
        issues = [issue for outcome in outcomes for issue in outcome.issues]
        result = aggregate(violations, recommendations, issues)
        logger.info(
            "Linted %d file(s): %d violation(s), %d parse error(s)",
            len(paths),
            len(result.violations),
            len(result.parse_errors),
        )
        return result


def evaluate_fragment(
    fragment: SourceFragment,
    *,
    catalog: RuleCatalog | None = None,
    config: FluidLintConfig | None = None,
    facts: Mapping[str, object] | None = None,
    tree_ids: Sequence[str] = (),
) -> EvaluationResult:
    """Evaluate a single in-memory fragment."""
    return Linter(catalog, config).evaluate(fragment, facts=facts, tree_ids=tree_ids)


def lint_paths(
    paths: Iterable[Path],
    *,
    catalog: RuleCatalog | None = None,
    config: FluidLintConfig | None = None,
    facts: Mapping[str, object] | None = None,
    tree_ids: Sequence[str] = (),
    jobs: int = 1,
) -> EvaluationResult:
    """Discover fragment files under ``paths`` and evaluate them all."""
    linter = Linter(catalog, config)
    files = discover_fragments(paths, linter.config.include, linter.config.max_file_kb)
    return linter.evaluate_many(files, jobs=jobs, facts=facts, tree_ids=tree_ids)
