"""CLI subcommand handlers and threshold evaluation."""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from fluidlint.catalog import RuleCatalog, bundled_catalog
from fluidlint.config import load_config
from fluidlint.constants.reporting import SEVERITY_RANK
from fluidlint.decisions import recommend
from fluidlint.exceptions import CatalogLoadError, ConfigError, FactsError
from fluidlint.linter import Linter, discover_fragments
from fluidlint.model import EvaluationResult
from fluidlint.reporting import StdoutReporter, render_json, write_result


def parse_facts(raw_facts: Sequence[str]) -> dict[str, str]:
    """Parse repeated ``KEY=VALUE`` arguments into a fact mapping.

    Values stay strings; decision-tree evaluation normalizes them.
    """
    facts: dict[str, str] = {}
    for item in raw_facts:
        key, sep, value = item.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(f"--fact expects KEY=VALUE, got {item!r}")
        if key in facts and facts[key] != value.strip():
            raise ConfigError(f"--fact {key} given twice with different values")
        facts[key] = value.strip()
    return facts


def exceeds_fail_threshold(result: EvaluationResult, fail_on: str) -> bool:
    """Return True when any violation is at or above ``fail_on`` severity."""
    threshold = SEVERITY_RANK.get(fail_on, 0)
    return any(SEVERITY_RANK.get(violation.severity, 0) >= threshold for violation in result.violations)


def exit_code_for(result: EvaluationResult, fail_on: str) -> int:
    """Parse errors give 2, violations at or above ``fail_on`` give 1, otherwise 0."""
    if result.has_parse_errors:
        return 2
    return 1 if exceeds_fail_threshold(result, fail_on) else 0


def _load_catalog(catalog_dir: Path | None) -> RuleCatalog:
    return RuleCatalog.load(catalog_dir) if catalog_dir is not None else bundled_catalog()


def handle_lint(args: argparse.Namespace) -> int:
    """Run ``fluidlint lint``."""
    try:
        if args.jobs < 1:
            raise ConfigError(f"--jobs must be >= 1, got {args.jobs}")
        facts = parse_facts(args.facts)
        config = load_config(Path.cwd(), args.config)
        linter = Linter(_load_catalog(args.catalog), config)
        files = discover_fragments(args.paths, config.include, config.max_file_kb)
        result = linter.evaluate_many(files, jobs=args.jobs, facts=facts, tree_ids=tuple(args.trees))
    except CatalogLoadError as exc:
        print(f"Catalog error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except FactsError as exc:
        print(f"Facts error: {exc}", file=sys.stderr)
        return 2

    exit_code = exit_code_for(result, config.fail_on)
    if args.output is not None:
        try:
            write_result(args.output, result)
        except OSError as exc:
            print(f"Output error: {exc}", file=sys.stderr)
            return 2

    if args.output_format == "json":
        sys.stdout.write(render_json(result))
    else:
        use_color = not args.no_color and sys.stdout.isatty()
        reporter = StdoutReporter(
            result,
            color=use_color,
            verbose=args.verbose,
            files_checked=len(files),
            rules_run=len(linter.rules),
            fail_on=config.fail_on,
            exit_code=exit_code,
        )
        print(reporter.render())
    return exit_code


def handle_recommend(args: argparse.Namespace) -> int:
    """Run ``fluidlint recommend``."""
    try:
        facts = parse_facts(args.facts)
        catalog = _load_catalog(args.catalog)
        if args.tree_id not in catalog.tree_ids:
            raise ConfigError(f"unknown decision tree '{args.tree_id}'; available: {', '.join(catalog.tree_ids)}")
        recommendation = recommend(catalog.tree(args.tree_id), facts)
    except CatalogLoadError as exc:
        print(f"Catalog error: {exc}", file=sys.stderr)
        return 2
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except FactsError as exc:
        print(f"Facts error: {exc}", file=sys.stderr)
        return 2

    if args.json:
        print(json.dumps(recommendation.to_dict(), indent=2, sort_keys=True))
        return 0
    print(f"{recommendation.tree_id}: {recommendation.recommendation_id}")
    print(f"  utility  {recommendation.utility}")
    if recommendation.notes:
        print(f"  notes    {recommendation.notes}")
    return 0


def handle_rules(args: argparse.Namespace) -> int:
    """Run ``fluidlint rules``."""
    try:
        catalog = _load_catalog(args.catalog)
    except CatalogLoadError as exc:
        print(f"Catalog error: {exc}", file=sys.stderr)
        return 2

    if args.trees:
        trees = [tree for tree in catalog.trees if args.category in (None, tree.category)]
        for tree in trees:
            print(f"{tree.tree_id:<24} {tree.category:<14} {tree.title}")
            print(f"  questions: {', '.join(tree.questions)}")
            outcomes = ", ".join(f"{item.recommendation_id} -> {item.utility}" for item in tree.iter_recommendations())
            print(f"  outcomes:  {outcomes}")
        return 0

    rules = catalog.rules_for(args.category) if args.category else catalog.rules
    for rule in rules:
        see_tree = f"  (see {rule.see_tree})" if rule.see_tree else ""
        print(f"{rule.rule_id:<40} {rule.category:<14} {rule.severity:<7} {rule.title}{see_tree}")
    return 0
