"""PatternMatcher entry points."""

from __future__ import annotations

import logging

from fluidlint.matchers.registry import STRATEGY_REGISTRY
from fluidlint.matchers.shared import dedupe_violations
from fluidlint.model import Rule, SourceFragment, Violation
from fluidlint.parsers.fragment import ParsedFragment, parse_fragment

logger = logging.getLogger(__name__)


def applies_to(rule: Rule, parsed: ParsedFragment) -> bool:
    """CSS rules see CSS files and CSS embedded in HTML; HTML rules see HTML only."""
    if rule.match.source == "html":
        return parsed.document is not None
    return bool(parsed.stylesheets)


def evaluate(rule: Rule, fragment: SourceFragment) -> Violation | None:
    """Return the earliest violation of ``rule`` in ``fragment``, if any.

    Returns None for unparseable fragments; parse errors are reported by the
    linter, which parses each fragment once and keeps the issues.
    """
    parsed = parse_fragment(fragment)
    violations = evaluate_all(rule, parsed)
    if not violations:
        return None
    return min(violations, key=lambda violation: violation.location.sort_key())


def evaluate_all(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Return every violation of ``rule`` in an already-parsed fragment."""
    if not parsed.parsed_ok:
        return []
    if not applies_to(rule, parsed):
        return []
    strategy = STRATEGY_REGISTRY[rule.match.strategy]
    violations = dedupe_violations(strategy.run(rule, parsed))
    logger.debug("Rule %s: %d violation(s) in %s", rule.rule_id, len(violations), parsed.path)
    return violations
