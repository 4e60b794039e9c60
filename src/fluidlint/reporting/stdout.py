"""Human-readable stdout reporter for evaluation results."""

from __future__ import annotations

from collections import Counter

from fluidlint.constants.branding import ASCII_LOGO_LINES, LINT_SUMMARY_TITLE
from fluidlint.constants.catalog import CATEGORIES
from fluidlint.constants.reporting import ANSI_DIM, ANSI_GREEN, ANSI_RED, ANSI_RESET, SEVERITY_COLORS, SEVERITY_RANK
from fluidlint.model import EvaluationResult, Violation
from fluidlint.types import Severity


def _colorize(text: str, color: str) -> str:
    return f"{color}{text}{ANSI_RESET}"


def _color_severity(severity: Severity) -> str:
    color = SEVERITY_COLORS.get(severity, "")
    return _colorize(severity, color) if color else severity


class StdoutReporter:
    """Formats an EvaluationResult as a terminal listing with a summary header."""

    def __init__(
        self,
        result: EvaluationResult,
        *,
        color: bool = True,
        verbose: bool = False,
        files_checked: int | None = None,
        rules_run: int | None = None,
        fail_on: Severity | None = None,
        exit_code: int = 0,
    ) -> None:
        self._result = result
        self._color = color
        self._verbose = verbose
        self._files_checked = files_checked
        self._rules_run = rules_run
        self._fail_on = fail_on
        self._exit_code = exit_code

    def render(self) -> str:
        """Render the full report as a single string."""
        sections = [
            self._render_header(),
            self._render_violations(),
            self._render_parse_errors(),
            self._render_recommendations(),
        ]
        return "\n".join(section for section in sections if section)

    def _render_header(self) -> str:
        r = self._result
        sep = "  " + "─" * 38
        lines = [
            "",
            f"  {ASCII_LOGO_LINES[0]}",
            f"  {ASCII_LOGO_LINES[1]}",
            f"  {LINT_SUMMARY_TITLE}",
            sep,
            "",
        ]
        if self._files_checked is not None:
            lines.append(f"  Files       {self._files_checked} checked / {len(r.parse_errors)} unparseable")
        lines.append(f"  Violations  {len(r.violations)}")
        lines.append(f"  Severities  {self._format_severity_breakdown(r.violations)}")
        lines.append(f"  Categories  {self._format_category_breakdown(r.violations)}")
        if self._rules_run is not None and self._verbose:
            lines.append(f"  Rules run   {self._rules_run}")
        verdict = self._render_verdict()
        if verdict is not None:
            lines.append(f"  Verdict     {verdict}")
        lines.append("")
        return "\n".join(lines)

    def _render_violations(self) -> str:
        if not self._result.violations:
            return ""
        lines = ["  Violations"]
        current_category: str | None = None
        for violation in self._result.violations:
            if violation.category != current_category:
                current_category = violation.category
                lines.append(f"  [{current_category}]")
            severity = _color_severity(violation.severity) if self._color else violation.severity
            lines.append(f"    {violation.location.format()}  {severity}  {violation.rule_id}  {violation.message}")
            if violation.snippet:
                snippet = _colorize(violation.snippet, ANSI_DIM) if self._color else violation.snippet
                lines.append(f"      {snippet}")
            if violation.see_tree:
                lines.append(f"      see: fluidlint recommend {violation.see_tree}")
            if self._verbose:
                lines.append(f"      {violation.rationale}")
        lines.append("")
        return "\n".join(lines)

    def _render_parse_errors(self) -> str:
        if not self._result.parse_errors:
            return ""
        lines = ["  Parse errors"]
        for issue in self._result.parse_errors:
            label = _colorize("error", ANSI_RED) if self._color else "error"
            lines.append(f"    {issue.location.format()}  {label}  {issue.kind}: {issue.message}")
        lines.append("")
        return "\n".join(lines)

    def _render_recommendations(self) -> str:
        if not self._result.recommendations:
            return ""
        lines = ["  Recommendations"]
        for recommendation in self._result.recommendations:
            utility = _colorize(recommendation.utility, ANSI_GREEN) if self._color else recommendation.utility
            lines.append(f"    {recommendation.tree_id}: {recommendation.recommendation_id} -> {utility}")
            if recommendation.notes:
                lines.append(f"      {recommendation.notes}")
        lines.append("")
        return "\n".join(lines)

    def _format_severity_breakdown(self, violations: tuple[Violation, ...]) -> str:
        """Render ``high/medium/low`` counts in fixed order."""
        counts = Counter(violation.severity for violation in violations)
        parts: list[str] = []
        for severity in ("high", "medium", "low"):
            label = _color_severity(severity) if self._color else severity
            parts.append(f"{counts.get(severity, 0)} {label}")
        return " · ".join(parts)

    @staticmethod
    def _format_category_breakdown(violations: tuple[Violation, ...]) -> str:
        counts = Counter(violation.category for violation in violations)
        parts = [f"{category} {counts[category]}" for category in CATEGORIES if counts.get(category)]
        return " · ".join(parts) if parts else "none"

    def _render_verdict(self) -> str | None:
        """Render the fail-threshold verdict when a threshold is configured."""
        if self._fail_on is None:
            return None
        if self._result.parse_errors:
            return f"ERROR ({len(self._result.parse_errors)} unparseable fragment(s))"
        threshold = SEVERITY_RANK[self._fail_on]
        matched = [v for v in self._result.violations if SEVERITY_RANK.get(v.severity, 0) >= threshold]
        clause = f"{len(matched)} violation(s) >= {self._fail_on}" if matched else f"no violations >= {self._fail_on}"
        state = "FAIL" if self._exit_code == 1 else "PASS"
        return f"{state} ({clause})"
