"""CLI entrypoint for fluidlint."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from fluidlint import __version__
from fluidlint.cli.handlers import handle_lint, handle_recommend, handle_rules
from fluidlint.constants.branding import CLI_DESCRIPTION
from fluidlint.constants.catalog import CATEGORIES
from fluidlint.constants.reporting import DEFAULT_OUTPUT_FORMAT, VALID_OUTPUT_FORMATS


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="fluidlint",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    lint = subparsers.add_parser("lint", help="Check CSS and HTML files against the rule catalog")
    lint.add_argument("paths", nargs="+", type=Path, metavar="PATH", help="Files or directories to check")
    lint.add_argument("-c", "--config", type=Path, help="Explicit config file")
    lint.add_argument("--catalog", type=Path, default=None, help="Catalog directory with rules/ and trees/")
    lint.add_argument(
        "--format",
        dest="output_format",
        choices=sorted(VALID_OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help="Stdout format (default: text)",
    )
    lint.add_argument("-o", "--output", type=Path, default=None, help="Also write the JSON result to this file")
    _add_fact_arguments(lint)
    lint.add_argument(
        "--tree",
        dest="trees",
        action="append",
        default=[],
        metavar="ID",
        help="Decision tree to evaluate with the given facts (repeat for multiple trees)",
    )
    lint.add_argument("-j", "--jobs", type=int, default=1, help="Worker threads for file evaluation (default: 1)")
    lint.add_argument("--no-color", action="store_true", help="Disable colored output")
    lint.add_argument("-v", "--verbose", action="store_true", help="Show rationales and debug logging")

    recommend = subparsers.add_parser("recommend", help="Answer a decision tree from facts")
    recommend.add_argument("tree_id", metavar="TREE_ID", help="Decision tree id")
    _add_fact_arguments(recommend)
    recommend.add_argument("--catalog", type=Path, default=None, help="Catalog directory with rules/ and trees/")
    recommend.add_argument("--json", action="store_true", help="Print the recommendation as JSON")
    recommend.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    rules = subparsers.add_parser("rules", help="List catalog rules or decision trees")
    rules.add_argument("--category", choices=CATEGORIES, default=None, help="Only list this category")
    rules.add_argument("--trees", action="store_true", help="List decision trees and their questions")
    rules.add_argument("--catalog", type=Path, default=None, help="Catalog directory with rules/ and trees/")
    rules.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return parser


def _add_fact_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--fact",
        dest="facts",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Decision-tree fact (repeat for multiple facts)",
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )

    if args.command == "lint":
        return handle_lint(args)
    if args.command == "recommend":
        return handle_recommend(args)
    if args.command == "rules":
        return handle_rules(args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
