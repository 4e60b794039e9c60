"""Structural CSS parsing on top of tinycss2.

Comments are dropped and strings stay opaque tokens, so matchers never see
rule-like text that only appears inside them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

import tinycss2

from fluidlint.constants.parsing import MAX_CSS_NESTING_DEPTH, NESTED_RULE_AT_RULES, SNIPPET_MAX_LENGTH
from fluidlint.exceptions import ParseError
from fluidlint.model import SourceLocation


@dataclass(frozen=True)
class CssAtRule:
    """An at-rule such as ``@media`` with its prelude component values."""

    name: str
    prelude: tuple[Any, ...]
    location: SourceLocation
    snippet: str


@dataclass(frozen=True)
class CssDeclaration:
    """A ``property: value`` declaration with its value component values."""

    name: str
    value: tuple[Any, ...]
    location: SourceLocation
    snippet: str


@dataclass(frozen=True)
class ParsedStylesheet:
    """Flattened view of a stylesheet: every at-rule and declaration in source order."""

    path: str
    at_rules: tuple[CssAtRule, ...] = ()
    declarations: tuple[CssDeclaration, ...] = ()


class _Position:
    """Maps tinycss2 positions onto the enclosing document."""

    def __init__(self, path: str, line: int, column: int) -> None:
        self.path = path
        self.line = line
        self.column = column

    def locate(self, node: Any) -> SourceLocation:
        line = getattr(node, "source_line", 1)
        column = getattr(node, "source_column", 1)
        if line == 1:
            column += self.column - 1
        return SourceLocation(path=self.path, line=line + self.line - 1, column=column)


def parse_stylesheet(text: str, *, path: str, line: int = 1, column: int = 1) -> ParsedStylesheet:
    """Parse CSS text that starts at ``line``/``column`` of ``path``.

    Raises ParseError on the first syntax error tinycss2 reports.
    """
    position = _Position(path, line, column)
    at_rules: list[CssAtRule] = []
    declarations: list[CssDeclaration] = []
    nodes = tinycss2.parse_stylesheet(text, skip_comments=True, skip_whitespace=True)
    for node in nodes:
        _check_depth(getattr(node, "prelude", None) or (), position)
        _check_depth(getattr(node, "content", None) or (), position)
    _walk_rules(nodes, position, at_rules, declarations)
    return ParsedStylesheet(path=path, at_rules=tuple(at_rules), declarations=tuple(declarations))


def parse_inline_style(text: str, *, location: SourceLocation) -> tuple[CssDeclaration, ...]:
    """Parse a ``style=""`` attribute; every declaration is reported at the element."""
    position = _Position(location.path, location.line or 1, location.column or 1)
    declarations: list[CssDeclaration] = []
    for item in tinycss2.parse_blocks_contents(text, skip_comments=True, skip_whitespace=True):
        if item.type == "error":
            raise _parse_error(item, position)
        if item.type != "declaration":
            raise ParseError(
                "style attribute may only contain declarations",
                path=location.path,
                kind="css",
                line=location.line,
                column=location.column,
            )
        _check_depth(item.value, position)
        _check_tokens(item.value, position)
        declarations.append(_declaration(item, location))
    return tuple(declarations)


def iter_paren_blocks(tokens: Iterable[Any]) -> Iterator[list[Any]]:
    """Yield the content of every ``(...)`` block, outermost first."""
    for token in tokens:
        if token.type == "() block":
            yield token.content
            yield from iter_paren_blocks(token.content)


def iter_value_tokens(tokens: Iterable[Any], *, skip_functions: frozenset[str] = frozenset()) -> Iterator[Any]:
    """Yield value tokens depth-first, not descending into ``skip_functions``."""
    for token in tokens:
        if token.type == "function":
            if token.lower_name in skip_functions:
                continue
            yield token
            yield from iter_value_tokens(token.arguments, skip_functions=skip_functions)
        elif token.type in {"() block", "[] block", "{} block"}:
            yield from iter_value_tokens(token.content, skip_functions=skip_functions)
        else:
            yield token


def _walk_rules(
    nodes: Iterable[Any],
    position: _Position,
    at_rules: list[CssAtRule],
    declarations: list[CssDeclaration],
) -> None:
    for node in nodes:
        if node.type == "error":
            raise _parse_error(node, position)
        if node.type == "at-rule":
            _check_tokens(node.prelude, position)
            at_rules.append(
                CssAtRule(
                    name=node.lower_at_keyword,
                    prelude=tuple(node.prelude),
                    location=position.locate(node),
                    snippet=_snippet(f"@{node.at_keyword} {tinycss2.serialize(node.prelude).strip()}"),
                )
            )
            if node.content is None:
                continue
            if _is_nested_rule_block(node.lower_at_keyword):
                children = tinycss2.parse_rule_list(node.content, skip_comments=True, skip_whitespace=True)
                _walk_rules(children, position, at_rules, declarations)
            else:
                _walk_block(node.content, position, at_rules, declarations)
        elif node.type == "qualified-rule":
            _check_tokens(node.prelude, position)
            _walk_block(node.content, position, at_rules, declarations)


def _walk_block(
    content: list[Any],
    position: _Position,
    at_rules: list[CssAtRule],
    declarations: list[CssDeclaration],
) -> None:
    for item in tinycss2.parse_blocks_contents(content, skip_comments=True, skip_whitespace=True):
        if item.type == "error":
            raise _parse_error(item, position)
        if item.type == "declaration":
            _check_tokens(item.value, position)
            declarations.append(_declaration(item, position.locate(item)))
        else:
            _walk_rules([item], position, at_rules, declarations)


def _is_nested_rule_block(name: str) -> bool:
    return name in NESTED_RULE_AT_RULES or name.endswith("keyframes")


def _check_depth(tokens: Iterable[Any], position: _Position) -> None:
    """Raise when blocks or functions nest deeper than MAX_CSS_NESTING_DEPTH.

    Iterative, so it runs before any of the recursive walks below.
    """
    pending = [(token, 1) for token in tokens]
    while pending:
        token, depth = pending.pop()
        if token.type == "function":
            children = token.arguments
        elif token.type in {"() block", "[] block", "{} block"}:
            children = token.content
        else:
            continue
        if depth > MAX_CSS_NESTING_DEPTH:
            location = position.locate(token)
            raise ParseError(
                f"CSS nesting too deep (more than {MAX_CSS_NESTING_DEPTH} levels)",
                path=location.path,
                kind="css",
                line=location.line,
                column=location.column,
            )
        pending.extend((child, depth + 1) for child in children)


def _check_tokens(tokens: Iterable[Any], position: _Position) -> None:
    """Raise on error tokens the tokenizer left inside a prelude or value."""
    for token in tokens:
        if token.type == "error":
            raise _parse_error(token, position)
        if token.type == "function":
            _check_tokens(token.arguments, position)
        elif token.type in {"() block", "[] block", "{} block"}:
            _check_tokens(token.content, position)


def _declaration(item: Any, location: SourceLocation) -> CssDeclaration:
    value_text = tinycss2.serialize(item.value).strip()
    important = " !important" if item.important else ""
    return CssDeclaration(
        name=item.lower_name,
        value=tuple(item.value),
        location=location,
        snippet=_snippet(f"{item.name}: {value_text}{important}"),
    )


def _parse_error(node: Any, position: _Position) -> ParseError:
    location = position.locate(node)
    return ParseError(
        f"invalid CSS ({node.kind}): {node.message}",
        path=location.path,
        kind="css",
        line=location.line,
        column=location.column,
    )


def _snippet(text: str) -> str:
    return " ".join(text.split())[:SNIPPET_MAX_LENGTH]
