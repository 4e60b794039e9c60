"""CSS and HTML fragment parsers."""

from __future__ import annotations

from .css import CssAtRule, CssDeclaration, ParsedStylesheet, parse_inline_style, parse_stylesheet
from .fragment import ParsedFragment, fragment_kind_for, parse_fragment, read_fragment
from .html import HtmlDocument, HtmlElement, parse_html

__all__ = [
    "CssAtRule",
    "CssDeclaration",
    "HtmlDocument",
    "HtmlElement",
    "ParsedFragment",
    "ParsedStylesheet",
    "fragment_kind_for",
    "parse_fragment",
    "parse_html",
    "parse_inline_style",
    "parse_stylesheet",
    "read_fragment",
]
