"""Constants for fragment detection and CSS/HTML parsing."""

from __future__ import annotations

CSS_SUFFIXES: frozenset[str] = frozenset({".css"})
HTML_SUFFIXES: frozenset[str] = frozenset({".html", ".htm"})

SNIPPET_MAX_LENGTH: int = 160

INLINE_FRAGMENT_PATH: str = "<fragment>"

VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    }
)

# Elements whose end tag may be omitted; an unclosed one is not a parse error.
OPTIONAL_END_TAG_ELEMENTS: frozenset[str] = frozenset(
    {"body", "colgroup", "dd", "dt", "head", "html", "li", "option", "p", "tbody", "td", "tfoot", "th", "thead", "tr"}
)

# At-rules whose block holds nested rules rather than declarations.
NESTED_RULE_AT_RULES: frozenset[str] = frozenset({"media", "supports", "container", "layer", "document"})

# Deeper nesting of blocks and functions is reported as a parse error.
MAX_CSS_NESTING_DEPTH: int = 64
