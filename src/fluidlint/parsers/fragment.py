"""Fragment loading and parsing into the views matchers work on."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from fluidlint.constants.parsing import CSS_SUFFIXES, HTML_SUFFIXES
from fluidlint.exceptions import ParseError
from fluidlint.model import ParseIssue, SourceFragment, SourceLocation
from fluidlint.parsers.css import CssDeclaration, ParsedStylesheet, parse_inline_style, parse_stylesheet
from fluidlint.parsers.html import HtmlDocument, parse_html
from fluidlint.types import FragmentKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedFragment:
    """A fragment with its CSS views, its HTML document and any parse issues.

    HTML fragments contribute one stylesheet per ``<style>`` block and one
    more holding every inline ``style=""`` declaration.
    """

    fragment: SourceFragment
    stylesheets: tuple[ParsedStylesheet, ...] = ()
    document: HtmlDocument | None = None
    issues: tuple[ParseIssue, ...] = ()

    @property
    def path(self) -> str:
        return self.fragment.path

    @property
    def parsed_ok(self) -> bool:
        return not self.issues


def fragment_kind_for(path: Path) -> FragmentKind | None:
    """Return the fragment kind implied by a file suffix, or None if unsupported."""
    suffix = path.suffix.lower()
    if suffix in CSS_SUFFIXES:
        return "css"
    if suffix in HTML_SUFFIXES:
        return "html"
    return None


def read_fragment(path: Path, *, display_path: str | None = None) -> SourceFragment:
    """Read a CSS or HTML file as a fragment.

    Raises ParseError when the file is not valid UTF-8 or the suffix is
    unsupported.
    """
    shown = display_path if display_path is not None else path.as_posix()
    kind = fragment_kind_for(path)
    if kind is None:
        raise ParseError(f"unsupported file type: {path.suffix or '(none)'}", path=shown, kind="css")
    try:
        text = path.read_bytes().decode("utf-8-sig")
    except OSError as exc:
        raise ParseError(f"could not read file: {exc.strerror or exc}", path=shown, kind=kind) from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"file is not valid UTF-8: {exc.reason}", path=shown, kind=kind) from exc
    return SourceFragment(text=text, kind=kind, path=shown)


def parse_fragment(fragment: SourceFragment) -> ParsedFragment:
    """Parse a fragment, capturing syntax errors as issues instead of raising."""
    try:
        if fragment.kind == "css":
            stylesheet = parse_stylesheet(fragment.text, path=fragment.path)
            return ParsedFragment(fragment=fragment, stylesheets=(stylesheet,))
        document = parse_html(fragment.text, path=fragment.path)
        stylesheets = _embedded_stylesheets(document)
    except ParseError as exc:
        logger.debug("Parse error in %s: %s", fragment.path, exc.message)
        return ParsedFragment(fragment=fragment, issues=(issue_from_error(exc),))
    return ParsedFragment(fragment=fragment, stylesheets=stylesheets, document=document)


def issue_from_error(error: ParseError) -> ParseIssue:
    return ParseIssue(
        location=SourceLocation(path=error.path, line=error.line, column=error.column),
        kind="html" if error.kind == "html" else "css",
        message=error.message,
    )


def _embedded_stylesheets(document: HtmlDocument) -> tuple[ParsedStylesheet, ...]:
    stylesheets = [
        parse_stylesheet(block.text, path=document.path, line=block.line, column=block.column)
        for block in document.style_blocks
    ]
    inline: list[CssDeclaration] = []
    for style in document.inline_styles:
        inline.extend(parse_inline_style(style.text, location=style.location))
    if inline:
        stylesheets.append(ParsedStylesheet(path=document.path, declarations=tuple(inline)))
    return tuple(stylesheets)
