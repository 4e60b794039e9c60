"""HTML fragment parsing into a flat element list with ancestry."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from html.parser import HTMLParser

from fluidlint.constants.parsing import OPTIONAL_END_TAG_ELEMENTS, SNIPPET_MAX_LENGTH, VOID_ELEMENTS
from fluidlint.exceptions import ParseError
from fluidlint.model import SourceLocation


@dataclass(frozen=True)
class HtmlElement:
    """A start tag, its attributes and the names of its open ancestors."""

    tag: str
    attrs: tuple[tuple[str, str | None], ...]
    location: SourceLocation
    within: frozenset[str] = frozenset()
    snippet: str = ""

    def has_attr(self, name: str) -> bool:
        return any(key == name for key, _ in self.attrs)

    def attr(self, name: str) -> str | None:
        """Return the attribute value; valueless attributes read as ``""``."""
        for key, value in self.attrs:
            if key == name:
                return value if value is not None else ""
        return None


@dataclass(frozen=True)
class StyleBlock:
    """Text of a ``<style>`` element and where that text starts."""

    text: str
    line: int
    column: int


@dataclass(frozen=True)
class InlineStyle:
    """Text of a ``style=""`` attribute, located at its element."""

    text: str
    location: SourceLocation


@dataclass(frozen=True)
class HtmlDocument:
    path: str
    elements: tuple[HtmlElement, ...] = ()
    style_blocks: tuple[StyleBlock, ...] = ()
    inline_styles: tuple[InlineStyle, ...] = ()

    def find(self, *tags: str) -> tuple[HtmlElement, ...]:
        wanted = frozenset(tags)
        return tuple(element for element in self.elements if element.tag in wanted)


@dataclass
class _OpenElement:
    tag: str
    location: SourceLocation


@dataclass
class _StyleCapture:
    chunks: list[str] = field(default_factory=list)
    line: int | None = None
    column: int | None = None


class _DocumentBuilder(HTMLParser):
    def __init__(self, path: str) -> None:
        super().__init__(convert_charrefs=True)
        self.path = path
        self.elements: list[HtmlElement] = []
        self.style_blocks: list[StyleBlock] = []
        self.inline_styles: list[InlineStyle] = []
        self.errors: list[ParseError] = []
        self.stack: list[_OpenElement] = []
        self._open_counts: Counter[str] = Counter()
        # Shared by every element recorded while the set of open tag names is unchanged.
        self._within: frozenset[str] = frozenset()
        self._style: _StyleCapture | None = None

    def _location(self) -> SourceLocation:
        line, offset = self.getpos()
        return SourceLocation(path=self.path, line=line, column=offset + 1)

    def _record(self, tag: str, attrs: list[tuple[str, str | None]]) -> SourceLocation:
        location = self._location()
        snippet = " ".join((self.get_starttag_text() or f"<{tag}>").split())[:SNIPPET_MAX_LENGTH]
        self.elements.append(
            HtmlElement(
                tag=tag,
                attrs=tuple(attrs),
                location=location,
                within=self._within,
                snippet=snippet,
            )
        )
        style = dict(attrs).get("style")
        if style and style.strip():
            self.inline_styles.append(InlineStyle(text=style, location=location))
        return location

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        location = self._record(tag, attrs)
        if tag in VOID_ELEMENTS:
            return
        self._push(_OpenElement(tag=tag, location=location))
        if tag == "style":
            self._style = _StyleCapture()

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        self._record(tag, attrs)

    def handle_data(self, data: str) -> None:
        if self._style is None:
            return
        if self._style.line is None:
            location = self._location()
            self._style.line = location.line
            self._style.column = location.column
        self._style.chunks.append(data)

    def handle_endtag(self, tag: str) -> None:
        if tag in VOID_ELEMENTS:
            return
        if tag == "style" and self._style is not None:
            capture = self._style
            self._style = None
            if capture.line is not None:
                self.style_blocks.append(
                    StyleBlock(text="".join(capture.chunks), line=capture.line, column=capture.column or 1)
                )

        if not self._open_counts[tag]:
            self._error(f"end tag </{tag}> has no matching start tag", self._location())
            return

        while self.stack:
            item = self._pop()
            if item.tag == tag:
                break
            if item.tag not in OPTIONAL_END_TAG_ELEMENTS:
                self._error(f"<{item.tag}> is not closed before </{tag}>", item.location)

    def finish(self) -> None:
        # Unfinished text (a pending "&" reference) is flushed by close(); an
        # unfinished tag or comment is not.
        if self.rawdata.lstrip().startswith("<"):
            self._error("unterminated markup at end of fragment", self._location())
        self.close()
        for item in self.stack:
            if item.tag not in OPTIONAL_END_TAG_ELEMENTS:
                self._error(f"<{item.tag}> is never closed", item.location)
        self.stack.clear()
        self._open_counts.clear()
        self._within = frozenset()

    def _push(self, item: _OpenElement) -> None:
        self.stack.append(item)
        self._open_counts[item.tag] += 1
        if self._open_counts[item.tag] == 1:
            self._within = self._within | {item.tag}

    def _pop(self) -> _OpenElement:
        item = self.stack.pop()
        self._open_counts[item.tag] -= 1
        if not self._open_counts[item.tag]:
            del self._open_counts[item.tag]
            self._within = self._within - {item.tag}
        return item

    def _error(self, message: str, location: SourceLocation) -> None:
        self.errors.append(
            ParseError(message, path=location.path, kind="html", line=location.line, column=location.column)
        )


def parse_html(text: str, *, path: str) -> HtmlDocument:
    """Parse HTML text into an element list.

    Raises ParseError for the earliest structural problem: stray or
    mismatched end tags, elements left open, or truncated markup.
    """
    builder = _DocumentBuilder(path)
    builder.feed(text)
    builder.finish()
    if builder.errors:
        raise min(builder.errors, key=lambda error: (error.line or 0, error.column or 0))
    return HtmlDocument(
        path=path,
        elements=tuple(builder.elements),
        style_blocks=tuple(builder.style_blocks),
        inline_styles=tuple(builder.inline_styles),
    )
