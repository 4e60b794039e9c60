"""Tests for HTML match strategies against the bundled rules."""

from __future__ import annotations

import pytest

from fluidlint.catalog import RuleCatalog
from fluidlint.matchers import evaluate, evaluate_all
from fluidlint.matchers.html_rules import filename_defaults
from fluidlint.model import SourceLocation
from fluidlint.parsers import parse_fragment

from ..conftest import css, html


def _count(catalog: RuleCatalog, rule_id: str, text: str) -> int:
    return len(evaluate_all(catalog.rule(rule_id), parse_fragment(html(text))))


def test_img_without_alt_is_a_violation(catalog: RuleCatalog) -> None:
    violation = evaluate(catalog.rule("ACCESSIBILITY_IMG_ALT"), html('<p>\n  <img src="hero.png">\n</p>'))

    assert violation is not None
    assert violation.rule_id == "ACCESSIBILITY_IMG_ALT"
    assert violation.polarity == "required"
    assert violation.location == SourceLocation(path="page.html", line=2, column=3)
    assert violation.snippet == '<img src="hero.png">'


def test_meaningful_alt_removes_the_violation(catalog: RuleCatalog) -> None:
    assert evaluate(catalog.rule("ACCESSIBILITY_IMG_ALT"), html('<img src="hero.png" alt="Team on the stairs">')) is None


@pytest.mark.parametrize(
    "tag",
    [
        pytest.param('<img src="hero.png" alt="">', id="empty"),
        pytest.param('<img src="hero.png" alt>', id="valueless"),
        pytest.param('<img src="hero.png" alt="   ">', id="whitespace"),
        pytest.param('<img src="hero.png" alt="Image">', id="placeholder"),
        pytest.param('<img src="/img/hero.png" alt="hero.png">', id="file-name"),
        pytest.param('<img src="/img/team_photo-2x.jpg" alt="Team photo 2x">', id="file-stem"),
    ],
)
def test_placeholder_alt_text_is_a_violation(catalog: RuleCatalog, tag: str) -> None:
    assert _count(catalog, "ACCESSIBILITY_IMG_ALT", tag) == 1


def test_html_rules_do_not_apply_to_css(catalog: RuleCatalog) -> None:
    assert evaluate(catalog.rule("ACCESSIBILITY_IMG_ALT"), css(".img { display: block }")) is None


def test_filename_defaults() -> None:
    assert filename_defaults("/img/hero_banner-2x.png") == frozenset(
        {"hero_banner-2x.png", "hero_banner-2x", "hero banner 2x"}
    )
    assert filename_defaults("https://cdn.example.com/a/Team%20Photo.JPG?w=400") == frozenset(
        {"team photo.jpg", "team photo"}
    )
    assert filename_defaults("https://cdn.example.com/") == frozenset()


@pytest.mark.parametrize(
    ("text", "count"),
    [
        pytest.param('<input id="email" type="email">', 1, id="unlabelled"),
        pytest.param('<label for="email">Email</label>\n<input id="email" type="email">', 0, id="label-for"),
        pytest.param("<label>Email <input></label>", 0, id="wrapping-label"),
        pytest.param('<input aria-label="Search">', 0, id="aria-label"),
        pytest.param('<textarea aria-labelledby="note-heading"></textarea>', 0, id="aria-labelledby"),
        pytest.param('<input type="hidden" name="token"><input type="submit">', 0, id="exempt-types"),
        pytest.param('<input placeholder="Email">', 1, id="placeholder-only"),
        pytest.param('<select id="size"></select><label for="other">Other</label>', 1, id="label-elsewhere"),
    ],
)
def test_labelled_control(catalog: RuleCatalog, text: str, count: int) -> None:
    assert _count(catalog, "ACCESSIBILITY_FORM_LABEL", text) == count


@pytest.mark.parametrize(
    ("text", "count"),
    [
        pytest.param("<html><body></body></html>", 1, id="missing"),
        pytest.param('<html lang=""><body></body></html>', 1, id="empty"),
        pytest.param('<html lang="en"><body></body></html>', 0, id="present"),
        pytest.param("<main><p>Fragment</p></main>", 0, id="no-html-element"),
    ],
)
def test_html_lang(catalog: RuleCatalog, text: str, count: int) -> None:
    assert _count(catalog, "ACCESSIBILITY_HTML_LANG", text) == count


def test_viewport_meta_required_in_head(catalog: RuleCatalog) -> None:
    """A document head without the viewport meta is reported at the head tag."""
    violation = evaluate(
        catalog.rule("LAYOUT_VIEWPORT_META"),
        html('<html lang="en"><head><title>x</title></head><body></body></html>'),
    )

    assert violation is not None
    assert violation.location == SourceLocation(path="page.html", line=1, column=17)
    assert violation.snippet == "<head>"


@pytest.mark.parametrize(
    ("text", "count"),
    [
        pytest.param(
            '<head><meta name="viewport" content="width=device-width, initial-scale=1"></head>',
            0,
            id="present",
        ),
        pytest.param('<head><meta name="Viewport" content="width = device-width"></head>', 0, id="spacing-case"),
        pytest.param('<head><meta name="viewport" content="initial-scale=1"></head>', 1, id="no-device-width"),
        pytest.param('<head><meta charset="utf-8"></head>', 1, id="other-meta"),
        pytest.param("<section><p>Partial</p></section>", 0, id="no-head"),
    ],
)
def test_viewport_meta(catalog: RuleCatalog, text: str, count: int) -> None:
    assert _count(catalog, "LAYOUT_VIEWPORT_META", text) == count
