"""Match strategies evaluated against the HTML element list."""

from __future__ import annotations

from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from fluidlint.matchers.shared import build_violation, lowered_set
from fluidlint.model import Rule, SourceLocation, Violation
from fluidlint.parsers.fragment import ParsedFragment
from fluidlint.parsers.html import HtmlElement

DEFAULT_CONTROL_ELEMENTS: tuple[str, ...] = ("input", "select", "textarea")
DEFAULT_EXEMPT_INPUT_TYPES: tuple[str, ...] = ("hidden", "submit", "reset", "button", "image")


def run_required_attribute(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Require an attribute on every matching element."""
    document = parsed.document
    if document is None:
        return []
    params = rule.match.params
    attribute = str(params["attribute"]).lower()
    non_empty = bool(params.get("non_empty", False))
    filename_attribute = params.get("filename_attribute")
    placeholders = lowered_set(params, "placeholder_values")

    violations: list[Violation] = []
    for element in document.find(*lowered_set(params, "elements")):
        value = element.attr(attribute)
        if value is None or not _acceptable_value(
            value,
            element,
            non_empty=non_empty,
            filename_attribute=filename_attribute,
            placeholders=placeholders,
        ):
            violations.append(build_violation(rule, element.location, element.snippet))
    return violations


def _acceptable_value(
    value: str,
    element: HtmlElement,
    *,
    non_empty: bool,
    filename_attribute: str | None,
    placeholders: frozenset[str],
) -> bool:
    normalized = " ".join(value.split()).lower()
    if non_empty and not normalized:
        return False
    if normalized and normalized in placeholders:
        return False
    if filename_attribute and normalized:
        source = element.attr(filename_attribute)
        if source and normalized in filename_defaults(source):
            return False
    return True


def filename_defaults(source: str) -> frozenset[str]:
    """Alt-text values an authoring tool would derive from an image URL.

    ``/img/hero_banner-2x.png`` gives ``hero_banner-2x.png``,
    ``hero_banner-2x`` and ``hero banner 2x``.
    """
    name = PurePosixPath(unquote(urlparse(source.strip()).path)).name.lower()
    if not name:
        return frozenset()
    stem = PurePosixPath(name).stem
    spaced = " ".join(stem.replace("-", " ").replace("_", " ").split())
    return frozenset(item for item in (name, stem, spaced) if item)


def run_labelled_control(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Require every form control to have an accessible label."""
    document = parsed.document
    if document is None:
        return []
    params = rule.match.params
    controls = lowered_set(params, "elements", DEFAULT_CONTROL_ELEMENTS)
    exempt_types = lowered_set(params, "exempt_input_types", DEFAULT_EXEMPT_INPUT_TYPES)

    label_targets = {
        target.strip()
        for label in document.find("label")
        if (target := label.attr("for")) and target.strip()
    }

    violations: list[Violation] = []
    for element in document.find(*controls):
        if element.tag == "input" and (element.attr("type") or "text").strip().lower() in exempt_types:
            continue
        if _is_labelled(element, label_targets):
            continue
        violations.append(build_violation(rule, element.location, element.snippet))
    return violations


def _is_labelled(element: HtmlElement, label_targets: set[str]) -> bool:
    if "label" in element.within:
        return True
    for attribute in ("aria-label", "aria-labelledby"):
        value = element.attr(attribute)
        if value and value.strip():
            return True
    element_id = element.attr("id")
    return bool(element_id and element_id.strip() in label_targets)


def run_required_element(rule: Rule, parsed: ParsedFragment) -> list[Violation]:
    """Require an element with given attributes, optionally only when a trigger element exists."""
    document = parsed.document
    if document is None:
        return []
    params = rule.match.params
    tag = str(params["element"]).lower()
    exact = {str(key).lower(): str(value) for key, value in params.get("attributes", {}).items()}
    contains = {str(key).lower(): str(value) for key, value in params.get("attribute_contains", {}).items()}
    trigger_tag = params.get("when_present")

    location = SourceLocation(path=document.path, line=1, column=1)
    snippet = ""
    if trigger_tag:
        triggers = document.find(str(trigger_tag).lower())
        if not triggers:
            return []
        location = triggers[0].location
        snippet = triggers[0].snippet

    for element in document.find(tag):
        if _has_attributes(element, exact, contains):
            return []
    return [build_violation(rule, location, snippet)]


def _has_attributes(element: HtmlElement, exact: dict[str, str], contains: dict[str, str]) -> bool:
    for name, expected in exact.items():
        value = element.attr(name)
        if value is None or value.strip().lower() != expected.lower():
            return False
    for name, fragment in contains.items():
        value = element.attr(name)
        if value is None or _squash(fragment) not in _squash(value):
            return False
    return True


def _squash(text: str) -> str:
    return "".join(text.split()).lower()
