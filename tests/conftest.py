"""Shared pytest fixtures for repository-local test data."""

from __future__ import annotations

from pathlib import Path

import pytest

from fluidlint.catalog import RuleCatalog, bundled_catalog
from fluidlint.model import SourceFragment


@pytest.fixture(scope="session")
def catalog() -> RuleCatalog:
    """Return the bundled rule catalog."""
    return bundled_catalog()


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """Return a small project with one clean and one failing stylesheet plus a page."""
    (tmp_path / "styles").mkdir()
    (tmp_path / "styles" / "clean.css").write_text(
        ".card { padding: var(--space-s); font-size: var(--step-0); }\n",
        encoding="utf-8",
    )
    (tmp_path / "styles" / "legacy.css").write_text(
        "@media (min-width: 768px) {\n  .card { font-size: 18px; }\n}\n",
        encoding="utf-8",
    )
    (tmp_path / "index.html").write_text(
        '<!doctype html>\n<html lang="en">\n<head>\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        "</head>\n<body>\n"
        '<img src="/img/team.jpg">\n'
        "</body>\n</html>\n",
        encoding="utf-8",
    )
    return tmp_path


def css(text: str, path: str = "styles.css") -> SourceFragment:
    """Build a CSS fragment."""
    return SourceFragment(text=text, kind="css", path=path)


def html(text: str, path: str = "page.html") -> SourceFragment:
    """Build an HTML fragment."""
    return SourceFragment(text=text, kind="html", path=path)
