"""Shared fixtures and helpers for catalog test modules."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def _minimal_rule(**overrides: Any) -> dict[str, Any]:
    """Return a minimal valid rule dict, merged with *overrides*."""
    base: dict[str, Any] = {
        "rule_id": "TEST_RULE",
        "version": 1,
        "category": "layout",
        "polarity": "forbidden",
        "severity": "medium",
        "title": "Test rule",
        "rationale": "Test rationale",
        "match": {
            "source": "css",
            "strategy": "fixed_breakpoint",
            "units": ["px"],
        },
    }
    base.update(overrides)
    return base


def _minimal_tree(**overrides: Any) -> dict[str, Any]:
    """Return a minimal valid two-question tree dict, merged with *overrides*."""
    base: dict[str, Any] = {
        "tree_id": "test-tree",
        "version": 1,
        "title": "Test tree",
        "category": "layout",
        "root": "first",
        "nodes": {
            "first": {
                "question": "alpha",
                "answers": {True: {"recommend": "done"}, False: {"next": "second"}},
            },
            "second": {
                "question": "beta",
                "answers": {"wide": {"recommend": "wide"}, "narrow": {"recommend": "done"}},
            },
        },
        "recommendations": {
            "done": {"utility": ".done"},
            "wide": {"utility": ".wide", "notes": "Use the wide variant."},
        },
    }
    base.update(overrides)
    return base


def _write_yaml(path: Path, payload: dict[str, Any]) -> Path:
    """Write *payload* as YAML to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(payload, sort_keys=False), encoding="utf-8")
    return path


def _write_rule_file(root: Path, name: str = "test_rule.yaml", **overrides: Any) -> Path:
    """Write a minimal rule YAML file under ``root/rules``."""
    return _write_yaml(root / "rules" / name, _minimal_rule(**overrides))


def _write_tree_file(root: Path, name: str = "test_tree.yaml", **overrides: Any) -> Path:
    """Write a minimal tree YAML file under ``root/trees``."""
    return _write_yaml(root / "trees" / name, _minimal_tree(**overrides))
