"""Decision-tree definition validation and construction.

A tree file names a root node, a table of question nodes and a table of
terminal recommendations. Each answer branches either to another node
(``next``) or to a recommendation (``recommend``). Dangling references and
cycles fail the load.
"""

from __future__ import annotations

import logging
from typing import Any, TypeAlias

from fluidlint.catalog.schema import validate_version
from fluidlint.constants.catalog import (
    ALLOWED_BRANCH_KEYS,
    ALLOWED_NODE_KEYS,
    ALLOWED_RECOMMENDATION_KEYS,
    ALLOWED_TREE_KEYS,
    CATEGORIES,
    REQUIRED_TREE_KEYS,
    TREE_ID_PATTERN,
)
from fluidlint.decisions.evaluator import normalize_answer
from fluidlint.exceptions import CatalogLoadError
from fluidlint.model import DecisionNode, DecisionTree, Recommendation
from fluidlint.types import Answer

logger = logging.getLogger(__name__)

Edge: TypeAlias = tuple[Answer, str, str]  # (answer, "next" | "recommend", target id)


def build_tree(data: Any, source_path: str) -> DecisionTree:
    """Validate a YAML tree dict and build an immutable DecisionTree."""
    if not isinstance(data, dict):
        raise CatalogLoadError(f"{source_path}: tree must be a mapping, got {type(data).__name__}")

    unknown_top = set(data.keys()) - ALLOWED_TREE_KEYS
    if unknown_top:
        raise CatalogLoadError(f"{source_path}: unknown top-level keys: {sorted(map(str, unknown_top))}")
    for key in sorted(REQUIRED_TREE_KEYS):
        if key not in data:
            raise CatalogLoadError(f"{source_path}: missing required key '{key}'")

    tree_id = data["tree_id"]
    if not isinstance(tree_id, str) or not TREE_ID_PATTERN.match(tree_id):
        raise CatalogLoadError(f"{source_path}: 'tree_id' must be lower-kebab-case, got {tree_id!r}")
    validate_version(data["version"], source_path)
    if data["category"] not in CATEGORIES:
        raise CatalogLoadError(f"{source_path}: category must be one of {sorted(CATEGORIES)}, got {data['category']!r}")
    if not isinstance(data["title"], str) or not data["title"].strip():
        raise CatalogLoadError(f"{source_path}: 'title' must be a non-empty string")

    recommendations = _parse_recommendations(data["recommendations"], tree_id, source_path)
    nodes = _parse_nodes(data["nodes"], source_path)

    root = data["root"]
    if not isinstance(root, str) or root not in nodes:
        raise CatalogLoadError(f"{source_path}: root {root!r} is not a defined node")
    _check_references(nodes, recommendations, source_path)
    _check_acyclic(root, nodes, source_path)

    reachable = _reachable(root, nodes)
    for node_id in nodes:
        if node_id not in reachable:
            logger.warning("%s: node '%s' is unreachable from root '%s'", source_path, node_id, root)
    used = {target for node_id in reachable for _, kind, target in nodes[node_id][1] if kind == "recommend"}
    for recommendation_id in recommendations:
        if recommendation_id not in used:
            logger.warning("%s: recommendation '%s' is never reached", source_path, recommendation_id)

    built: dict[str, DecisionNode] = {}
    return DecisionTree(
        tree_id=tree_id,
        title=data["title"].strip(),
        category=data["category"],
        root=_build_node(root, nodes, recommendations, built),
        source_path=source_path,
    )


def _parse_recommendations(raw: Any, tree_id: str, path: str) -> dict[str, Recommendation]:
    if not isinstance(raw, dict) or not raw:
        raise CatalogLoadError(f"{path}: 'recommendations' must be a non-empty mapping")
    parsed: dict[str, Recommendation] = {}
    for recommendation_id, body in raw.items():
        if not isinstance(recommendation_id, str) or not recommendation_id.strip():
            raise CatalogLoadError(f"{path}: recommendation ids must be non-empty strings, got {recommendation_id!r}")
        if not isinstance(body, dict):
            raise CatalogLoadError(f"{path}: recommendations.{recommendation_id} must be a mapping")
        unknown = set(body) - ALLOWED_RECOMMENDATION_KEYS
        if unknown:
            raise CatalogLoadError(
                f"{path}: unknown keys in recommendations.{recommendation_id}: {sorted(map(str, unknown))}"
            )
        utility = body.get("utility")
        if not isinstance(utility, str) or not utility.strip():
            raise CatalogLoadError(f"{path}: recommendations.{recommendation_id}.utility must be a non-empty string")
        notes = body.get("notes", "")
        if not isinstance(notes, str):
            raise CatalogLoadError(f"{path}: recommendations.{recommendation_id}.notes must be a string")
        parsed[recommendation_id] = Recommendation(
            tree_id=tree_id,
            recommendation_id=recommendation_id,
            utility=utility.strip(),
            notes=" ".join(notes.split()),
        )
    return parsed


def _parse_nodes(raw: Any, path: str) -> dict[str, tuple[dict[str, Any], list[Edge]]]:
    if not isinstance(raw, dict) or not raw:
        raise CatalogLoadError(f"{path}: 'nodes' must be a non-empty mapping")
    parsed: dict[str, tuple[dict[str, Any], list[Edge]]] = {}
    for node_id, body in raw.items():
        where = f"{path}: nodes.{node_id}"
        if not isinstance(node_id, str) or not node_id.strip():
            raise CatalogLoadError(f"{path}: node ids must be non-empty strings, got {node_id!r}")
        if not isinstance(body, dict):
            raise CatalogLoadError(f"{where} must be a mapping")
        unknown = set(body) - ALLOWED_NODE_KEYS
        if unknown:
            raise CatalogLoadError(f"{where} has unknown keys: {sorted(map(str, unknown))}")
        question = body.get("question")
        if not isinstance(question, str) or not question.strip():
            raise CatalogLoadError(f"{where}.question must be a non-empty string")
        prompt = body.get("prompt", "")
        if not isinstance(prompt, str):
            raise CatalogLoadError(f"{where}.prompt must be a string")
        answers = body.get("answers")
        if not isinstance(answers, dict) or not answers:
            raise CatalogLoadError(f"{where}.answers must be a non-empty mapping")

        edges: list[Edge] = []
        seen: set[Answer] = set()
        for raw_answer, branch in answers.items():
            try:
                answer = normalize_answer(raw_answer)
            except TypeError as exc:
                raise CatalogLoadError(f"{where}: answer {raw_answer!r} must be a boolean or a string") from exc
            if answer in seen:
                raise CatalogLoadError(f"{where}: answer {raw_answer!r} is defined twice")
            seen.add(answer)
            edges.append((answer, *_parse_branch(branch, f"{where}.answers.{raw_answer}")))
        parsed[node_id] = ({"question": question.strip(), "prompt": " ".join(prompt.split())}, edges)
    return parsed


def _parse_branch(branch: Any, where: str) -> tuple[str, str]:
    if not isinstance(branch, dict) or len(branch) != 1 or not set(branch) <= ALLOWED_BRANCH_KEYS:
        raise CatalogLoadError(f"{where} must be a mapping with exactly one of {sorted(ALLOWED_BRANCH_KEYS)}")
    ((kind, target),) = branch.items()
    if not isinstance(target, str) or not target.strip():
        raise CatalogLoadError(f"{where}.{kind} must be a non-empty string")
    return kind, target


def _check_references(
    nodes: dict[str, tuple[dict[str, Any], list[Edge]]],
    recommendations: dict[str, Recommendation],
    path: str,
) -> None:
    for node_id, (_, edges) in nodes.items():
        for answer, kind, target in edges:
            if kind == "next" and target not in nodes:
                raise CatalogLoadError(f"{path}: nodes.{node_id} answer {answer!r} points to unknown node '{target}'")
            if kind == "recommend" and target not in recommendations:
                raise CatalogLoadError(
                    f"{path}: nodes.{node_id} answer {answer!r} points to unknown recommendation '{target}'"
                )


def _check_acyclic(root: str, nodes: dict[str, tuple[dict[str, Any], list[Edge]]], path: str) -> None:
    """Depth-first search over ``next`` edges of every node; a back edge is a cycle."""
    done: set[str] = set()

    def visit(node_id: str, trail: list[str]) -> None:
        if node_id in trail:
            cycle = " -> ".join([*trail[trail.index(node_id) :], node_id])
            raise CatalogLoadError(f"{path}: decision tree has a cycle: {cycle}")
        if node_id in done:
            return
        trail.append(node_id)
        for _, kind, target in nodes[node_id][1]:
            if kind == "next":
                visit(target, trail)
        trail.pop()
        done.add(node_id)

    visit(root, [])
    for node_id in nodes:
        visit(node_id, [])


def _reachable(root: str, nodes: dict[str, tuple[dict[str, Any], list[Edge]]]) -> set[str]:
    seen: set[str] = set()
    pending = [root]
    while pending:
        node_id = pending.pop()
        if node_id in seen:
            continue
        seen.add(node_id)
        pending.extend(target for _, kind, target in nodes[node_id][1] if kind == "next")
    return seen


def _build_node(
    node_id: str,
    nodes: dict[str, tuple[dict[str, Any], list[Edge]]],
    recommendations: dict[str, Recommendation],
    built: dict[str, DecisionNode],
) -> DecisionNode:
    if node_id in built:
        return built[node_id]
    body, edges = nodes[node_id]
    branches: list[tuple[Answer, DecisionNode | Recommendation]] = []
    for answer, kind, target in edges:
        if kind == "next":
            branches.append((answer, _build_node(target, nodes, recommendations, built)))
        else:
            branches.append((answer, recommendations[target]))
    node = DecisionNode(node_id=node_id, question=body["question"], branches=tuple(branches), prompt=body["prompt"])
    built[node_id] = node
    return node
