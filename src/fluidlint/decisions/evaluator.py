"""DecisionTreeEvaluator: walks a decision tree with caller-supplied facts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace

from fluidlint.constants.catalog import FALSE_ANSWERS, TRUE_ANSWERS
from fluidlint.exceptions import IncompleteFactsError, InvalidFactError
from fluidlint.model import DecisionNode, DecisionTree, Recommendation
from fluidlint.types import Answer

logger = logging.getLogger(__name__)


def normalize_answer(value: object) -> Answer:
    """Normalize an answer: booleans stay, boolean words become booleans, other text is lower-cased.

    Raises TypeError for anything that is not a bool or a string.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_ANSWERS:
            return True
        if lowered in FALSE_ANSWERS:
            return False
        return lowered
    raise TypeError(f"answers must be booleans or strings, got {type(value).__name__}")


def recommend(tree: DecisionTree | DecisionNode, facts: Mapping[str, object]) -> Recommendation:
    """Walk ``tree`` from its root and return the terminal recommendation.

    Every question on the path must be answered in ``facts``; there is no
    implicit default. Raises IncompleteFactsError naming the first unanswered
    question and InvalidFactError for an answer no branch accepts.
    """
    if isinstance(tree, DecisionTree):
        tree_id = tree.tree_id
        node = tree.root
    else:
        tree_id = f"<node {tree.node_id}>"
        node = tree

    trail: list[tuple[str, Answer]] = []
    while True:
        if node.question not in facts:
            raise IncompleteFactsError(tree_id, node.question)
        raw = facts[node.question]
        try:
            answer = normalize_answer(raw)
        except TypeError as exc:
            raise InvalidFactError(tree_id, node.question, raw, node.accepted_answers) from exc

        target = node.branch_for(answer)
        if target is None:
            raise InvalidFactError(tree_id, node.question, raw, node.accepted_answers)
        trail.append((node.question, answer))

        if isinstance(target, Recommendation):
            logger.debug("Tree %s -> %s via %s", tree_id, target.recommendation_id, trail)
            return replace(target, trail=tuple(trail))
        node = target
