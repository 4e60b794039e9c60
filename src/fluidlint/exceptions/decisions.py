"""Decision-tree query exceptions."""

from __future__ import annotations

from fluidlint.exceptions.base import FluidLintError


class FactsError(FluidLintError, LookupError):
    """Raised when supplied facts cannot drive a decision tree to a recommendation."""


class IncompleteFactsError(FactsError):
    """Raised when no answer was supplied for a question on the traversal path."""

    def __init__(self, tree_id: str, question: str) -> None:
        super().__init__(f"decision tree '{tree_id}' needs an answer for '{question}'")
        self.tree_id = tree_id
        self.question = question


class InvalidFactError(FactsError):
    """Raised when a supplied answer matches no branch of its question."""

    def __init__(self, tree_id: str, question: str, answer: object, accepted: tuple[object, ...]) -> None:
        accepted_text = ", ".join(repr(item) for item in accepted)
        super().__init__(
            f"decision tree '{tree_id}' has no branch for {question}={answer!r} (accepted: {accepted_text})"
        )
        self.tree_id = tree_id
        self.question = question
        self.answer = answer
        self.accepted = accepted
