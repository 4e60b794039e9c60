"""Shared type aliases for fluidlint."""

from .common import Answer, Category, FragmentKind, JsonObject, JsonScalar, JsonValue, Polarity, Severity

__all__ = [
    "Answer",
    "Category",
    "FragmentKind",
    "JsonObject",
    "JsonScalar",
    "JsonValue",
    "Polarity",
    "Severity",
]
