"""Cross-module type aliases."""

from __future__ import annotations

from typing import Literal, TypeAlias

Severity: TypeAlias = Literal["low", "medium", "high"]
Category: TypeAlias = Literal["layout", "typography", "spacing", "accessibility", "color"]
Polarity: TypeAlias = Literal["forbidden", "required"]
FragmentKind: TypeAlias = Literal["css", "html"]
Answer: TypeAlias = bool | str

JsonScalar: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = JsonScalar | list["JsonValue"] | dict[str, "JsonValue"]
JsonObject: TypeAlias = dict[str, JsonValue]
