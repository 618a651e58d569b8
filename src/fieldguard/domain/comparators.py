"""Comparison operators and their human descriptions.

Built-in bound checks phrase their messages through these descriptions so
numeric and temporal rules read naturally: "at least 18" vs "after 2020-01-01".
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from enum import StrEnum
from typing import Any


class Comparator(StrEnum):
    EQUALS = "="
    NOT_EQUAL = "!="
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LESS_THAN_OR_EQUAL = "<="
    GREATER_THAN_OR_EQUAL = ">="

    @property
    def numeric_description(self) -> str:
        return _DESCRIPTIONS[self][0]

    @property
    def temporal_description(self) -> str:
        return _DESCRIPTIONS[self][1]

    def compare(self, left: Any, right: Any) -> bool:
        """Evaluate ``left <op> right``."""
        return bool(_OPERATORS[self](left, right))


_DESCRIPTIONS: dict[Comparator, tuple[str, str]] = {
    Comparator.EQUALS: ("equal to", "the same as"),
    Comparator.NOT_EQUAL: ("not equal to", "not the same as"),
    Comparator.LESS_THAN: ("less than", "before"),
    Comparator.GREATER_THAN: ("greater than", "after"),
    Comparator.LESS_THAN_OR_EQUAL: ("less than or equal to", "at most"),
    Comparator.GREATER_THAN_OR_EQUAL: ("greater than or equal to", "at least"),
}

_OPERATORS: dict[Comparator, Callable[[Any, Any], Any]] = {
    Comparator.EQUALS: operator.eq,
    Comparator.NOT_EQUAL: operator.ne,
    Comparator.LESS_THAN: operator.lt,
    Comparator.GREATER_THAN: operator.gt,
    Comparator.LESS_THAN_OR_EQUAL: operator.le,
    Comparator.GREATER_THAN_OR_EQUAL: operator.ge,
}
