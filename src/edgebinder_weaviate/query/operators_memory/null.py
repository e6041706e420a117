"""Presence / null check operators: exists, null, notNull."""

from __future__ import annotations

from typing import Any

from ..evaluator import MISSING, MemoryOperator
from ..operators import QueryOperator


class ExistsOperator(MemoryOperator):
    """True when the field is present, even if it holds ``None``."""

    @property
    def name(self) -> QueryOperator:
        return QueryOperator.EXISTS

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is not MISSING


class IsNullOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.IS_NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is MISSING or field_value is None


class IsNotNullOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NOT_NULL

    def evaluate(self, field_value: Any, _condition_value: Any) -> bool:
        return field_value is not MISSING and field_value is not None
