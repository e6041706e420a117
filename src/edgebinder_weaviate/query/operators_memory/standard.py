"""Standard comparison operators: =, !=, >, >=, <, <=."""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator, present, strict_equals
from ..operators import QueryOperator


class EqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.EQ

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return strict_equals(present(field_value), condition_value)


class NotEqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        return not strict_equals(present(field_value), condition_value)


class GreaterThanOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        field_value = present(field_value)
        if field_value is None or condition_value is None:
            return False
        return bool(field_value > condition_value)


class GreaterEqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.GE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        field_value = present(field_value)
        if field_value is None or condition_value is None:
            return False
        return bool(field_value >= condition_value)


class LessThanOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LT

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        field_value = present(field_value)
        if field_value is None or condition_value is None:
            return False
        return bool(field_value < condition_value)


class LessEqualOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.LE

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        field_value = present(field_value)
        if field_value is None or condition_value is None:
            return False
        return bool(field_value <= condition_value)
