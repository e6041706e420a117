"""Set operators: in, notIn, between."""

from __future__ import annotations

from typing import Any

from ..evaluator import MemoryOperator, present, strict_equals
from ..operators import QueryOperator


def _require_list(
    operator: QueryOperator, condition_value: Any
) -> list[Any] | tuple[Any, ...]:
    if not isinstance(condition_value, list | tuple):
        raise TypeError(
            f"Operator '{operator.value}' requires a list value, "
            f"got {type(condition_value).__name__}"
        )
    return condition_value


class InOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        candidates = _require_list(self.name, condition_value)
        value = present(field_value)
        return any(strict_equals(value, c) for c in candidates)


class NotInOperator(MemoryOperator):
    @property
    def name(self) -> QueryOperator:
        return QueryOperator.NOT_IN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        candidates = _require_list(self.name, condition_value)
        value = present(field_value)
        return not any(strict_equals(value, c) for c in candidates)


class BetweenOperator(MemoryOperator):
    """Inclusive range check; the literal is ``[low, high]``."""

    @property
    def name(self) -> QueryOperator:
        return QueryOperator.BETWEEN

    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        bounds = _require_list(self.name, condition_value)
        if len(bounds) != 2:
            raise ValueError(
                f"Operator 'between' requires exactly 2 values, got {len(bounds)}"
            )
        value = present(field_value)
        if value is None:
            return False
        low, high = bounds
        return bool(low <= value <= high)
