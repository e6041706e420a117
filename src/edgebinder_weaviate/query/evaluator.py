"""
In-memory operator evaluation strategy.

Provides the MemoryOperator protocol and a registry that maps
QueryOperator → evaluation strategy. The filter engine resolves a field
value from a binding and asks the registry whether the condition holds.

Field values that do not exist on a binding are passed as :data:`MISSING`
so that ``exists`` can tell an absent key from a key holding ``None``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from ..exceptions import UnsupportedOperatorError
from .operators import VALID_OPERATORS, QueryOperator


class _Missing:
    """Sentinel for a field that is absent from a binding."""

    def __repr__(self) -> str:
        return "<missing>"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


def present(value: Any) -> Any:
    """Collapse :data:`MISSING` to ``None`` for value comparisons."""
    return None if value is MISSING else value


def _kind(value: Any) -> Any:
    # bool before int: bool is an int subclass
    for kind in (bool, int, float, str, type(None)):
        if isinstance(value, kind):
            return kind
    if isinstance(value, date):
        return date
    if isinstance(value, list | tuple):
        return list
    if isinstance(value, dict):
        return dict
    return type(value)


def strict_equals(left: Any, right: Any) -> bool:
    """Equality that also requires matching kinds (``1 != 1.0 != True``)."""
    if _kind(left) is not _kind(right):
        return False
    if isinstance(left, dict):
        return left.keys() == right.keys() and all(
            strict_equals(left[k], right[k]) for k in left
        )
    if isinstance(left, list | tuple):
        return len(left) == len(right) and all(
            strict_equals(a, b) for a, b in zip(left, right, strict=True)
        )
    return bool(left == right)


class MemoryOperator(ABC):
    """
    Strategy interface for in-memory operator evaluation.

    Each operator is an isolated class with a single ``evaluate`` method.
    """

    @property
    @abstractmethod
    def name(self) -> QueryOperator:
        """The operator this strategy handles."""
        ...

    @abstractmethod
    def evaluate(self, field_value: Any, condition_value: Any) -> bool:
        """
        Evaluate the operator against concrete values.

        Args:
            field_value: The value resolved from the binding, or ``MISSING``.
            condition_value: The literal given in the where-condition.

        Returns:
            True if the condition is satisfied.

        Raises:
            TypeError: If the values cannot be compared.
            ValueError: If the literal has the wrong shape for the operator.
        """
        ...


class MemoryOperatorRegistry:
    """
    Registry of MemoryOperator instances keyed by QueryOperator.

    Usage::

        registry = MemoryOperatorRegistry()
        registry.register(EqualOperator())

        result = registry.evaluate(QueryOperator.EQ, actual, expected)
    """

    def __init__(self) -> None:
        self._operators: dict[QueryOperator, MemoryOperator] = {}

    # -- registration --------------------------------------------------------

    def register(self, operator: MemoryOperator) -> None:
        """Register an operator strategy instance."""
        self._operators[operator.name] = operator

    def register_all(self, *operators: MemoryOperator) -> None:
        """Register multiple operator strategy instances at once."""
        for op in operators:
            self.register(op)

    def unregister(self, name: QueryOperator) -> None:
        """Remove an operator from the registry."""
        self._operators.pop(name, None)

    # -- look-up -------------------------------------------------------------

    def get(self, name: QueryOperator | str) -> MemoryOperator | None:
        """Return the registered operator or ``None``."""
        try:
            key = QueryOperator(name)
        except ValueError:
            return None
        return self._operators.get(key)

    def has(self, name: QueryOperator | str) -> bool:
        return self.get(name) is not None

    @property
    def supported_operators(self) -> set[QueryOperator]:
        return set(self._operators.keys())

    def resolve(self, name: QueryOperator | str) -> MemoryOperator:
        """
        Return the operator strategy for ``name``.

        Raises:
            UnsupportedOperatorError: If the operator is unknown or not registered.
        """
        op = self.get(name)
        if op is None:
            raise UnsupportedOperatorError(
                str(getattr(name, "value", name)),
                [v for v in VALID_OPERATORS if self.has(v)],
            )
        return op

    # -- evaluation shortcut -------------------------------------------------

    def evaluate(
        self,
        name: QueryOperator | str,
        field_value: Any,
        condition_value: Any,
    ) -> bool:
        """Look up the operator and evaluate."""
        return self.resolve(name).evaluate(field_value, condition_value)
