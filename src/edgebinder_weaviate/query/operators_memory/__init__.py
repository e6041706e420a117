"""
Where-condition operators evaluated against resolved binding fields.

One strategy class per ``QueryOperator``; ``build_default_registry``
wires all of them::

    registry = build_default_registry()
    registry.evaluate("between", 5, [1, 10])  # True
"""

from __future__ import annotations

from ..evaluator import MemoryOperatorRegistry
from .null import ExistsOperator, IsNotNullOperator, IsNullOperator
from .set import BetweenOperator, InOperator, NotInOperator
from .standard import (
    EqualOperator,
    GreaterEqualOperator,
    GreaterThanOperator,
    LessEqualOperator,
    LessThanOperator,
    NotEqualOperator,
)


def build_default_registry() -> MemoryOperatorRegistry:
    """
    Registry holding every operator in ``QueryOperator``.

    Each call returns a new registry; engines never share one implicitly.
    """
    registry = MemoryOperatorRegistry()
    registry.register_all(
        # comparison
        EqualOperator(),
        NotEqualOperator(),
        GreaterThanOperator(),
        GreaterEqualOperator(),
        LessThanOperator(),
        LessEqualOperator(),
        # membership and ranges
        InOperator(),
        NotInOperator(),
        BetweenOperator(),
        # presence
        ExistsOperator(),
        IsNullOperator(),
        IsNotNullOperator(),
    )
    return registry


__all__ = [
    "build_default_registry",
    "MemoryOperatorRegistry",
]
