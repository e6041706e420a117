"""
Query criteria value objects.

``QueryCriteria`` describes *which* bindings a query selects and *how*
the result is shaped (ordering, pagination). Every ``with_*`` method
returns a new instance; criteria are never mutated in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from ..exceptions import InvalidCriteriaError
from .operators import QueryOperator

SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass(frozen=True)
class EntityCriteria:
    """One end of a binding: ``(type, id)``."""

    type: str
    id: str


@dataclass(frozen=True)
class WhereCriteria:
    """A single ``field <operator> value`` condition.

    The operator is kept as given; unknown operators are reported when the
    query is executed, not when the condition is built.
    """

    field: str
    operator: str
    value: Any = None

    def __post_init__(self) -> None:
        if isinstance(self.operator, QueryOperator):
            object.__setattr__(self, "operator", self.operator.value)


@dataclass(frozen=True)
class OrderByCriteria:
    field: str
    direction: str = SORT_ASC

    def __post_init__(self) -> None:
        direction = str(self.direction).lower()
        if direction not in (SORT_ASC, SORT_DESC):
            raise InvalidCriteriaError(
                f"Order direction must be 'asc' or 'desc', got {self.direction!r}",
                field=self.field,
            )
        object.__setattr__(self, "direction", direction)


@dataclass(frozen=True)
class QueryCriteria:
    """
    Immutable description of a binding query.

    Attributes:
        from_entity: Restrict to bindings whose source is this entity.
        to_entity: Restrict to bindings whose target is this entity.
        binding_type: Restrict to bindings of this type.
        where: Conditions ANDed together.
        or_where: Alternative condition groups; each group is ANDed
            internally and the groups are ORed with ``where``.
        order_by: Sort keys; the first entry is the primary key.
        offset: Number of results to skip.
        limit: Maximum number of results.
    """

    from_entity: EntityCriteria | None = None
    to_entity: EntityCriteria | None = None
    binding_type: str | None = None
    where: tuple[WhereCriteria, ...] = ()
    or_where: tuple[tuple[WhereCriteria, ...], ...] = ()
    order_by: tuple[OrderByCriteria, ...] = ()
    offset: int | None = None
    limit: int | None = None

    def __post_init__(self) -> None:
        for name in ("offset", "limit"):
            value = getattr(self, name)
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, int) or value < 0
            ):
                raise InvalidCriteriaError(
                    f"{name} must be a non-negative integer, got {value!r}",
                    field=name,
                )
        object.__setattr__(self, "where", tuple(self.where))
        object.__setattr__(self, "or_where", tuple(tuple(g) for g in self.or_where))
        object.__setattr__(self, "order_by", tuple(self.order_by))

    def with_from(self, entity: EntityCriteria | None) -> QueryCriteria:
        return replace(self, from_entity=entity)

    def with_to(self, entity: EntityCriteria | None) -> QueryCriteria:
        return replace(self, to_entity=entity)

    def with_type(self, binding_type: str | None) -> QueryCriteria:
        return replace(self, binding_type=binding_type)

    def with_where(self, condition: WhereCriteria) -> QueryCriteria:
        """Return a copy with ``condition`` appended to the AND list."""
        return replace(self, where=(*self.where, condition))

    def with_or_group(self, group: tuple[WhereCriteria, ...]) -> QueryCriteria:
        return replace(self, or_where=(*self.or_where, tuple(group)))

    def with_order_by(self, order: OrderByCriteria) -> QueryCriteria:
        """Return a copy with ``order`` appended after the existing sort keys."""
        return replace(self, order_by=(*self.order_by, order))

    def with_pagination(
        self,
        limit: int | None = None,
        offset: int | None = None,
    ) -> QueryCriteria:
        """Return a copy with updated pagination parameters."""
        return replace(
            self,
            limit=limit if limit is not None else self.limit,
            offset=offset if offset is not None else self.offset,
        )


__all__ = [
    "EntityCriteria",
    "WhereCriteria",
    "OrderByCriteria",
    "QueryCriteria",
    "SORT_ASC",
    "SORT_DESC",
]
