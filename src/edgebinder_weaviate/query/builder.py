"""
Fluent, immutable builder for binding queries.

Every method returns a new builder; the receiver is never modified::

    base = adapter.query().from_(user).type("owns")
    recent = base.where("lvl", ">", 1).order_by("lvl", "desc").limit(10)
    admins = base.or_where(lambda q: q.where("role", "admin"))

    for binding in recent.get():
        ...

``where(field, value)`` is shorthand for ``where(field, "=", value)``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.binding import EntityReference
from ..exceptions import InvalidCriteriaError, QueryExecutionError
from .criteria import (
    SORT_ASC,
    EntityCriteria,
    OrderByCriteria,
    QueryCriteria,
    WhereCriteria,
)
from .operators import QueryOperator

if TYPE_CHECKING:
    from ..domain.binding import Binding
    from .result import QueryResult


class QueryExecutor(Protocol):
    """Whatever can run a finished ``QueryCriteria`` (the adapter)."""

    def execute_query(self, criteria: QueryCriteria) -> QueryResult: ...

    def count(self, criteria: QueryCriteria) -> int: ...


_UNSET: Any = object()


class BindingQueryBuilder:
    """Immutable query builder; bind an executor to run queries."""

    def __init__(
        self,
        executor: QueryExecutor | None = None,
        criteria: QueryCriteria | None = None,
    ) -> None:
        self._executor = executor
        self._criteria = criteria or QueryCriteria()

    def _with(self, criteria: QueryCriteria) -> BindingQueryBuilder:
        return BindingQueryBuilder(self._executor, criteria)

    # -- scope ---------------------------------------------------------------

    def from_(
        self, entity: object, entity_id: str | None = None
    ) -> BindingQueryBuilder:
        """Restrict to bindings from ``entity`` (or from ``(type, id)``)."""
        criteria = _entity_criteria(entity, entity_id)
        return self._with(self._criteria.with_from(criteria))

    def to(self, entity: object, entity_id: str | None = None) -> BindingQueryBuilder:
        """Restrict to bindings to ``entity`` (or to ``(type, id)``)."""
        criteria = _entity_criteria(entity, entity_id)
        return self._with(self._criteria.with_to(criteria))

    def type(self, binding_type: str) -> BindingQueryBuilder:
        return self._with(self._criteria.with_type(binding_type))

    # -- conditions ----------------------------------------------------------

    def where(
        self,
        field: str,
        operator: QueryOperator | str | Any,
        value: Any = _UNSET,
    ) -> BindingQueryBuilder:
        """Add an AND condition; with two arguments the operator is ``=``."""
        if value is _UNSET:
            operator, value = QueryOperator.EQ, operator
        return self._with(
            self._criteria.with_where(WhereCriteria(field, operator, value))
        )

    def where_in(self, field: str, values: list[Any]) -> BindingQueryBuilder:
        return self.where(field, QueryOperator.IN, list(values))

    def where_not_in(self, field: str, values: list[Any]) -> BindingQueryBuilder:
        return self.where(field, QueryOperator.NOT_IN, list(values))

    def where_between(self, field: str, low: Any, high: Any) -> BindingQueryBuilder:
        return self.where(field, QueryOperator.BETWEEN, [low, high])

    def where_exists(self, field: str) -> BindingQueryBuilder:
        return self.where(field, QueryOperator.EXISTS, None)

    def where_null(self, field: str) -> BindingQueryBuilder:
        return self.where(field, QueryOperator.IS_NULL, None)

    def where_not_null(self, field: str) -> BindingQueryBuilder:
        return self.where(field, QueryOperator.NOT_NULL, None)

    def or_where(
        self, callback: Callable[[BindingQueryBuilder], BindingQueryBuilder]
    ) -> BindingQueryBuilder:
        """
        Add an OR group built by ``callback``.

        The callback receives an empty builder and returns it with the
        group's conditions added; those conditions are ANDed together and
        the group is ORed with the main conditions. Entity and type scope
        set inside the callback becomes equality conditions of the group.
        An empty group is ignored.
        """
        group = callback(BindingQueryBuilder())
        if not isinstance(group, BindingQueryBuilder):
            raise InvalidCriteriaError(
                "or_where callback must return the builder it was given"
            )
        conditions = _scope_conditions(group.criteria()) + group.criteria().where
        if not conditions:
            return self
        return self._with(self._criteria.with_or_group(conditions))

    # -- shaping -------------------------------------------------------------

    def order_by(self, field: str, direction: str = SORT_ASC) -> BindingQueryBuilder:
        """Append a sort key; earlier keys take precedence."""
        return self._with(
            self._criteria.with_order_by(OrderByCriteria(field, direction))
        )

    def limit(self, limit: int) -> BindingQueryBuilder:
        return self._with(self._criteria.with_pagination(limit=limit))

    def offset(self, offset: int) -> BindingQueryBuilder:
        return self._with(self._criteria.with_pagination(offset=offset))

    def reset(self) -> BindingQueryBuilder:
        """A builder with no criteria, bound to the same executor."""
        return self._with(QueryCriteria())

    def criteria(self) -> QueryCriteria:
        return self._criteria

    # -- execution -----------------------------------------------------------

    def get(self) -> QueryResult:
        return self._require_executor().execute_query(self._criteria)

    def first(self) -> Binding | None:
        criteria = self._criteria.with_pagination(limit=1)
        return self._require_executor().execute_query(criteria).first()

    def count(self) -> int:
        return self._require_executor().count(self._criteria)

    def exists(self) -> bool:
        return self.first() is not None

    def _require_executor(self) -> QueryExecutor:
        if self._executor is None:
            raise QueryExecutionError(
                "Query builder is not bound to an executor; "
                "create it with adapter.query()"
            )
        return self._executor


def _entity_criteria(entity: object, entity_id: str | None) -> EntityCriteria:
    if entity_id is not None:
        if not isinstance(entity, str) or not entity:
            raise InvalidCriteriaError(
                "Entity type must be a non-empty string when an id is given"
            )
        return EntityCriteria(type=entity, id=entity_id)
    ref = EntityReference.of(entity)
    return EntityCriteria(type=ref.type, id=ref.id)


def _scope_conditions(criteria: QueryCriteria) -> tuple[WhereCriteria, ...]:
    conditions: list[WhereCriteria] = []
    if criteria.from_entity is not None:
        conditions.append(WhereCriteria("fromType", "=", criteria.from_entity.type))
        conditions.append(WhereCriteria("fromId", "=", criteria.from_entity.id))
    if criteria.to_entity is not None:
        conditions.append(WhereCriteria("toType", "=", criteria.to_entity.type))
        conditions.append(WhereCriteria("toId", "=", criteria.to_entity.id))
    if criteria.binding_type is not None:
        conditions.append(WhereCriteria("type", "=", criteria.binding_type))
    return tuple(conditions)
