"""
FilterEngine: evaluates binding queries in process.

Every query fetches the whole collection from the record store, maps the
records to bindings, then filters, orders and paginates them in memory::

    scope   = entity / type filters
    matched = scope AND (where OR group_1 OR group_2 ...)

An empty ``where`` list matches everything in scope unless OR groups are
present, in which case only the groups contribute.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from ..domain.binding import Binding
from ..exceptions import InvalidCriteriaError
from ..mapping.binding_mapper import BindingMapper
from ..ports.record_store import IRecordStore, translate_store_errors
from .criteria import SORT_ASC, SORT_DESC, QueryCriteria
from .evaluator import MISSING, MemoryOperatorRegistry, present
from .operators_memory import build_default_registry
from .transformer import SCOPE_KEYS, CriteriaTransformer

logger = logging.getLogger("edgebinder_weaviate.query")

DEFAULT_COLLECTION = "EdgeBindings"
METADATA_PREFIX = "metadata."

_RESERVED_FIELDS = {
    "id": "id",
    "fromType": "from_type",
    "fromId": "from_id",
    "toType": "to_type",
    "toId": "to_id",
    "type": "type",
}
_TIMESTAMP_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def resolve_field(binding: Binding, field: str) -> Any:
    """
    Resolve a criteria field name against a binding.

    ``metadata.<key>`` looks ``<key>`` up in metadata (exact key first, then
    a dotted path through nested maps). Reserved names map to binding
    attributes; timestamps resolve to integer epoch seconds. Any other name
    is an exact metadata key. Absent values resolve to ``MISSING``.
    """
    if field.startswith(METADATA_PREFIX):
        return _metadata_value(binding.metadata, field[len(METADATA_PREFIX) :])
    if field in _RESERVED_FIELDS:
        return getattr(binding, _RESERVED_FIELDS[field])
    if field in _TIMESTAMP_FIELDS:
        return int(getattr(binding, _TIMESTAMP_FIELDS[field]).timestamp())
    return binding.metadata.get(field, MISSING)


def _metadata_value(metadata: Mapping[str, Any], key: str) -> Any:
    if key in metadata:
        return metadata[key]
    current: Any = metadata
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return MISSING
        current = current[part]
    return current


class FilterEngine:
    """
    In-process query evaluation over an :class:`IRecordStore` collection.

    Usage::

        engine = FilterEngine(InMemoryRecordStore())
        bindings = engine.filter({"fromType": "User", "fromId": "u1",
                                  "where": [{"field": "lvl", "operator": ">",
                                             "value": 1}]})
    """

    def __init__(
        self,
        store: IRecordStore,
        *,
        collection: str = DEFAULT_COLLECTION,
        mapper: BindingMapper | None = None,
        registry: MemoryOperatorRegistry | None = None,
        transformer: CriteriaTransformer | None = None,
    ) -> None:
        self.store = store
        self.collection = collection
        self.mapper = mapper or BindingMapper()
        self.registry = registry if registry is not None else build_default_registry()
        self.transformer = transformer or CriteriaTransformer()

    # -- public API ----------------------------------------------------------

    def filter(self, criteria: QueryCriteria | Mapping[str, Any]) -> list[Binding]:
        """Return the bindings matching ``criteria``, ordered and paginated.

        Raises:
            UnsupportedOperatorError: If any condition names an unknown operator.
            InvalidCriteriaError: If a condition or sort key cannot be evaluated.
            BackendError: If the record store fails.
        """
        start = time.perf_counter()
        filters = self._prepare(criteria)
        bindings = self._fetch()
        matched = self._select(bindings, filters)
        ordered = self._order(matched, filters.get("orderBy") or [])
        result = self._paginate(ordered, filters.get("offset"), filters.get("limit"))
        logger.debug(
            "Filtered %s: %d of %d bindings matched, %d returned in %.2fms",
            self.collection,
            len(matched),
            len(bindings),
            len(result),
            (time.perf_counter() - start) * 1000,
        )
        return result

    def count(self, criteria: QueryCriteria | Mapping[str, Any]) -> int:
        """Number of matching bindings, ignoring ordering and pagination."""
        start = time.perf_counter()
        filters = self._prepare(criteria)
        bindings = self._fetch()
        total = len(self._select(bindings, filters))
        logger.debug(
            "Counted %s: %d of %d bindings matched in %.2fms",
            self.collection,
            total,
            len(bindings),
            (time.perf_counter() - start) * 1000,
        )
        return total

    def matches(
        self, binding: Binding, conditions: Sequence[Mapping[str, Any]]
    ) -> bool:
        """True if ``binding`` satisfies every condition (AND)."""
        return all(self._evaluate(binding, c) for c in conditions)

    # -- pipeline steps ------------------------------------------------------

    def _prepare(self, criteria: QueryCriteria | Mapping[str, Any]) -> dict[str, Any]:
        if isinstance(criteria, QueryCriteria):
            filters = self.transformer.transform(criteria)
        elif isinstance(criteria, Mapping):
            filters = dict(criteria)
        else:
            raise InvalidCriteriaError(
                "Criteria must be a QueryCriteria or a mapping, got "
                f"{type(criteria).__name__}"
            )
        for condition in self._all_conditions(filters):
            if not isinstance(condition, Mapping) or "field" not in condition:
                raise InvalidCriteriaError(
                    f"Where condition must be a mapping with a field: {condition!r}"
                )
            self.registry.resolve(condition.get("operator", "="))
        for order in filters.get("orderBy") or []:
            if not isinstance(order, Mapping) or "field" not in order:
                raise InvalidCriteriaError(
                    f"Order entry must be a mapping with a field: {order!r}"
                )
            direction = order.get("direction", SORT_ASC)
            if not isinstance(direction, str) or direction.lower() not in (
                SORT_ASC,
                SORT_DESC,
            ):
                raise InvalidCriteriaError(
                    f"Sort direction must be 'asc' or 'desc', got {direction!r}",
                    field=order["field"],
                )
        for name in ("offset", "limit"):
            value = filters.get(name)
            if value is not None and (
                isinstance(value, bool) or not isinstance(value, int) or value < 0
            ):
                raise InvalidCriteriaError(
                    f"{name} must be a non-negative integer, got {value!r}",
                    field=name,
                )
        return filters

    def _fetch(self) -> list[Binding]:
        with translate_store_errors("fetch_all"):
            records = self.store.fetch_all(self.collection)
        return self.mapper.from_records(records)

    def _select(
        self, bindings: list[Binding], filters: Mapping[str, Any]
    ) -> list[Binding]:
        scoped = [b for b in bindings if self._in_scope(b, filters)]
        where = list(filters.get("where") or [])
        groups = [g for g in (filters.get("orWhere") or []) if g]
        if not groups:
            return [b for b in scoped if self.matches(b, where)]

        result = [b for b in scoped if self.matches(b, where)] if where else []
        seen = {b.id for b in result}
        for group in groups:
            for binding in scoped:
                if binding.id not in seen and self.matches(binding, group):
                    result.append(binding)
                    seen.add(binding.id)
        return result

    @staticmethod
    def _in_scope(binding: Binding, filters: Mapping[str, Any]) -> bool:
        return all(
            getattr(binding, _RESERVED_FIELDS[name]) == filters[name]
            for name in SCOPE_KEYS
            if name in filters
        )

    def _evaluate(self, binding: Binding, condition: Mapping[str, Any]) -> bool:
        field = condition["field"]
        operator = self.registry.resolve(condition.get("operator", "="))
        value = resolve_field(binding, field)
        try:
            return operator.evaluate(value, condition.get("value"))
        except (TypeError, ValueError) as e:
            raise InvalidCriteriaError(
                f"Cannot evaluate {field!r} {operator.name.value} "
                f"{condition.get('value')!r}: {e}",
                field=field,
            ) from e

    def _order(
        self, bindings: list[Binding], order_by: Sequence[Mapping[str, Any]]
    ) -> list[Binding]:
        # Stable sorts applied from the last key to the first leave the
        # first key primary.
        ordered = list(bindings)
        for order in reversed(order_by):
            field = order["field"]
            descending = str(order.get("direction", "asc")).lower() == SORT_DESC
            try:
                ordered.sort(
                    key=lambda b, f=field: _sort_key(resolve_field(b, f)),
                    reverse=descending,
                )
            except TypeError as e:
                raise InvalidCriteriaError(
                    f"Cannot order by {field!r}: {e}", field=field
                ) from e
        return ordered

    @staticmethod
    def _paginate(
        bindings: list[Binding], offset: int | None, limit: int | None
    ) -> list[Binding]:
        start = offset or 0
        if limit is None:
            return bindings[start:]
        return bindings[start : start + limit]

    @staticmethod
    def _all_conditions(filters: Mapping[str, Any]) -> list[Any]:
        conditions = list(filters.get("where") or [])
        for group in filters.get("orWhere") or []:
            conditions.extend(group)
        return conditions


def _sort_key(value: Any) -> tuple[int, Any]:
    value = present(value)
    if value is None:
        return (0, 0)
    return (1, value)
