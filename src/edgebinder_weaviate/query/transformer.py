"""
CriteriaTransformer: criteria objects -> combined filter dict.

The combined dict is the engine's input format::

    {
        "fromType": "User", "fromId": "u1",
        "type": "owns",
        "where": [{"field": "lvl", "operator": ">", "value": 1}],
        "orWhere": [[{"field": "role", "operator": "=", "value": "admin"}]],
        "orderBy": [{"field": "lvl", "direction": "desc"}],
        "offset": 0, "limit": 10,
    }

Keys are only present when they carry something.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from ..exceptions import InvalidCriteriaError
from .criteria import (
    SORT_ASC,
    EntityCriteria,
    OrderByCriteria,
    QueryCriteria,
    WhereCriteria,
)

FROM = "from"
TO = "to"

SCOPE_KEYS = ("fromType", "fromId", "toType", "toId", "type")


class CriteriaTransformer:
    """Stateless conversion of criteria value objects to filter fragments."""

    def transform_entity(
        self, entity: EntityCriteria, direction: str
    ) -> dict[str, str]:
        if direction == FROM:
            return {"fromType": entity.type, "fromId": entity.id}
        if direction == TO:
            return {"toType": entity.type, "toId": entity.id}
        raise InvalidCriteriaError(
            f"Entity direction must be 'from' or 'to', got {direction!r}",
            field="direction",
        )

    def transform_where(self, condition: WhereCriteria) -> dict[str, Any]:
        return {
            "field": condition.field,
            "operator": condition.operator,
            "value": condition.value,
        }

    def transform_binding_type(self, binding_type: str) -> dict[str, str]:
        return {"type": binding_type}

    def transform_order_by(self, order: OrderByCriteria) -> dict[str, str]:
        return {"field": order.field, "direction": order.direction or SORT_ASC}

    def combine_filters(
        self,
        filters: Iterable[Mapping[str, Any]],
        or_filters: Iterable[Any] = (),
    ) -> dict[str, Any]:
        """
        Merge fragments into one combined filter dict.

        - ``field`` + ``direction`` fragments become ``orderBy`` entries.
        - ``field``-only fragments become ``where`` entries.
        - Entity and type keys (``SCOPE_KEYS``) are merged at the top level;
          a later fragment overwrites an earlier one. Other keys are dropped.
        - ``or_filters`` are attached verbatim as ``orWhere``.
        """
        combined: dict[str, Any] = {}
        where: list[dict[str, Any]] = []
        order_by: list[dict[str, Any]] = []

        for fragment in filters:
            if "field" in fragment and "direction" in fragment:
                order_by.append(dict(fragment))
            elif "field" in fragment:
                where.append(dict(fragment))
            else:
                combined.update(
                    (k, v) for k, v in fragment.items() if k in SCOPE_KEYS
                )

        if where:
            combined["where"] = where
        if order_by:
            combined["orderBy"] = order_by
        or_where = list(or_filters)
        if or_where:
            combined["orWhere"] = or_where
        return combined

    def transform(self, criteria: QueryCriteria) -> dict[str, Any]:
        """Transform a complete ``QueryCriteria`` into a combined filter dict."""
        fragments: list[Mapping[str, Any]] = []
        if criteria.from_entity is not None:
            fragments.append(self.transform_entity(criteria.from_entity, FROM))
        if criteria.to_entity is not None:
            fragments.append(self.transform_entity(criteria.to_entity, TO))
        if criteria.binding_type is not None:
            fragments.append(self.transform_binding_type(criteria.binding_type))
        fragments.extend(self.transform_where(c) for c in criteria.where)
        fragments.extend(self.transform_order_by(o) for o in criteria.order_by)

        or_filters = [
            [self.transform_where(c) for c in group]
            for group in criteria.or_where
            if group
        ]
        combined = self.combine_filters(fragments, or_filters)
        if criteria.offset is not None:
            combined["offset"] = criteria.offset
        if criteria.limit is not None:
            combined["limit"] = criteria.limit
        return combined
