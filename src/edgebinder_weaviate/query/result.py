"""QueryResult: immutable sequence of bindings returned by a query."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from ..domain.binding import Binding


class QueryResult(Sequence[Binding]):
    """Ordered, read-only result of executing a binding query."""

    def __init__(self, bindings: Iterable[Binding] = ()) -> None:
        self._bindings: tuple[Binding, ...] = tuple(bindings)

    @property
    def bindings(self) -> list[Binding]:
        return list(self._bindings)

    def is_empty(self) -> bool:
        return not self._bindings

    def first(self) -> Binding | None:
        return self._bindings[0] if self._bindings else None

    def len(self) -> int:
        return len(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[Binding]:
        return iter(self._bindings)

    @overload
    def __getitem__(self, index: int) -> Binding: ...

    @overload
    def __getitem__(self, index: slice) -> QueryResult: ...

    def __getitem__(self, index: int | slice) -> Binding | QueryResult:
        if isinstance(index, slice):
            return QueryResult(self._bindings[index])
        return self._bindings[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, QueryResult):
            return self._bindings == other._bindings
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"QueryResult({len(self._bindings)} bindings)"
