# hwms/services/predicates.py
"""
Storage-neutral query predicates.

The authorization engine never builds SQL. It produces a small predicate tree
that the record store compiles (see ``record_store.compile_predicate``) and
that can also be evaluated against a plain row mapping, which is how
single-record checks reuse the exact rule used for list queries.

Column names may be dotted to reach a joined row, e.g. ``shift.hospital_id``
on a swap request row carrying its shift under the ``"shift"`` key.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Union

_MISSING = object()


def lookup(row: Mapping[str, Any], column: str) -> Any:
    value: Any = row
    for part in column.split("."):
        if not isinstance(value, Mapping):
            return _MISSING
        value = value.get(part, _MISSING)
        if value is _MISSING:
            return _MISSING
    return value


@dataclass(frozen=True)
class Eq:
    column: str
    value: Any

    def matches(self, row: Mapping[str, Any]) -> bool:
        found = lookup(row, self.column)
        if found is _MISSING:
            return False
        return found == self.value


@dataclass(frozen=True)
class AnyOf:
    clauses: tuple[Predicate, ...]

    def matches(self, row: Mapping[str, Any]) -> bool:
        return any(clause.matches(row) for clause in self.clauses)


@dataclass(frozen=True)
class AllOf:
    """Conjunction. ``AllOf(())`` matches everything."""

    clauses: tuple[Predicate, ...] = ()

    def matches(self, row: Mapping[str, Any]) -> bool:
        return all(clause.matches(row) for clause in self.clauses)


Predicate = Union[Eq, AnyOf, AllOf]

ALWAYS = AllOf(())


def all_of(*predicates: Predicate | None) -> Predicate:
    """AND the given predicates together, dropping ``None`` and flattening nested conjunctions."""
    clauses: list[Predicate] = []
    for predicate in predicates:
        if predicate is None:
            continue
        if isinstance(predicate, AllOf):
            clauses.extend(predicate.clauses)
        else:
            clauses.append(predicate)
    if len(clauses) == 1:
        return clauses[0]
    return AllOf(tuple(clauses))


def any_of(*predicates: Predicate) -> Predicate:
    if len(predicates) == 1:
        return predicates[0]
    return AnyOf(tuple(predicates))


def equals_if_present(**filters: Any) -> Predicate:
    """Build ``column == value`` clauses for the filters that were actually supplied."""
    return all_of(*(Eq(column, value) for column, value in filters.items() if value is not None))
