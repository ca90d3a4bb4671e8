"""
Capability interfaces for DAOs.

Readable and Writable are the only contracts callers should depend on. Each
wraps a DAO implementation by composition and forwards every public method to
the implementation's protected hook of the same meaning (fetch -> _fetch,
insert -> _insert, ...). The wrappers also normalize results: a fetch that
matched nothing is always NOT_FOUND, lists are always lists, write counts are
always ints.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, Iterable, TypeVar

from dbmanager.errors import NOT_FOUND, NotFound

if TYPE_CHECKING:
    from dbmanager.dao.base import BaseDtoDao, BaseEntityDao

ModelT = TypeVar("ModelT")


def _as_list(items: Iterable[ModelT] | None, operation: str) -> list[ModelT]:
    if items is None:
        raise TypeError(f"{operation} must return a sequence, got None")
    return list(items)


def _as_count(count: Any, operation: str) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(
            f"{operation} must return an affected-row count, got {type(count).__name__}"
        )
    return count


class Readable(Generic[ModelT]):
    """Read capability: fetch one, find all, find by primary key values."""

    def __init__(self, implementation: BaseDtoDao[ModelT]):
        self._impl = implementation

    def fetch(self, *pkeys: Any) -> ModelT | NotFound:
        """
        Get the entity matching the primary key value(s).

        Returns:
            The entity, or NOT_FOUND when no row matched
        """
        entity = self._impl._fetch(*pkeys)
        if entity is None or entity is NOT_FOUND:
            return NOT_FOUND
        return entity

    def find_all(self) -> list[ModelT]:
        """Get every entity; empty list when there are none."""
        return _as_list(self._impl._find_all(), "find_all")

    def find_by(self, *pkeys: Any) -> list[ModelT]:
        """Get the entities matching the primary key value(s); may be empty."""
        return _as_list(self._impl._find_by(*pkeys), "find_by")

    def __repr__(self) -> str:
        return f"Readable({type(self._impl).__name__})"


class Writable(Generic[ModelT]):
    """
    Write capability. Every method returns the affected-row count reported by
    the database; 0 means nothing matched and is not an error.
    """

    def __init__(self, implementation: BaseEntityDao[ModelT]):
        self._impl = implementation

    def insert(self, entity: ModelT) -> int:
        return _as_count(self._impl._insert(entity), "insert")

    def update(self, entity: ModelT) -> int:
        return _as_count(self._impl._update(entity), "update")

    def patch(self, value: Any, *pkeys: Any) -> int:
        """Partially update the row matching the primary key value(s)."""
        return _as_count(self._impl._patch(value, *pkeys), "patch")

    def delete(self, *pkeys: Any) -> int:
        return _as_count(self._impl._delete(*pkeys), "delete")

    def __repr__(self) -> str:
        return f"Writable({type(self._impl).__name__})"
