"""
Base DAO implementations.

Concrete DAOs subclass BaseDtoDao (read-only) or BaseEntityDao (read/write)
and implement the protected hooks. Callers never invoke the hooks; they go
through the capability wrappers returned by readable() and writable().
"""

from abc import ABC, abstractmethod
from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel

from dbmanager.dao.capabilities import Readable, Writable
from dbmanager.db.command import CommandBuilder
from dbmanager.db.connection import ConnectionManager
from dbmanager.errors import UnsupportedOperation

ModelT = TypeVar("ModelT", bound=BaseModel)


class BaseDtoDao(ABC, Generic[ModelT]):
    """
    Base for read-only DAOs over DTOs.

    Subclasses must implement:
    - _fetch: Return the matching model, or None when no row matched
    - _find_all: Return every model
    - _find_by: Return the models matching primary key value(s)

    Hooks that cannot be meaningfully implemented must call _unsupported()
    instead of returning an empty result.
    """

    # Column names of the primary key, in the order callers pass values
    primary_key: tuple[str, ...] = ()

    def __init__(self, manager: ConnectionManager):
        self.manager = manager

    def readable(self) -> Readable[ModelT]:
        """Read capability for this DAO."""
        return Readable(self)

    def _command(self, command_text: str) -> CommandBuilder:
        """
        Fresh builder bound to the manager's connection and the transaction
        active at call time.
        """
        return self.manager.command_builder().with_command_text(command_text)

    def _key_parameters(
        self, pkeys: Sequence[Any], partial: bool = False
    ) -> dict[str, Any]:
        """
        Map primary key values onto primary_key column names.

        Args:
            pkeys: Primary key values in primary_key order
            partial: Accept a leading subset of the key (at least one value)

        Raises:
            ValueError: If the number of values does not fit primary_key
        """
        expected = len(self.primary_key)
        if partial:
            valid = 1 <= len(pkeys) <= expected
        else:
            valid = len(pkeys) == expected
        if not valid:
            raise ValueError(
                f"{type(self).__name__} expects {'up to ' if partial else ''}"
                f"{expected} primary key value(s) {self.primary_key}, got {len(pkeys)}"
            )
        return dict(zip(self.primary_key, pkeys))

    def _unsupported(self, operation: str):
        raise UnsupportedOperation(
            f"{type(self).__name__} does not support {operation}"
        )

    @abstractmethod
    def _fetch(self, *pkeys: Any) -> ModelT | None:
        """Get the model matching the primary key value(s), or None."""
        pass

    @abstractmethod
    def _find_all(self) -> list[ModelT]:
        """Get every model."""
        pass

    @abstractmethod
    def _find_by(self, *pkeys: Any) -> list[ModelT]:
        """Get the models matching the primary key value(s)."""
        pass


class BaseEntityDao(BaseDtoDao[ModelT]):
    """
    Base for read/write DAOs over entities.

    In addition to the read hooks, subclasses must implement _insert,
    _update, _patch and _delete, each returning the affected-row count.
    """

    def writable(self) -> Writable[ModelT]:
        """Write capability for this DAO."""
        return Writable(self)

    @abstractmethod
    def _insert(self, entity: ModelT) -> int:
        pass

    @abstractmethod
    def _update(self, entity: ModelT) -> int:
        pass

    @abstractmethod
    def _patch(self, value: Any, *pkeys: Any) -> int:
        """Partially update the row matching the primary key value(s)."""
        pass

    @abstractmethod
    def _delete(self, *pkeys: Any) -> int:
        pass
