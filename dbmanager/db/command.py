"""
Fluent construction of parameterized SQL commands.

A CommandBuilder captures a connection and the transaction active at the
moment it is constructed. The resulting Command keeps those references for
its whole life: a builder created before a transaction begins produces a
command that is not enlisted in that transaction.

Usage:
    command = (
        manager.command_builder()
        .with_command_text("SELECT * FROM m_customer WHERE customer_id = :customer_id")
        .add_parameter("@customer_id", "account")
        .build()
    )
    rows = command.execute_query()
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from sqlalchemy import Connection, Row, text

from dbmanager.errors import BuildError, InvalidStateError

if TYPE_CHECKING:
    from dbmanager.db.transaction import TransactionManager

# Same placeholder syntax SQLAlchemy's text() recognizes (":name", not "::cast")
_BIND_PARAM_RE = re.compile(r"(?<![:\w\\]):(\w+)(?!:)", re.UNICODE)


def normalize_parameter_name(name: str) -> str:
    """Strip a leading '@' or ':' so '@email', ':email' and 'email' are one name."""
    normalized = name.lstrip("@:")
    if not normalized:
        raise BuildError(f"Invalid parameter name: {name!r}")
    return normalized


def placeholder_names(command_text: str) -> list[str]:
    """Named placeholders referenced by the command text, in order of appearance."""
    seen: dict[str, None] = {}
    for match in _BIND_PARAM_RE.finditer(command_text):
        seen.setdefault(match.group(1), None)
    return list(seen)


class Command:
    """
    An executable, immutable SQL command.

    Built by CommandBuilder; holds the command text, the named parameters
    and the connection/transaction captured when the builder was created.
    """

    def __init__(
        self,
        command_text: str,
        parameters: Mapping[str, Any],
        connection: Connection,
        transaction: TransactionManager | None,
    ):
        self._command_text = command_text
        self._parameters = MappingProxyType(dict(parameters))
        self._connection = connection
        self._transaction = transaction

    @property
    def command_text(self) -> str:
        return self._command_text

    @property
    def parameters(self) -> Mapping[str, Any]:
        return self._parameters

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def transaction(self) -> TransactionManager | None:
        return self._transaction

    @property
    def is_enlisted(self) -> bool:
        return self._transaction is not None

    def _check_executable(self):
        if self._connection.closed:
            raise InvalidStateError("Connection has been closed")

        if self._transaction is not None:
            if not self._transaction.is_active:
                raise InvalidStateError(
                    f"Command is enlisted in a transaction in state "
                    f"'{self._transaction.state}'"
                )
        elif self._connection.in_transaction():
            raise InvalidStateError(
                "Command is not enlisted in the transaction pending on its connection"
            )

    def _execute(self, fetch_rows: bool) -> Sequence[Row] | int:
        self._check_executable()
        statement = text(self._command_text)
        params = dict(self._parameters)

        if self._transaction is not None:
            result = self._connection.execute(statement, params)
            return result.all() if fetch_rows else result.rowcount

        # Not enlisted: run in a short transaction committed right away.
        try:
            result = self._connection.execute(statement, params)
            outcome = result.all() if fetch_rows else result.rowcount
        except Exception:
            self._connection.rollback()
            raise
        self._connection.commit()
        return outcome

    def execute_query(self) -> Sequence[Row]:
        """
        Execute the command and return all result rows.

        Returns:
            List of SQLAlchemy Row objects (empty when nothing matched)
        """
        return self._execute(fetch_rows=True)

    def execute_non_query(self) -> int:
        """
        Execute the command and return the affected-row count reported by
        the driver.
        """
        return self._execute(fetch_rows=False)

    def __repr__(self) -> str:
        return (
            f"Command(text={self._command_text!r}, "
            f"parameters={list(self._parameters)}, enlisted={self.is_enlisted})"
        )


class CommandBuilder:
    """
    Builder for Command instances.

    Construct a fresh builder for every command: the transaction reference is
    read once, in __init__, and never re-resolved.
    """

    def __init__(
        self,
        connection: Connection | None,
        transaction: TransactionManager | None = None,
    ):
        self._connection = connection
        self._transaction = transaction
        self._command_text: str | None = None
        self._parameters: dict[str, Any] = {}

    def with_command_text(self, command_text: str) -> CommandBuilder:
        """Set the SQL text, replacing any previous text."""
        self._command_text = command_text
        return self

    def add_parameter(self, name: str, value: Any = None) -> CommandBuilder:
        """
        Add a named parameter.

        A value of None is bound as SQL NULL; the parameter is still present.
        Adding the same name again replaces the earlier value.
        """
        self._parameters[normalize_parameter_name(name)] = value
        return self

    def add_parameters(self, parameters: Mapping[str, Any]) -> CommandBuilder:
        for name, value in parameters.items():
            self.add_parameter(name, value)
        return self

    def build(self) -> Command:
        """
        Validate and return the Command. Nothing is executed.

        Raises:
            BuildError: Missing connection, blank text, or a placeholder with
                no matching parameter
            InvalidStateError: The connection is closed or the captured
                transaction is no longer active
        """
        if self._connection is None:
            raise BuildError("Connection must be set.")
        if self._connection.closed:
            raise InvalidStateError("Connection has been closed")
        if self._transaction is not None and not self._transaction.is_active:
            raise InvalidStateError(
                f"Cannot build command on transaction in state "
                f"'{self._transaction.state}'"
            )
        if self._command_text is None or not self._command_text.strip():
            raise BuildError("CommandText must be set.")

        missing = [
            name
            for name in placeholder_names(self._command_text)
            if name not in self._parameters
        ]
        if missing:
            raise BuildError(f"Missing value for parameter(s): {', '.join(missing)}")

        return Command(
            self._command_text, self._parameters, self._connection, self._transaction
        )
