"""
Database connection lifecycle management.

A ConnectionManager owns exactly one SQLAlchemy connection and tracks at most
one active transaction. The manager is an explicit value created by the
caller and passed to DAOs and command builders; there is no module-level
connection state.

Supports plain SQLAlchemy URLs and Cloud SQL instances through the Cloud SQL
Python Connector with IAM authentication.
"""

import logging

from google.cloud.sql.connector import Connector
from sqlalchemy import Connection, Engine, create_engine
from sqlalchemy.exc import ArgumentError
from sqlalchemy.pool import NullPool

from dbmanager.config import (
    ConnectionDescriptor,
    ConnectionStringSource,
    EnvConnectionStringSource,
)
from dbmanager.db.command import CommandBuilder
from dbmanager.db.transaction import TransactionManager
from dbmanager.errors import ConfigurationError, ConnectivityError, InvalidStateError

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Manages a single database connection and a single transaction.

    The connection is opened lazily on first use and shared by every command
    built from this manager. Only one transaction may be active at a time.

    The manager performs no internal locking. A multi-threaded caller must
    serialize access to it.

    Usage:
        with ConnectionManager("shopping") as manager:
            customer = CustomerDao(manager).readable().fetch("account", "p")

            with manager.begin_transaction() as transaction:
                try:
                    CustomerDao(manager).writable().update(customer)
                    transaction.commit()
                except Exception:
                    transaction.rollback()
                    raise
    """

    def __init__(
        self,
        connection_string_key: str | None = None,
        source: ConnectionStringSource | None = None,
    ):
        """
        Args:
            connection_string_key: Name of the connection string to resolve
            source: Where connection strings are resolved from
                (defaults to environment variables)
        """
        self._connection_string_key = connection_string_key
        self._source = source if source is not None else EnvConnectionStringSource()
        self._engine: Engine | None = None
        self._connector: Connector | None = None
        self._connection: Connection | None = None
        self._transaction: TransactionManager | None = None
        self._disposed = False

    def __enter__(self) -> "ConnectionManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    @property
    def connection_string_key(self) -> str | None:
        return self._connection_string_key

    def configure(self, connection_string_key: str):
        """
        Record which named connection string to resolve.

        Nothing is opened until the connection is first used.

        Raises:
            InvalidStateError: If the connection is already open or the
                manager has been disposed
        """
        self._require_not_disposed()
        if self._connection is not None:
            raise InvalidStateError(
                "Connection is already open; configure() must be called before first use"
            )
        self._connection_string_key = connection_string_key

    def _require_not_disposed(self):
        if self._disposed:
            raise InvalidStateError("ConnectionManager has been disposed")

    def _resolve_descriptor(self) -> ConnectionDescriptor:
        key = self._connection_string_key
        if not key:
            raise ConfigurationError("Connection string name must be set before use.")

        descriptor = self._source.get(key)
        if descriptor is None:
            raise ConfigurationError(f"Invalid connection string name: '{key}'")
        return descriptor

    def _create_engine(self, descriptor: ConnectionDescriptor) -> Engine:
        # One connection for the manager's lifetime, so no pool is kept.
        if not descriptor.is_cloud_sql:
            return create_engine(descriptor.url, poolclass=NullPool)

        self._connector = Connector()
        connector = self._connector

        def getconn():
            return connector.connect(
                descriptor.instance_connection_name,
                descriptor.driver,
                user=descriptor.db_user,
                db=descriptor.db_name,
                enable_iam_auth=descriptor.enable_iam_auth,
            )

        return create_engine(
            f"postgresql+{descriptor.driver}://",
            creator=getconn,
            poolclass=NullPool,
        )

    def _open(self) -> Connection:
        descriptor = self._resolve_descriptor()

        try:
            engine = self._create_engine(descriptor)
        except (ArgumentError, ImportError) as e:
            self._close_connector()
            raise ConfigurationError(
                f"Cannot create engine for '{self._connection_string_key}': {e}"
            ) from e

        try:
            connection = engine.connect()
        except Exception as e:
            logger.error(
                "Failed to connect to %s: %s",
                descriptor.describe(),
                e,
                exc_info=True,
                extra={"json_fields": {"key": self._connection_string_key}},
            )
            engine.dispose()
            self._close_connector()
            raise ConnectivityError(
                f"Failed to connect to the database '{self._connection_string_key}': {e}"
            ) from e

        self._engine = engine
        logger.info(
            "Opened database connection",
            extra={
                "json_fields": {
                    "key": self._connection_string_key,
                    "target": descriptor.describe(),
                }
            },
        )
        return connection

    def get_connection(self) -> Connection:
        """
        Get the single connection, opening it on first call.

        Returns:
            The same SQLAlchemy Connection on every call

        Raises:
            ConfigurationError: No key configured, or the key resolves to nothing
            ConnectivityError: The database could not be reached
            InvalidStateError: The manager has been disposed
        """
        self._require_not_disposed()
        if self._connection is None:
            self._connection = self._open()
        return self._connection

    @property
    def active_transaction(self) -> TransactionManager | None:
        """The tracked transaction while it is ACTIVE, else None."""
        if self._transaction is not None and self._transaction.is_active:
            return self._transaction
        return None

    def begin_transaction(self) -> TransactionManager:
        """
        Begin a new transaction and track it as the active one.

        A previously tracked transaction that already committed or rolled
        back is disposed and replaced.

        Returns:
            TransactionManager for the new transaction

        Raises:
            InvalidStateError: If a transaction is still active on this manager
                or the connection holds an implicit transaction
        """
        if self.active_transaction is not None:
            raise InvalidStateError(
                "A transaction is already active; commit or roll it back before "
                "beginning another"
            )

        connection = self.get_connection()
        if self._transaction is not None:
            self._transaction.dispose()
            self._transaction = None

        if connection.in_transaction():
            raise InvalidStateError(
                "Connection has an implicit transaction in progress"
            )

        self._transaction = TransactionManager(connection.begin())
        logger.debug("Began transaction on '%s'", self._connection_string_key)
        return self._transaction

    def command_builder(self) -> CommandBuilder:
        """
        Create a CommandBuilder bound to this manager's connection and to the
        transaction active right now.
        """
        return CommandBuilder(self.get_connection(), self.active_transaction)

    def is_open(self) -> bool:
        """Check if the connection has been opened and not yet closed."""
        return self._connection is not None and not self._connection.closed

    def is_disposed(self) -> bool:
        return self._disposed

    def _close_connector(self):
        if self._connector is not None:
            self._connector.close()
            self._connector = None

    def dispose(self):
        """
        Release the tracked transaction, then the connection.

        Safe to call more than once.
        """
        if self._disposed:
            return

        try:
            if self._transaction is not None:
                self._transaction.dispose()
        finally:
            self._transaction = None
            self._release_connection()

    def _release_connection(self):
        connection, self._connection = self._connection, None
        try:
            if connection is not None:
                connection.close()
                logger.info(
                    "Closed database connection",
                    extra={"json_fields": {"key": self._connection_string_key}},
                )
        finally:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            self._close_connector()
            self._disposed = True

    close = dispose
