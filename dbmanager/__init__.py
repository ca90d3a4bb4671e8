"""
DBManager: a minimal data-access layer.

One connection, one transaction, parameterized commands and capability-based
DAOs on top of SQLAlchemy Core.
"""

from dbmanager.db import (
    Command,
    CommandBuilder,
    ConnectionManager,
    TransactionManager,
    TransactionState,
)
from dbmanager.errors import (
    NOT_FOUND,
    BuildError,
    ConfigurationError,
    ConnectivityError,
    DBManagerError,
    InvalidStateError,
    NotFound,
    UnsupportedOperation,
)

__version__ = "0.1.0"

__all__ = [
    "NOT_FOUND",
    "BuildError",
    "Command",
    "CommandBuilder",
    "ConfigurationError",
    "ConnectionManager",
    "ConnectivityError",
    "DBManagerError",
    "InvalidStateError",
    "NotFound",
    "TransactionManager",
    "TransactionState",
    "UnsupportedOperation",
]
