"""
DBManager Database Module.

Provides the single-connection lifecycle manager, the transaction wrapper and
the command builder used by DAOs. Uses SQLAlchemy Core with literal SQL text.
"""

from dbmanager.db.command import Command, CommandBuilder
from dbmanager.db.connection import ConnectionManager
from dbmanager.db.transaction import TransactionManager, TransactionState

__all__ = [
    "Command",
    "CommandBuilder",
    "ConnectionManager",
    "TransactionManager",
    "TransactionState",
]
