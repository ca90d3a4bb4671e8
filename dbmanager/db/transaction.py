"""
Transaction lifecycle management.

Wraps a single SQLAlchemy root transaction with an explicit state machine:

    ACTIVE -> COMMITTED | ROLLED_BACK -> DISPOSED

dispose() is accepted from every state. commit() and rollback() are only
accepted while ACTIVE.
"""

import logging
from enum import StrEnum

from sqlalchemy.engine import RootTransaction

from dbmanager.errors import InvalidStateError

logger = logging.getLogger(__name__)


class TransactionState(StrEnum):
    """Lifecycle state of a TransactionManager"""

    ACTIVE = "active"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    DISPOSED = "disposed"


class TransactionManager:
    """
    Manages one database transaction.

    Instances are created by ConnectionManager.begin_transaction(). Callers
    must commit or roll back explicitly; disposing an ACTIVE transaction
    releases it without committing.

    Usage:
        with manager.begin_transaction() as transaction:
            try:
                ...
                transaction.commit()
            except Exception:
                transaction.rollback()
                raise
    """

    def __init__(self, transaction: RootTransaction):
        self._trn = transaction
        self._state = TransactionState.ACTIVE

    def __enter__(self) -> "TransactionManager":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is TransactionState.ACTIVE

    def _require_active(self, operation: str):
        if self._state is not TransactionState.ACTIVE:
            raise InvalidStateError(
                f"Cannot {operation} transaction in state '{self._state}'"
            )

    def commit(self):
        """Commit the transaction, making its changes permanent."""
        self._require_active("commit")
        self._trn.commit()
        self._state = TransactionState.COMMITTED

    def rollback(self):
        """Roll back the transaction, undoing its changes."""
        self._require_active("rollback")
        self._trn.rollback()
        self._state = TransactionState.ROLLED_BACK

    def dispose(self):
        """
        Release the transaction.

        An ACTIVE transaction is rolled back by the underlying driver when
        closed. Disposing twice is a no-op.
        """
        if self._state is TransactionState.DISPOSED:
            return
        if self._state is TransactionState.ACTIVE:
            logger.warning("Disposing an uncommitted transaction; changes are discarded")
        self._trn.close()
        self._state = TransactionState.DISPOSED

    def get_underlying_handle(self) -> RootTransaction:
        """
        Borrow the SQLAlchemy transaction (no ownership transfer).

        Raises:
            InvalidStateError: If the transaction has been disposed
        """
        if self._state is TransactionState.DISPOSED:
            raise InvalidStateError("Transaction has been disposed")
        return self._trn

    def __repr__(self) -> str:
        return f"TransactionManager(state={self._state.value})"
