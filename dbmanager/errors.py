"""
Error taxonomy for the data-access layer.

Every failure surfaces to the immediate caller. Provider execution errors
(syntax errors, constraint violations) are SQLAlchemy exceptions and are
propagated unwrapped; only configuration and connectivity failures during
connection setup are wrapped, with the original error chained as the cause.
"""


class DBManagerError(Exception):
    """Base class for errors raised by dbmanager itself."""


class ConfigurationError(DBManagerError):
    """Missing or invalid connection string key or descriptor."""


class ConnectivityError(DBManagerError):
    """The transport could not open or maintain the connection."""


class InvalidStateError(DBManagerError):
    """Operation attempted on a disposed or already-terminal resource."""


class BuildError(DBManagerError):
    """A command was built without text, connection, or a required parameter."""


class UnsupportedOperation(DBManagerError):
    """A DAO operation the concrete implementation declines to provide."""


class NotFound:
    """
    Result of a fetch that matched zero rows.

    Not an error: ``Readable.fetch`` returns the ``NOT_FOUND`` singleton
    instead of a default-valued entity. It is falsy so ``if entity:`` reads
    naturally, but callers should compare with ``is NOT_FOUND``.
    """

    _instance: "NotFound | None" = None

    def __new__(cls) -> "NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = NotFound()
