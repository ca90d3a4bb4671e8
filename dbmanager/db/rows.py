"""
Null-safe column accessors for result rows.

Two families of getters look a column up by name:

- get_nullable_*: return None when the database value is NULL
- get_*: return a default instead of NULL ("" / 0 / False / current time)

They accept SQLAlchemy Row objects or plain mappings. Names match exactly
first, then case-insensitively. Looking up a column that is not in the row
raises KeyError.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Mapping, TypeVar

from sqlalchemy import Row

T = TypeVar("T")


def _as_mapping(row: Row | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(row, Row):
        return row._mapping
    return row


def has_column(row: Row | Mapping[str, Any], column_name: str) -> bool:
    """Check whether the row has a column with this name (case-insensitive)."""
    wanted = column_name.lower()
    return any(str(key).lower() == wanted for key in _as_mapping(row).keys())


def get_value(row: Row | Mapping[str, Any], column_name: str) -> Any:
    """Raw column value; None for NULL. Exact name first, then case-insensitive."""
    mapping = _as_mapping(row)
    if column_name in mapping:
        return mapping[column_name]

    wanted = column_name.lower()
    for key in mapping.keys():
        if str(key).lower() == wanted:
            return mapping[key]
    raise KeyError(f"Column not found: {column_name}")


def _nullable(
    row: Row | Mapping[str, Any], column_name: str, convert: Callable[[Any], T]
) -> T | None:
    value = get_value(row, column_name)
    return None if value is None else convert(value)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes", "y")
    return bool(value)


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    # SQLite hands timestamps back as ISO strings
    return datetime.fromisoformat(str(value))


def get_nullable_str(row: Row | Mapping[str, Any], column_name: str) -> str | None:
    return _nullable(row, column_name, str)


def get_nullable_int(row: Row | Mapping[str, Any], column_name: str) -> int | None:
    return _nullable(row, column_name, int)


def get_nullable_float(row: Row | Mapping[str, Any], column_name: str) -> float | None:
    return _nullable(row, column_name, float)


def get_nullable_decimal(
    row: Row | Mapping[str, Any], column_name: str
) -> Decimal | None:
    return _nullable(row, column_name, lambda v: Decimal(str(v)))


def get_nullable_bool(row: Row | Mapping[str, Any], column_name: str) -> bool | None:
    return _nullable(row, column_name, _to_bool)


def get_nullable_datetime(
    row: Row | Mapping[str, Any], column_name: str
) -> datetime | None:
    return _nullable(row, column_name, _to_datetime)


def get_str(row: Row | Mapping[str, Any], column_name: str, default: str = "") -> str:
    """Column as str, or `default` (empty string) for NULL."""
    value = get_nullable_str(row, column_name)
    return default if value is None else value


def get_int(row: Row | Mapping[str, Any], column_name: str, default: int = 0) -> int:
    value = get_nullable_int(row, column_name)
    return default if value is None else value


def get_float(
    row: Row | Mapping[str, Any], column_name: str, default: float = 0.0
) -> float:
    value = get_nullable_float(row, column_name)
    return default if value is None else value


def get_decimal(
    row: Row | Mapping[str, Any], column_name: str, default: Decimal = Decimal(0)
) -> Decimal:
    value = get_nullable_decimal(row, column_name)
    return default if value is None else value


def get_bool(
    row: Row | Mapping[str, Any], column_name: str, default: bool = False
) -> bool:
    value = get_nullable_bool(row, column_name)
    return default if value is None else value


def get_datetime(
    row: Row | Mapping[str, Any],
    column_name: str,
    default: datetime | None = None,
) -> datetime:
    """Column as datetime; NULL becomes `default`, or the current UTC time."""
    value = get_nullable_datetime(row, column_name)
    if value is not None:
        return value
    return default if default is not None else datetime.now(timezone.utc)
