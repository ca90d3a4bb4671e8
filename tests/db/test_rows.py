"""Tests for null-safe row accessors."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from dbmanager.db import rows


@pytest.fixture
def row() -> dict:
    return {
        "email": "account1@example.com",
        "name": None,
        "visits": 7,
        "missing_int": None,
        "ratio": "0.25",
        "price": 12.5,
        "active": "true",
        "created_at": "2025-08-10 09:30:00+00:00",
        "deleted_at": None,
    }


class TestNullableGetters:
    """get_nullable_* return None for NULL."""

    def test_values(self, row):
        assert rows.get_nullable_str(row, "email") == "account1@example.com"
        assert rows.get_nullable_int(row, "visits") == 7
        assert rows.get_nullable_float(row, "ratio") == 0.25
        assert rows.get_nullable_decimal(row, "price") == Decimal("12.5")
        assert rows.get_nullable_bool(row, "active") is True
        assert rows.get_nullable_datetime(row, "created_at") == datetime(
            2025, 8, 10, 9, 30, tzinfo=timezone.utc
        )

    def test_nulls(self, row):
        assert rows.get_nullable_str(row, "name") is None
        assert rows.get_nullable_int(row, "missing_int") is None
        assert rows.get_nullable_datetime(row, "deleted_at") is None


class TestDefaultedGetters:
    """get_* substitute a default for NULL."""

    def test_defaults(self, row):
        assert rows.get_str(row, "name") == ""
        assert rows.get_int(row, "missing_int") == 0
        assert rows.get_float(row, "name") == 0.0
        assert rows.get_decimal(row, "name") == Decimal(0)
        assert rows.get_bool(row, "name") is False

    def test_explicit_default(self, row):
        assert rows.get_str(row, "name", default="anonymous") == "anonymous"
        assert rows.get_int(row, "missing_int", default=-1) == -1

    def test_datetime_defaults_to_now(self, row):
        before = datetime.now(timezone.utc)
        value = rows.get_datetime(row, "deleted_at")

        assert before <= value <= datetime.now(timezone.utc)

    def test_non_null_value_wins_over_default(self, row):
        assert rows.get_str(row, "email", default="x") == "account1@example.com"


def test_unknown_column_raises(row):
    with pytest.raises(KeyError):
        rows.get_str(row, "no_such_column")


def test_has_column_is_case_insensitive(row):
    assert rows.has_column(row, "EMAIL")
    assert not rows.has_column(row, "phone")


def test_sqlalchemy_row(manager):
    result = (
        manager.command_builder()
        .with_command_text("SELECT 'a' AS label, NULL AS missing, 3 AS total")
        .build()
        .execute_query()
    )
    row = result[0]

    assert rows.get_str(row, "label") == "a"
    assert rows.get_nullable_str(row, "missing") is None
    assert rows.get_int(row, "total") == 3
    assert rows.has_column(row, "Total")
    assert rows.get_int(row, "TOTAL") == 3


def test_lookup_falls_back_to_case_insensitive_match(row):
    assert rows.has_column(row, "EMAIL")
    assert rows.get_str(row, "EMAIL") == "account1@example.com"


def test_exact_name_wins_over_case_insensitive_match():
    row = {"Email": "upper@example.com", "email": "lower@example.com"}

    assert rows.get_str(row, "email") == "lower@example.com"
    assert rows.get_str(row, "Email") == "upper@example.com"
