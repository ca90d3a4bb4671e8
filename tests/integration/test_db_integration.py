"""
Integration tests against a configured database.

These tests require a real "shopping" connection string and are skipped
otherwise. Run with:
    DBMANAGER_SHOPPING_URL=postgresql+pg8000://... uv run pytest tests/integration -v
"""

import os
from uuid import uuid4

import pytest
from dotenv import load_dotenv

load_dotenv()

pytestmark = pytest.mark.skipif(
    not (
        os.getenv("DBMANAGER_SHOPPING_URL")
        or os.getenv("DBMANAGER_SHOPPING_INSTANCE_CONNECTION_NAME")
    ),
    reason="Database not configured (DBMANAGER_SHOPPING_URL not set)",
)


@pytest.fixture(scope="module")
def manager():
    """Connection manager for the configured shopping database."""
    from dbmanager.db import ConnectionManager
    from dbmanager.shopping import CREATE_TABLE_SQL

    manager = ConnectionManager("shopping")
    manager.command_builder().with_command_text(
        CREATE_TABLE_SQL
    ).build().execute_non_query()
    yield manager
    manager.dispose()


def test_insert_update_delete_roundtrip(manager):
    from dbmanager.errors import NOT_FOUND
    from dbmanager.models import Customer
    from dbmanager.shopping import CustomerDao

    email = f"integration-{uuid4().hex[:8]}@example.com"
    dao = CustomerDao(manager)

    with manager.begin_transaction() as transaction:
        assert dao.writable().insert(Customer(email=email, password="p")) == 1
        transaction.commit()

    customer = dao.readable().fetch(email, "p")
    assert customer is not NOT_FOUND

    with manager.begin_transaction() as transaction:
        renamed = customer.model_copy(update={"name": "Integration"})
        assert dao.writable().update(renamed) == 1
        transaction.commit()

    assert dao.readable().fetch(email, "p").name == "Integration"
    assert dao.writable().delete(email, "p") == 1
    assert dao.readable().fetch(email, "p") is NOT_FOUND


def test_rollback_discards_changes(manager):
    from dbmanager.errors import NOT_FOUND
    from dbmanager.models import Customer
    from dbmanager.shopping import CustomerDao

    email = f"rollback-{uuid4().hex[:8]}@example.com"
    dao = CustomerDao(manager)

    transaction = manager.begin_transaction()
    dao.writable().insert(Customer(email=email, password="p"))
    transaction.rollback()

    assert dao.readable().fetch(email, "p") is NOT_FOUND
