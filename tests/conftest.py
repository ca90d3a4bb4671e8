"""
pytest configuration and fixtures.

Loads environment variables from .env file for all tests and provides
ConnectionManager fixtures backed by in-memory SQLite.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from dbmanager.config import MappingConnectionStringSource
from dbmanager.db import ConnectionManager
from dbmanager.shopping import CREATE_TABLE_SQL

SQLITE_MEMORY_URL = "sqlite://"


def pytest_configure(config):
    """Load .env file before running tests"""
    project_root = Path(__file__).parent.parent
    env_file = project_root / ".env"

    if env_file.exists():
        print(f"Loading environment from {env_file}")
        load_dotenv(env_file)
    else:
        print(f"Warning: .env file not found at {env_file}")


@pytest.fixture
def source() -> MappingConnectionStringSource:
    """Connection strings for tests: "shopping" is an in-memory SQLite database."""
    return MappingConnectionStringSource({"shopping": SQLITE_MEMORY_URL})


@pytest.fixture
def manager(source):
    """ConnectionManager configured for the "shopping" key, disposed after the test."""
    manager = ConnectionManager("shopping", source)
    yield manager
    manager.dispose()


@pytest.fixture
def shopping_db(manager) -> ConnectionManager:
    """Manager whose database has the m_customer table."""
    manager.command_builder().with_command_text(
        CREATE_TABLE_SQL
    ).build().execute_non_query()
    return manager
