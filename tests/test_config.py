"""Tests for connection string sources and descriptors."""

import pytest

from dbmanager.config import (
    ConnectionDescriptor,
    EnvConnectionStringSource,
    MappingConnectionStringSource,
    build_descriptor,
)
from dbmanager.errors import ConfigurationError


class TestConnectionDescriptor:
    """Tests for descriptor validation."""

    def test_url_descriptor(self):
        descriptor = build_descriptor("postgresql+pg8000://user:secret@db/shopping")

        assert descriptor.url == "postgresql+pg8000://user:secret@db/shopping"
        assert not descriptor.is_cloud_sql

    def test_describe_hides_password(self):
        descriptor = build_descriptor("postgresql+pg8000://user:secret@db/shopping")

        assert "secret" not in descriptor.describe()
        assert "user" in descriptor.describe()

    def test_cloud_sql_descriptor(self):
        descriptor = build_descriptor(
            {
                "instance_connection_name": "project:region:instance",
                "db_name": "shopping",
                "db_user": "svc@project.iam",
            }
        )

        assert descriptor.is_cloud_sql
        assert descriptor.driver == "pg8000"
        assert descriptor.enable_iam_auth
        assert descriptor.describe() == "cloudsql://project:region:instance/shopping"

    def test_neither_target_is_invalid(self):
        with pytest.raises(ConfigurationError):
            build_descriptor({"db_name": "shopping"})

    def test_both_targets_is_invalid(self):
        with pytest.raises(ConfigurationError):
            build_descriptor(
                {
                    "url": "sqlite://",
                    "instance_connection_name": "project:region:instance",
                    "db_user": "svc@project.iam",
                }
            )

    def test_cloud_sql_requires_user(self):
        with pytest.raises(ConfigurationError, match="db_user"):
            build_descriptor({"instance_connection_name": "project:region:instance"})

    def test_unparseable_url_is_invalid(self):
        with pytest.raises(ConfigurationError):
            build_descriptor("not a database url")

    def test_descriptor_passes_through(self):
        descriptor = ConnectionDescriptor(url="sqlite://")

        assert build_descriptor(descriptor) is descriptor


class TestMappingConnectionStringSource:
    """Tests for the in-memory source."""

    def test_get(self):
        source = MappingConnectionStringSource({"shopping": "sqlite://"})

        assert source.get("shopping").url == "sqlite://"

    def test_missing_key_returns_none(self):
        assert MappingConnectionStringSource({}).get("shopping") is None


class TestEnvConnectionStringSource:
    """Tests for environment variable resolution."""

    @pytest.fixture
    def source(self) -> EnvConnectionStringSource:
        return EnvConnectionStringSource(load_env_file=False)

    def test_url_variable(self, source, monkeypatch):
        monkeypatch.setenv("DBMANAGER_SHOPPING_URL", "sqlite://")

        assert source.get("shopping").url == "sqlite://"

    def test_key_is_normalized(self, source, monkeypatch):
        monkeypatch.setenv("DBMANAGER_ORDER_HISTORY_URL", "sqlite://")

        assert source.get("order-history") is not None

    def test_cloud_sql_variables(self, source, monkeypatch):
        monkeypatch.delenv("DBMANAGER_SHOPPING_URL", raising=False)
        monkeypatch.setenv(
            "DBMANAGER_SHOPPING_INSTANCE_CONNECTION_NAME", "project:region:instance"
        )
        monkeypatch.setenv("DBMANAGER_SHOPPING_DB_USER", "svc@project.iam")
        monkeypatch.setenv("DBMANAGER_SHOPPING_ENABLE_IAM_AUTH", "false")

        descriptor = source.get("shopping")

        assert descriptor.instance_connection_name == "project:region:instance"
        assert descriptor.db_name == "shopping"
        assert descriptor.db_user == "svc@project.iam"
        assert descriptor.enable_iam_auth is False

    def test_unset_key_returns_none(self, source, monkeypatch):
        monkeypatch.delenv("DBMANAGER_INVENTORY_URL", raising=False)
        monkeypatch.delenv("DBMANAGER_INVENTORY_INSTANCE_CONNECTION_NAME", raising=False)

        assert source.get("inventory") is None

    def test_custom_prefix(self, monkeypatch):
        monkeypatch.setenv("APP_SHOPPING_URL", "sqlite://")
        source = EnvConnectionStringSource(prefix="APP", load_env_file=False)

        assert source.get("shopping").url == "sqlite://"
