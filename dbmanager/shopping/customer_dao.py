"""
Customer DAO for the shopping database.

Handles customer lookup by account credentials and customer CRUD over the
m_customer table.
"""

from datetime import datetime, timezone
from typing import Any, Mapping

from sqlalchemy import Row

from dbmanager.dao.base import BaseEntityDao
from dbmanager.db import rows
from dbmanager.models.customer import Customer

CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS m_customer (
        email VARCHAR(255) NOT NULL,
        password VARCHAR(255) NOT NULL,
        name VARCHAR(255),
        created_at TIMESTAMP NOT NULL,
        updated_at TIMESTAMP NOT NULL,
        PRIMARY KEY (email, password)
    )
"""

_SELECT = """
    SELECT
        email,
        password,
        name,
        created_at,
        updated_at
    FROM
        m_customer
"""

# Columns patch() may change
PATCHABLE_COLUMNS = ("name", "password")


class CustomerDao(BaseEntityDao[Customer]):
    """DAO for Customer operations."""

    primary_key = ("email", "password")

    def _row_to_model(self, row: Row) -> Customer:
        """Convert database row to Customer model."""
        return Customer(
            email=rows.get_str(row, "email"),
            password=rows.get_str(row, "password"),
            name=rows.get_nullable_str(row, "name"),
            created_at=rows.get_datetime(row, "created_at"),
            updated_at=rows.get_datetime(row, "updated_at"),
        )

    def _fetch(self, *pkeys: Any) -> Customer | None:
        params = self._key_parameters(pkeys)
        result = (
            self._command(_SELECT + " WHERE email = :email AND password = :password")
            .add_parameters(params)
            .build()
            .execute_query()
        )
        if not result:
            return None
        return self._row_to_model(result[0])

    def _find_all(self) -> list[Customer]:
        result = self._command(_SELECT + " ORDER BY email").build().execute_query()
        return [self._row_to_model(row) for row in result]

    def _find_by(self, *pkeys: Any) -> list[Customer]:
        params = self._key_parameters(pkeys, partial=True)
        where = " AND ".join(f"{column} = :{column}" for column in params)
        result = (
            self._command(_SELECT + f" WHERE {where} ORDER BY email")
            .add_parameters(params)
            .build()
            .execute_query()
        )
        return [self._row_to_model(row) for row in result]

    def _insert(self, entity: Customer) -> int:
        return (
            self._command(
                """
                INSERT INTO m_customer (email, password, name, created_at, updated_at)
                VALUES (:email, :password, :name, :created_at, :updated_at)
                """
            )
            .add_parameter("@email", entity.email)
            .add_parameter("@password", entity.password)
            .add_parameter("@name", entity.name)
            .add_parameter("@created_at", entity.created_at)
            .add_parameter("@updated_at", entity.updated_at)
            .build()
            .execute_non_query()
        )

    def _update(self, entity: Customer) -> int:
        return (
            self._command(
                """
                UPDATE
                    m_customer
                SET
                    name = :name,
                    updated_at = :updated_at
                WHERE
                    email = :email
                AND
                    password = :password
                """
            )
            .add_parameter("@email", entity.email)
            .add_parameter("@password", entity.password)
            .add_parameter("@name", entity.name)
            .add_parameter("@updated_at", datetime.now(timezone.utc))
            .build()
            .execute_non_query()
        )

    def _patch(self, value: Any, *pkeys: Any) -> int:
        """
        Update the given columns of one customer.

        Args:
            value: Mapping of column name to new value (name, password)
            *pkeys: email, password
        """
        if not isinstance(value, Mapping) or not value:
            raise ValueError("patch value must be a non-empty mapping of columns")
        unknown = set(value) - set(PATCHABLE_COLUMNS)
        if unknown:
            raise ValueError(f"Columns cannot be patched: {', '.join(sorted(unknown))}")

        key = self._key_parameters(pkeys)
        assignments = ", ".join(f"{column} = :new_{column}" for column in value)
        builder = self._command(
            f"""
            UPDATE m_customer
            SET {assignments}, updated_at = :updated_at
            WHERE email = :email AND password = :password
            """
        )
        for column, new_value in value.items():
            builder.add_parameter(f"new_{column}", new_value)
        return (
            builder.add_parameters(key)
            .add_parameter("updated_at", datetime.now(timezone.utc))
            .build()
            .execute_non_query()
        )

    def _delete(self, *pkeys: Any) -> int:
        return (
            self._command(
                "DELETE FROM m_customer WHERE email = :email AND password = :password"
            )
            .add_parameters(self._key_parameters(pkeys))
            .build()
            .execute_non_query()
        )
