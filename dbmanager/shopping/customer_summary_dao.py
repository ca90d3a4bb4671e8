"""Read-only customer projections (no credentials)."""

from typing import Any

from dbmanager.dao.base import BaseDtoDao
from dbmanager.db import rows
from dbmanager.models.customer import CustomerSummary


class CustomerSummaryDao(BaseDtoDao[CustomerSummary]):
    """DTO DAO returning CustomerSummary rows keyed by email."""

    primary_key = ("email",)

    def _fetch(self, *pkeys: Any) -> CustomerSummary | None:
        # Several password rows may share an email; they carry the same name.
        result = (
            self._command(
                "SELECT email, name FROM m_customer WHERE email = :email "
                "ORDER BY created_at DESC"
            )
            .add_parameters(self._key_parameters(pkeys))
            .build()
            .execute_query()
        )
        if not result:
            return None
        return CustomerSummary(
            email=rows.get_str(result[0], "email"),
            name=rows.get_nullable_str(result[0], "name"),
        )

    def _find_all(self) -> list[CustomerSummary]:
        result = (
            self._command("SELECT DISTINCT email, name FROM m_customer ORDER BY email")
            .build()
            .execute_query()
        )
        return [
            CustomerSummary(
                email=rows.get_str(row, "email"),
                name=rows.get_nullable_str(row, "name"),
            )
            for row in result
        ]

    def _find_by(self, *pkeys: Any) -> list[CustomerSummary]:
        self._unsupported("find_by")
