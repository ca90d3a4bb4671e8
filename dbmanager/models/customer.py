from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class Customer(BaseModel):
    """
    Customer account of the shopping database.

    Identified by the (email, password) pair, matching the m_customer
    primary key.
    """

    # Identity
    email: EmailStr = Field(description="Account email address")
    password: str = Field(description="Account password")
    name: Optional[str] = Field(default=None, description="Display name")

    # Timestamps
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Record creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last update timestamp",
    )


class CustomerSummary(BaseModel):
    """Read-only projection of a customer without credentials"""

    email: EmailStr = Field(description="Account email address")
    name: Optional[str] = Field(default=None, description="Display name")
