"""
DBManager data models.

Pydantic models for the entities stored in the shopping database.
"""

from dbmanager.models.customer import Customer, CustomerSummary

__all__ = ["Customer", "CustomerSummary"]
