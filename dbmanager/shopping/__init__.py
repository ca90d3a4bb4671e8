"""
Shopping database DAOs.

Concrete DAOs for the m_customer table, built on the dbmanager DAO bases.
"""

from dbmanager.shopping.customer_dao import CREATE_TABLE_SQL, CustomerDao
from dbmanager.shopping.customer_summary_dao import CustomerSummaryDao

__all__ = ["CREATE_TABLE_SQL", "CustomerDao", "CustomerSummaryDao"]
