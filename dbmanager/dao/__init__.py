"""
DAO contract layer.

Readable and Writable are the capability interfaces callers depend on;
BaseDtoDao and BaseEntityDao are the bases concrete DAOs extend.
"""

from dbmanager.dao.base import BaseDtoDao, BaseEntityDao
from dbmanager.dao.capabilities import Readable, Writable

__all__ = ["BaseDtoDao", "BaseEntityDao", "Readable", "Writable"]
