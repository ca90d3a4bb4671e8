from dbmanager.utils.exception_logger import ExceptionLogger
from dbmanager.utils.logging import setup_logging

__all__ = ["ExceptionLogger", "setup_logging"]
