"""
Process logging for dbmanager programs.

Connection events are logged under the `dbmanager` logger with their
details (connection key and target) in a `json_fields` extra. On Cloud Run
(K_SERVICE set) records go to Google Cloud Logging labelled with the service
name, where `json_fields` becomes the structured payload. Elsewhere they are
written to stdout and the fields are rendered after the message.

SQL statement echo is opt-in: it raises SQLAlchemy's own `sqlalchemy.engine`
logger to INFO instead of passing `echo=True` to every engine.
"""

import json
import logging
import os
import sys

PACKAGE_LOGGER = "dbmanager"
SQL_LOGGER = "sqlalchemy.engine"

_logging_configured = False


class LocalFormatter(logging.Formatter):
    """Renders the json_fields extra of connection events after the message."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        json_fields = getattr(record, "json_fields", None)
        if not json_fields:
            return message

        fields = json.dumps(json_fields, sort_keys=True, default=str)
        return f"{message} {fields}"


def setup_logging(
    service_name: str = "dbmanager",
    level: int = logging.INFO,
    log_sql: bool = False,
):
    """
    Configure logging once per process.

    Args:
        service_name: Label attached to every record (Cloud Logging label,
            or the prefix of local lines)
        level: Level for the `dbmanager` package logger
        log_sql: Also log every SQL statement SQLAlchemy executes
    """
    global _logging_configured

    if _logging_configured:
        return

    if os.getenv("K_SERVICE"):
        _setup_cloud_logging(service_name)
    else:
        _setup_local_logging(service_name)

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if log_sql else logging.WARNING)

    _logging_configured = True


def _setup_cloud_logging(service_name: str):
    try:
        import google.cloud.logging

        client = google.cloud.logging.Client()
        client.setup_logging(log_level=logging.INFO, labels={"service": service_name})

        logging.getLogger(PACKAGE_LOGGER).info(
            "Cloud Logging configured", extra={"json_fields": {"service": service_name}}
        )
    except Exception as e:
        _setup_local_logging(service_name)
        logging.getLogger(PACKAGE_LOGGER).warning(
            "Cloud Logging unavailable, logging to stdout: %s", e
        )


def _setup_local_logging(service_name: str):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        LocalFormatter(
            f"%(asctime)s [{service_name}] %(levelname)s %(name)s: %(message)s"
        )
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)
