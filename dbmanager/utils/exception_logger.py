"""
Daily exception log files.

Each day gets its own UTF-8 file named `<prefix>_<yyyy-mm-dd>.log`. New
entries are prepended, so the first entry in a file is always the latest.
"""

import logging
import traceback
from datetime import datetime
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

SEPARATOR = "=" * 40


class ExceptionLogger:
    """
    Writes exception details (time, message, stack trace) to a daily file.

    Usage:
        try:
            ...
        except Exception as e:
            ExceptionLogger("logs").log_exception(e)
            raise
    """

    def __init__(
        self,
        log_directory: str | Path,
        log_file_prefix: str = "db-error",
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            log_directory: Directory for log files (created if missing)
            log_file_prefix: File name prefix, e.g. "db-error" -> db-error_2025-08-10.log
            clock: Returns the current local time
        """
        self.log_directory = Path(log_directory)
        self.log_file_prefix = log_file_prefix
        self._clock = clock

        self.log_directory.mkdir(parents=True, exist_ok=True)

    def log_file_path(self, when: datetime | None = None) -> Path:
        """Path of the log file for the given day (default: today)."""
        when = when or self._clock()
        return self.log_directory / f"{self.log_file_prefix}_{when:%Y-%m-%d}.log"

    @staticmethod
    def format_entry(exc: BaseException, when: datetime) -> str:
        stack = "".join(traceback.format_tb(exc.__traceback__)).rstrip()
        lines = [
            SEPARATOR,
            f"[DateTime] {when:%Y-%m-%d %H:%M:%S}",
            f"[Type]     {type(exc).__name__}",
            f"[Message]  {exc}",
            "[StackTrace]",
            stack or "No stack trace available",
            SEPARATOR,
            "",
        ]
        return "\n".join(lines) + "\n"

    def log_exception(self, exc: BaseException | None) -> Path | None:
        """
        Prepend an entry for the exception to today's log file.

        Returns:
            Path of the file written, or None if exc is None
        """
        if exc is None:
            return None

        now = self._clock()
        path = self.log_file_path(now)
        entry = self.format_entry(exc, now)

        existing = path.read_text(encoding="utf-8") if path.exists() else ""
        path.write_text(entry + existing, encoding="utf-8")

        logger.debug("Logged %s to %s", type(exc).__name__, path)
        return path
