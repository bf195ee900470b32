"""System logger for operational events.

This module provides a singleton system logger for everything that is not
an authorization decision: missing policy coverage, policy source failures,
evaluation faults, entitlement file problems.

Logging strategy:
- Console (stderr): INFO and above, human-readable
- File (JSONL): WARNING and above by default, configured separately via
  configure_system_logger_file() once the integrator's log path is known
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
]

import logging
import sys
from pathlib import Path

from abac_core.constants import APP_NAME
from abac_core.utils.logging.iso_formatter import ISO8601Formatter
from abac_core.utils.logging.logger_setup import ensure_log_directory


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human-readable console output.

        Args:
            record: The log record to format.

        Returns:
            str: Formatted log message with level prefix.
        """
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger
_system_logger: logging.Logger | None = None
_file_handler: logging.FileHandler | None = None


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Creates the logger on first call with stderr handler only.
    File handler is added later via configure_system_logger_file().

    Returns:
        logging.Logger: Configured system logger instance.

    Example:
        >>> logger = get_system_logger()
        >>> logger.warning({"event": "no_policy_found", "resource_type": "doc"})
    """
    global _system_logger

    if _system_logger is not None:
        return _system_logger

    _system_logger = logging.getLogger(f"{APP_NAME}.system")
    _system_logger.setLevel(logging.INFO)
    _system_logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in _system_logger.handlers:
        handler.close()
    _system_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.setFormatter(ConsoleFormatter())
    _system_logger.addHandler(stderr_handler)

    return _system_logger


def configure_system_logger_file(log_path: Path, level: int = logging.WARNING) -> None:
    """Add (or replace) the system logger's JSONL file handler.

    Args:
        log_path: Path to the system log file.
        level: Minimum level written to the file (default WARNING).

    Raises:
        PermissionError: If the log directory cannot be created.
        OSError: If the log file cannot be opened.
    """
    global _file_handler

    logger = get_system_logger()
    ensure_log_directory(log_path)

    if _file_handler is not None:
        logger.removeHandler(_file_handler)
        _file_handler.close()

    _file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    _file_handler.setLevel(level)
    _file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(_file_handler)
    # Let DEBUG through when the file asks for it
    logger.setLevel(min(logging.INFO, level))
