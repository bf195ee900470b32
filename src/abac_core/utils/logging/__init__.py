"""Logging utilities: JSONL formatter, logger setup, event helpers."""

from abac_core.utils.logging.iso_formatter import ISO8601Formatter
from abac_core.utils.logging.logger_setup import ensure_log_directory
from abac_core.utils.logging.logging_helpers import (
    extract_error_metadata,
    sanitize_for_logging,
    serialize_event,
)

__all__ = [
    "ISO8601Formatter",
    "ensure_log_directory",
    "extract_error_metadata",
    "sanitize_for_logging",
    "serialize_event",
]
