"""Logging helper utilities.

Provides generic utilities for telemetry logging:
- Event serialization (model_dump with consistent options)
- Sanitization (log injection prevention)
- Error metadata extraction
"""

from __future__ import annotations

__all__ = [
    "extract_error_metadata",
    "sanitize_for_logging",
    "serialize_event",
]

from typing import Any

from pydantic import BaseModel

# Longest error message kept in a diagnostic event
_MAX_ERROR_MESSAGE_LENGTH = 500


def serialize_event(event: BaseModel) -> dict[str, Any]:
    """Serialize a Pydantic event model for logging.

    - Excludes the 'time' field (added by ISO8601Formatter at log time)
    - Excludes None values for cleaner logs

    Args:
        event: Pydantic model instance (e.g., NoPolicyFoundEvent).

    Returns:
        dict: Serialized event data ready for logging.
    """
    return event.model_dump(mode="json", exclude={"time"}, exclude_none=True)


def sanitize_for_logging(value: Any) -> str:
    """Sanitize values for safe JSONL logging.

    Prevents log injection by escaping newlines and control characters,
    so attacker-controlled resource types or action names cannot forge
    log entries.

    Example:
        >>> sanitize_for_logging("doc\\nfake entry")
        'doc\\\\nfake entry'
    """
    if not isinstance(value, str):
        value = str(value)
    return value.replace("\n", "\\n").replace("\r", "\\r").replace("\t", "\\t")


def extract_error_metadata(error: BaseException) -> dict[str, str]:
    """Extract type and message from an exception for logging.

    Args:
        error: The exception.

    Returns:
        {"error_type": ..., "error_message": ...} with the message sanitized
        and truncated.
    """
    message = sanitize_for_logging(error)
    if len(message) > _MAX_ERROR_MESSAGE_LENGTH:
        message = message[:_MAX_ERROR_MESSAGE_LENGTH] + "..."
    return {
        "error_type": type(error).__name__,
        "error_message": message,
    }
