"""Logger setup utilities.

Prepares the directory a JSONL file handler writes into.
"""

from __future__ import annotations

__all__ = ["ensure_log_directory"]

from pathlib import Path

from abac_core.utils.file_helpers import set_secure_permissions


def ensure_log_directory(log_file: Path) -> None:
    """Create the log file's parent directory, owner-only (0o700).

    Args:
        log_file: Path to the log file.

    Raises:
        PermissionError: If the directory cannot be created due to permissions.
        OSError: If directory creation fails for other reasons.
    """
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        raise PermissionError(f"Cannot create log directory {log_file.parent}: {e}") from e
    except OSError as e:
        raise OSError(f"Failed to create log directory {log_file.parent}: {e}") from e
    set_secure_permissions(log_file.parent, is_directory=True)
