"""Shared file utilities for abac-core.

Provides common utilities used by config and entitlement loading:
- get_app_dir: OS-appropriate application directory
- compute_file_checksum: SHA256 checksum for file integrity
- set_secure_permissions: Secure file/directory permissions
- require_file_exists / load_validated_json: Readable load errors
- write_json_atomic: Crash-safe JSON writes
"""

from __future__ import annotations

import hashlib
import json
import os
import sys
import tempfile
from pathlib import Path
from typing import Any, TypeVar

import click
from pydantic import BaseModel, ValidationError

from abac_core.constants import APP_NAME

# Type variable for Pydantic models
T = TypeVar("T", bound=BaseModel)

__all__ = [
    "compute_file_checksum",
    "format_validation_errors",
    "get_app_dir",
    "load_validated_json",
    "require_file_exists",
    "set_secure_permissions",
    "write_json_atomic",
]


def get_app_dir() -> Path:
    """Get the OS-appropriate application directory.

    Uses click.get_app_dir() which returns:
    - macOS: ~/Library/Application Support/abac-core
    - Linux: ~/.config/abac-core (XDG compliant)
    - Windows: C:\\Users\\<user>\\AppData\\Roaming\\abac-core

    Returns:
        Path to the application directory.
    """
    return Path(click.get_app_dir(APP_NAME))


def compute_file_checksum(file_path: Path) -> str:
    """Compute SHA256 checksum of file content.

    Args:
        file_path: Path to the file.

    Returns:
        str: Checksum in format "sha256:<hex_digest>".

    Raises:
        FileNotFoundError: If file doesn't exist.
        OSError: If file cannot be read.
    """
    with open(file_path, "rb") as f:
        content = f.read()
    digest = hashlib.sha256(content).hexdigest()
    return f"sha256:{digest}"


def set_secure_permissions(path: Path, *, is_directory: bool = False) -> None:
    """Restrict a file (0o600) or directory (0o700) to its owner.

    Does nothing on Windows. Ignores permission errors.
    """
    if sys.platform == "win32":
        return

    try:
        path.chmod(0o700 if is_directory else 0o600)
    except OSError:
        pass  # Permission changes might fail on some systems


def require_file_exists(file_path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError with a readable message if file doesn't exist.

    Args:
        file_path: Path to check.
        file_type: Description for error message (e.g., "configuration").

    Raises:
        FileNotFoundError: If file doesn't exist.
    """
    if file_path.exists():
        return
    raise FileNotFoundError(f"{file_type.capitalize()} file not found at {file_path}.")


def format_validation_errors(error: ValidationError) -> list[str]:
    """Render pydantic errors as "  - loc: msg" lines."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"]) or "<root>"
        lines.append(f"  - {loc}: {item['msg']}")
    return lines


def load_validated_json(
    file_path: Path,
    model_class: type[T],
    file_type: str = "file",
    recovery_hint: str | None = None,
) -> T:
    """Load JSON file and validate against Pydantic model.

    Args:
        file_path: Path to JSON file.
        model_class: Pydantic model class to validate against.
        file_type: Description for error messages (e.g., "config", "entitlements").
        recovery_hint: Optional hint appended to validation errors.

    Returns:
        Validated Pydantic model instance.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        ValueError: If JSON is invalid or validation fails.
    """
    require_file_exists(file_path, file_type=file_type)

    try:
        with open(file_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {file_path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {file_path}: {e}") from e

    try:
        return model_class.model_validate(data)
    except ValidationError as e:
        hint = f"\n\n{recovery_hint}" if recovery_hint else ""
        raise ValueError(
            f"Invalid {file_type} in {file_path}:\n"
            + "\n".join(format_validation_errors(e))
            + hint
        ) from e


def write_json_atomic(data: Any, path: Path) -> None:
    """Write JSON to path atomically with owner-only permissions.

    Writes to a temp file in the same directory, then renames over the
    target so a failed write never leaves a truncated file.

    Args:
        data: JSON-serializable data.
        path: Destination file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    set_secure_permissions(path.parent, is_directory=True)

    content = json.dumps(data, indent=2) + "\n"

    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.chmod(temp_path, 0o600)
        os.replace(temp_path, path)

    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise
