"""Shared helpers for CLI commands."""

from __future__ import annotations

__all__ = [
    "load_json_file",
    "parse_json_option",
]

import json
from pathlib import Path
from typing import Any

import click


def load_json_file(path: Path, what: str) -> Any:
    """Read a JSON file, turning errors into click usage errors.

    Args:
        path: File to read.
        what: Description for error messages (e.g., "context").

    Raises:
        click.BadParameter: If the file is not valid JSON.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON in {what} file {path}: {e}") from e


def parse_json_option(value: str | None, what: str) -> Any:
    """Parse an inline JSON option value (None passes through).

    Raises:
        click.BadParameter: If value is not valid JSON.
    """
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON for {what}: {e}") from e
