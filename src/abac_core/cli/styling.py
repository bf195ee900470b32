"""CLI output styling utilities.

Provides consistent styling helpers for CLI output:
- Cyan bold for labels
- Green for success messages (with checkmark)
- Red for error messages (with cross)
- Dim for neutral/empty state messages
"""

from __future__ import annotations

__all__ = [
    "style_decision",
    "style_dim",
    "style_error",
    "style_label",
    "style_success",
]

import click

from abac_core.pdp.decision import Decision


def style_label(label: str) -> str:
    """Style a label for list/summary headers.

    Example:
        >>> click.echo(style_label("Entitlements") + f" {count}")
        Entitlements: 3
    """
    return click.style(f"{label}:", fg="cyan", bold=True)


def style_success(message: str) -> str:
    """Style a success message with checkmark."""
    return click.style(f"✓ {message}", fg="green")


def style_error(message: str) -> str:
    """Style an error message with cross mark."""
    return click.style(f"✗ {message}", fg="red")


def style_dim(message: str) -> str:
    """Style a neutral/empty state message as dim."""
    return click.style(message, dim=True)


def style_decision(decision: Decision) -> str:
    """Style a decision: green ALLOW, red DENY.

    Example:
        >>> click.echo(style_decision(Decision.ALLOW))
        allow
    """
    return click.style(decision.value, fg="green" if decision is Decision.ALLOW else "red", bold=True)
