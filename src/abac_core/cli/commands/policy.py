"""Policy command group for abac-core CLI.

Provides entitlement file subcommands.
"""

from __future__ import annotations

__all__ = ["policy"]

import sys
from pathlib import Path

import click

from abac_core.utils.policy import (
    compute_entitlements_checksum,
    get_entitlements_path,
    load_entitlements,
)

from ..styling import style_dim, style_error, style_label, style_success


@click.group()
def policy() -> None:
    """Entitlement file commands."""
    pass


@policy.command("validate")
@click.option(
    "--path",
    "-p",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Validate file at this path instead of the default location",
)
def policy_validate(path: Path | None) -> None:
    """Validate an entitlements file.

    Checks the file for:
    - Valid JSON syntax
    - Schema validation (entitlements, policies, condition tree shapes)
    - Unique entitlement IDs

    Exit codes:
        0: Entitlements are valid
        1: Entitlements are invalid or not found
    """
    entitlements_path = path or get_entitlements_path()

    try:
        entitlements = load_entitlements(entitlements_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    count = len(entitlements.entitlements)
    click.echo(style_success(f"Entitlements valid: {entitlements_path}"))
    click.echo(f"  {count} entitlement{'s' if count != 1 else ''} defined")
    if entitlements.actions:
        click.echo(f"  Actions: {', '.join(sorted(entitlements.actions))}")


@policy.command("show")
@click.option(
    "--path",
    "-p",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Show file at this path instead of the default location",
)
def policy_show(path: Path | None) -> None:
    """Summarize entitlements by resource type and action."""
    entitlements_path = path or get_entitlements_path()

    try:
        entitlements = load_entitlements(entitlements_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    click.echo(style_label("File") + f" {entitlements_path}")
    click.echo(style_label("Checksum") + f" {compute_entitlements_checksum(entitlements_path)}")

    if not entitlements.entitlements:
        click.echo(style_dim("No entitlements defined."))
        return

    for entitlement in entitlements.entitlements:
        click.echo(f"\n[{entitlement.id}] {entitlement.title} ({entitlement.resource_type})")
        if entitlement.description:
            click.echo(style_dim(f"  {entitlement.description}"))
        for action, item in entitlement.policies.items():
            scope = "instance" if item.requires_resource else "type"
            click.echo(f"  {action}: {scope}")


@policy.command("path")
def policy_path_cmd() -> None:
    """Show the default entitlements file path."""
    path = get_entitlements_path()
    click.echo(str(path))

    if not path.exists():
        click.echo("(file does not exist)", err=True)
