"""Config command group for abac-core CLI.

Provides configuration file subcommands.
"""

from __future__ import annotations

__all__ = ["config"]

import sys
from pathlib import Path

import click

from abac_core.config import AccessControlConfig

from ..styling import style_error, style_label, style_success


@click.group()
def config() -> None:
    """Configuration file commands."""
    pass


@config.command("validate")
@click.option(
    "--path",
    "-p",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file to validate",
)
def config_validate(path: Path) -> None:
    """Validate a configuration file.

    Checks the file for:
    - Valid JSON syntax
    - Schema validation (actions, entitlements_path, logging)
    - Unique, non-blank action names

    Exit codes:
        0: Config is valid
        1: Config is invalid or not found
    """
    try:
        loaded = AccessControlConfig.load_from_file(path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(1)

    click.echo(style_success(f"Config valid: {path}"))
    click.echo(style_label("Actions") + f" {', '.join(loaded.actions)}")
    click.echo(style_label("Entitlements") + f" {loaded.resolved_entitlements_path()}")
