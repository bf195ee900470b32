"""Main CLI entry point for abac-core.

Defines the CLI group and registers all subcommands.

Commands:
    check   - Run an access check against an entitlements file
    config  - Configuration file commands (validate)
    eval    - Evaluate one condition tree against a context
    policy  - Entitlement file commands (validate, show, path)

Subcommand help:
    abac-core COMMAND -h         Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from abac_core import __version__

from .commands.config import config
from .commands.evaluate import check, evaluate
from .commands.policy import policy


class ReorderedGroup(click.Group):
    """Custom group that shows commands before custom help text."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """Add extra help after commands section."""
        formatter.write(
            """
Examples:
  abac-core policy validate --path entitlements.json
  abac-core eval --tree tree.json --context context.json
  abac-core check -e entitlements.json -s '{"id": 5}' -a read \\
    --resource '{"type": "document", "ownerId": 5}'
  abac-core check -e entitlements.json -s '{"id": 5}' -a create \\
    --resource-type document

Exit codes (eval, check):
  0   allow
  1   deny
  2   invalid input
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """abac-core: attribute-based access control decisions."""
    if version:
        click.echo(f"abac-core {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(check)
cli.add_command(config)
cli.add_command(evaluate)
cli.add_command(policy)


def main() -> None:
    """CLI entry point."""
    cli()
