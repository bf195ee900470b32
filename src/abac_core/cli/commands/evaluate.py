"""Evaluate commands for abac-core CLI.

eval  - evaluate one condition tree against a context file
check - run a full access check against an entitlements file
"""

from __future__ import annotations

__all__ = ["check", "evaluate"]

import asyncio
import sys
from pathlib import Path
from typing import Any

import click

from abac_core.context.context import build_auth_context
from abac_core.context.resource import resource_type_of
from abac_core.exceptions import (
    EvaluationFailure,
    MalformedConditionError,
    PolicySourceFailure,
)
from abac_core.pdp.access_control import AccessControl
from abac_core.pdp.decision import Decision
from abac_core.pdp.evaluator import evaluate_condition_tree
from abac_core.pdp.source import EntitlementPolicySource
from abac_core.utils.policy import load_entitlements

from ..helpers import load_json_file, parse_json_option
from ..styling import style_decision, style_dim, style_error


class _EchoDiagnostics:
    """Prints diagnostics to stderr so the deny reason is visible."""

    def no_policy_found(self, resource_type: str, action: str, requires_resource: bool) -> None:
        scope = "instance" if requires_resource else "type"
        click.echo(
            style_dim(f"No policy found for resource type '{resource_type}' and action '{action}' ({scope})"),
            err=True,
        )

    def evaluation_failed(self, error: EvaluationFailure | PolicySourceFailure) -> None:
        cause = error.__cause__ or error
        click.echo(style_error(f"{error.message}: {type(cause).__name__}: {cause}"), err=True)


@click.command("eval")
@click.option(
    "--tree",
    "-t",
    "tree_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file holding one condition tree",
)
@click.option(
    "--context",
    "-c",
    "context_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='JSON file holding {"subject": {...}, "resource": {...}}',
)
def evaluate(tree_path: Path, context_path: Path) -> None:
    """Evaluate a condition tree against a context.

    Prints "allow" or "deny".

    Exit codes:
        0: Tree holds (allow)
        1: Tree does not hold (deny)
        2: Tree or context is malformed
    """
    tree = load_json_file(tree_path, "tree")
    context = load_json_file(context_path, "context")

    if not isinstance(context, dict) or not isinstance(context.get("subject"), dict):
        click.echo(style_error('Context must be an object with a "subject" object'), err=True)
        sys.exit(2)

    resource = context.get("resource")
    if resource is not None and not isinstance(resource, dict):
        click.echo(style_error('Context "resource" must be an object when given'), err=True)
        sys.exit(2)

    try:
        allowed = evaluate_condition_tree(tree, build_auth_context(context["subject"], resource).as_mapping())
    except MalformedConditionError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(2)

    click.echo(style_decision(Decision.from_allowed(allowed)))
    sys.exit(0 if allowed else 1)


@click.command("check")
@click.option(
    "--entitlements",
    "-e",
    "entitlements_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Entitlements file to serve policies from",
)
@click.option("--subject", "-s", required=True, help="Subject attributes as inline JSON")
@click.option("--action", "-a", required=True, help="Action to check")
@click.option("--resource", "-r", default=None, help="Full resource as inline JSON (must carry \"type\")")
@click.option("--resource-type", "-T", default=None, help="Bare resource type (no instance)")
def check(
    entitlements_path: Path,
    subject: str,
    action: str,
    resource: str | None,
    resource_type: str | None,
) -> None:
    """Run an access check against an entitlements file.

    Give exactly one of --resource or --resource-type.

    Exit codes:
        0: Access allowed
        1: Access denied
        2: Invalid input
    """
    if (resource is None) == (resource_type is None):
        raise click.UsageError("Give exactly one of --resource or --resource-type")

    subject_data = parse_json_option(subject, "--subject")
    target: Any = parse_json_option(resource, "--resource") if resource is not None else resource_type

    if not isinstance(subject_data, dict):
        click.echo(style_error("--subject must be a JSON object"), err=True)
        sys.exit(2)

    try:
        resource_type_of(target)
    except TypeError as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(2)

    try:
        entitlements = load_entitlements(entitlements_path)
    except (FileNotFoundError, ValueError) as e:
        click.echo(style_error(str(e)), err=True)
        sys.exit(2)

    access = AccessControl([action], EntitlementPolicySource(entitlements), diagnostics=_EchoDiagnostics())
    allowed = asyncio.run(access.check(subject_data, action, target))

    click.echo(style_decision(Decision.from_allowed(allowed)))
    sys.exit(0 if allowed else 1)
