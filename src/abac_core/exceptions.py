"""Custom exceptions for abac-core.

This module contains all custom exceptions used throughout the package.
Exceptions are organized into two categories:

Authorization Faults (absorbed at the checker boundary, access denied):
    - AuthorizationFault: Base for faults that turn into a deny + diagnostic
    - NoPolicyFound: Policy source returned no condition trees
    - PolicySourceFailure: Policy source call raised or was rejected
    - EvaluationFailure: A condition tree could not be evaluated
    - MalformedConditionError: A tree node matches neither leaf nor group

Integration Errors (propagate to the integrator):
    - AccessControlError: Base for all abac-core errors
    - ConfigurationError: Invalid action set or configuration file
    - UnknownActionError: Checker requested for an action outside the set
    - PolicyValidationError: Policy does not type-check against a schema

Usage:
    from abac_core.exceptions import EvaluationFailure, ConfigurationError
"""

from __future__ import annotations

__all__ = [
    "AccessControlError",
    "AuthorizationFault",
    "ConfigurationError",
    "EvaluationFailure",
    "MalformedConditionError",
    "NoPolicyFound",
    "PolicySourceFailure",
    "PolicyValidationError",
    "UnknownActionError",
]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from abac_core.pdp.validation import ValidationIssue


class AccessControlError(Exception):
    """Base exception for abac-core."""


# =============================================================================
# Authorization Faults (never reach the caller of a checker)
# =============================================================================


class AuthorizationFault(AccessControlError):
    """A fault that must turn into a deny.

    Checkers catch these (and any other Exception), report them to the
    diagnostics sink and return False. Callers of a checker only ever see
    True or False so policy internals never leak through error content.

    Attributes:
        fault_type: Category string for diagnostics.
        resource_type: Resource type of the failing check, if known.
        action: Action of the failing check, if known.
        requires_resource: Whether the failing check had a concrete resource.
    """

    fault_type: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        action: str | None = None,
        requires_resource: bool | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.resource_type = resource_type
        self.action = action
        self.requires_resource = requires_resource

    def __str__(self) -> str:
        return self.message


class NoPolicyFound(AuthorizationFault):
    """Policy source returned an empty sequence for the requested tuple.

    Non-fatal: the check is denied. Reported so operators can detect
    missing authorization coverage.
    """

    fault_type = "no_policy_found"


class PolicySourceFailure(AuthorizationFault):
    """The policy source raised, was rejected, or timed out.

    The underlying error is chained as __cause__.
    """

    fault_type = "policy_source_failure"


class EvaluationFailure(AuthorizationFault):
    """Unexpected fault while evaluating a condition tree.

    Attributes:
        policy_index: Position of the failing tree in the source's sequence.
    """

    fault_type = "evaluation_failure"

    def __init__(
        self,
        message: str,
        *,
        resource_type: str | None = None,
        action: str | None = None,
        requires_resource: bool | None = None,
        policy_index: int | None = None,
    ) -> None:
        super().__init__(message, resource_type=resource_type, action=action, requires_resource=requires_resource)
        self.policy_index = policy_index


class MalformedConditionError(EvaluationFailure):
    """A condition tree node matches neither the leaf nor the group shape."""

    fault_type = "malformed_condition"


# =============================================================================
# Integration Errors (propagate - these are bugs, not authorization outcomes)
# =============================================================================


class ConfigurationError(AccessControlError):
    """Configuration is invalid or incomplete.

    Raised when:
    - The action set is empty or contains duplicates/non-strings
    - Config file contains invalid JSON
    - Config file fails Pydantic validation
    """


class UnknownActionError(AccessControlError, KeyError):
    """A check was requested for an action that is not configured."""

    def __init__(self, action: str, configured: tuple[str, ...]) -> None:
        super().__init__(action)
        self.action = action
        self.configured = configured

    def __str__(self) -> str:
        return f"Unknown action {self.action!r}; configured actions: {', '.join(self.configured)}"


class PolicyValidationError(AccessControlError):
    """A policy does not type-check against the subject/resource schema.

    Attributes:
        issues: Every problem found, in tree order.
    """

    def __init__(self, issues: list["ValidationIssue"]) -> None:
        self.issues = issues
        lines = [f"  - {issue.location}: {issue.message}" for issue in issues]
        super().__init__("Invalid condition tree:\n" + "\n".join(lines))
