"""Access control façade - bind actions and a policy source, check access.

This module provides the AccessControl class that answers "can this subject
perform this action on this resource?" by asking a policy source for
condition trees and evaluating them.

Usage:
    access = AccessControl(["read", "update"], get_conditions)
    if await access.can(user).read(document):
        ...
    if await access.can(user)["update"]("document"):   # bare resource type
        ...

Check flow:
1. resource_type = resource["type"], or the argument itself if it is a string
2. requires_resource = the argument is not a string
3. Await the policy source with (subject, resource_type, action, requires_resource)
4. No trees → NoPolicyFound diagnostic, DENY
5. Build the AuthContext (resource included only if requires_resource)
6. Evaluate trees in order, stop at the first one that holds → ALLOW
7. None held → DENY

Design principles:
1. Policies are independently sufficient grants (short-circuit OR)
2. Fail-closed: any fault in the policy source or evaluator is a DENY,
   reported through diagnostics, never raised to the caller
3. No shared mutable state: checks may run concurrently
4. No retries or caching of policy source results
"""

from __future__ import annotations

__all__ = [
    "AccessControl",
    "ActionCheckers",
    "Checker",
]

from collections.abc import Awaitable, Callable, Iterable, Iterator, Mapping
from typing import Any, NoReturn

from abac_core.context.context import build_auth_context
from abac_core.context.resource import requires_resource as _requires_resource
from abac_core.context.resource import resource_type_of
from abac_core.exceptions import (
    AuthorizationFault,
    ConfigurationError,
    EvaluationFailure,
    NoPolicyFound,
    PolicySourceFailure,
    UnknownActionError,
)
from abac_core.pdp.evaluator import evaluate_condition_tree
from abac_core.pdp.protocol import PolicySource
from abac_core.telemetry.diagnostics import DiagnosticsSink, LoggingDiagnostics
from abac_core.telemetry.system.system_logger import get_system_logger

# Async predicate over a full resource or a bare resource type
Checker = Callable[[Any], Awaitable[bool]]


class ActionCheckers(Mapping[str, Checker]):
    """Read-only mapping of action name → checker for one subject.

    Checkers are reachable by key or, for identifier-like action names,
    as attributes. Neither keys nor attributes can be added, removed or
    replaced.
    """

    __slots__ = ("_checkers",)

    def __init__(self, checkers: dict[str, Checker]) -> None:
        object.__setattr__(self, "_checkers", checkers)

    def __getitem__(self, action: str) -> Checker:
        return self._checkers[action]

    def __iter__(self) -> Iterator[str]:
        return iter(self._checkers)

    def __len__(self) -> int:
        return len(self._checkers)

    def __getattr__(self, action: str) -> Checker:
        try:
            return self._checkers[action]
        except KeyError:
            raise AttributeError(f"No checker for action {action!r}") from None

    def __setattr__(self, name: str, value: Any) -> NoReturn:
        raise AttributeError("ActionCheckers is read-only")

    def __delattr__(self, name: str) -> NoReturn:
        raise AttributeError("ActionCheckers is read-only")

    def __repr__(self) -> str:
        return f"ActionCheckers({', '.join(self._checkers)})"


def _validate_actions(actions: Iterable[str]) -> tuple[str, ...]:
    """Validate the action set: non-empty, unique, non-blank strings."""
    if isinstance(actions, str):
        raise ConfigurationError("Actions must be an iterable of names, not a single string")

    result = tuple(actions)
    if not result:
        raise ConfigurationError("At least one action must be configured")

    for action in result:
        if not isinstance(action, str) or not action.strip():
            raise ConfigurationError(f"Action names must be non-empty strings, got {action!r}")

    if len(result) != len(set(result)):
        duplicates = sorted({a for a in result if result.count(a) > 1})
        raise ConfigurationError(f"Duplicate actions: {duplicates}")

    return result


class AccessControl:
    """Access control façade over a policy source.

    The action set and policy source are fixed at construction and only
    read afterwards, so one instance can serve concurrent checks for any
    number of subjects.
    """

    def __init__(
        self,
        actions: Iterable[str],
        get_conditions: PolicySource,
        *,
        diagnostics: DiagnosticsSink | None = None,
    ) -> None:
        """Initialize the façade.

        Args:
            actions: Action names, unique, in the order checkers are exposed.
            get_conditions: Policy source (async callable) returning the
                ordered condition trees for a check.
            diagnostics: Receiver for no-policy and failure signals.
                Defaults to LoggingDiagnostics on the system logger.

        Raises:
            ConfigurationError: If the action set is invalid or
                get_conditions is not callable.
        """
        if not callable(get_conditions):
            raise ConfigurationError("get_conditions must be an async callable")

        self._actions = _validate_actions(actions)
        self._action_set = frozenset(self._actions)
        self._get_conditions = get_conditions
        self._diagnostics: DiagnosticsSink = diagnostics or LoggingDiagnostics()

    @property
    def actions(self) -> tuple[str, ...]:
        """Configured action names, in configuration order."""
        return self._actions

    def can(self, subject: Any) -> ActionCheckers:
        """Get the checkers for a subject.

        A fresh, read-only mapping is built on every call.

        Args:
            subject: Requesting principal (mapping or pydantic model).

        Returns:
            ActionCheckers with one async checker per configured action.
        """
        return ActionCheckers({action: self._bind(subject, action) for action in self._actions})

    def _bind(self, subject: Any, action: str) -> Checker:
        async def checker(resource: Any) -> bool:
            return await self.check(subject, action, resource)

        checker.__qualname__ = f"{type(self).__name__}.can().{action}"
        return checker

    async def check(self, subject: Any, action: str, resource: Any) -> bool:
        """Decide whether subject may perform action on resource.

        Args:
            subject: Requesting principal.
            action: One of the configured actions.
            resource: Full resource (model or mapping with "type") or a bare
                resource type string.

        Returns:
            True if any applicable policy holds, False otherwise (including
            when no policy applies or a fault occurred).

        Raises:
            UnknownActionError: If action is not configured.
            TypeError: If resource is neither a resource nor a type string.
        """
        if action not in self._action_set:
            raise UnknownActionError(action, self._actions)

        resource_type = resource_type_of(resource)
        requires_resource = _requires_resource(resource)

        try:
            return await self._decide(subject, action, resource, resource_type, requires_resource)
        except NoPolicyFound:
            self._report(self._diagnostics.no_policy_found, resource_type, action, requires_resource)
            return False
        except AuthorizationFault as e:
            self._report(self._diagnostics.evaluation_failed, e)
            return False

    async def _decide(
        self,
        subject: Any,
        action: str,
        resource: Any,
        resource_type: str,
        requires_resource: bool,
    ) -> bool:
        """Run the check pipeline, raising AuthorizationFault on any fault."""
        fault_context: dict[str, Any] = {
            "resource_type": resource_type,
            "action": action,
            "requires_resource": requires_resource,
        }

        try:
            trees = list(await self._get_conditions(subject, resource_type, action, requires_resource))
        except Exception as e:
            raise PolicySourceFailure(
                f"Policy source failed for resource type '{resource_type}' and action '{action}'",
                **fault_context,
            ) from e

        if not trees:
            raise NoPolicyFound(
                f"No policy found for resource type '{resource_type}' and action '{action}'",
                **fault_context,
            )

        try:
            context = build_auth_context(subject, resource if requires_resource else None).as_mapping()
        except Exception as e:
            raise EvaluationFailure("Could not build the evaluation context", **fault_context) from e

        for index, tree in enumerate(trees):
            try:
                if evaluate_condition_tree(tree, context):
                    return True
            except Exception as e:
                raise EvaluationFailure(
                    f"Condition tree #{index} could not be evaluated",
                    policy_index=index,
                    **fault_context,
                ) from e

        return False

    @staticmethod
    def _report(emit: Callable[..., None], *args: Any) -> None:
        """Send a diagnostic; a failing sink must not turn a deny into a crash."""
        try:
            emit(*args)
        except Exception as e:
            get_system_logger().error(
                {
                    "event": "diagnostics_sink_failed",
                    "message": f"Diagnostics sink raised {type(e).__name__}: {e}",
                }
            )
