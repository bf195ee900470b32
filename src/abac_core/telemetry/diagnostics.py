"""Diagnostics for denied access checks.

A checker's return value is only ever True or False. Why a check was
denied by something other than the policies themselves is reported here
instead, so operators can see it without callers learning policy internals.

Two signals exist:
- no_policy_found: the policy source returned nothing (missing coverage)
- evaluation_failed: the policy source or the evaluator raised (fail-closed)

Integrators can pass any object implementing DiagnosticsSink (metrics
counter, error reporter). The default writes structured events to the
system logger.
"""

from __future__ import annotations

__all__ = [
    "DiagnosticsSink",
    "LoggingDiagnostics",
]

import logging
from typing import Literal, Protocol, runtime_checkable

from abac_core.exceptions import EvaluationFailure, PolicySourceFailure
from abac_core.telemetry.models.diagnostics import EvaluationFailureEvent, NoPolicyFoundEvent
from abac_core.telemetry.system.system_logger import get_system_logger
from abac_core.utils.logging.logging_helpers import (
    extract_error_metadata,
    sanitize_for_logging,
    serialize_event,
)


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Receiver for access check diagnostics.

    Implementations must not raise; a sink failure would otherwise turn
    into an unhandled error in the caller's authorization path.
    """

    def no_policy_found(self, resource_type: str, action: str, requires_resource: bool) -> None:
        """Report that no policy covers (resource_type, action)."""
        ...

    def evaluation_failed(self, error: EvaluationFailure | PolicySourceFailure) -> None:
        """Report a fault that was converted into a deny.

        The original exception is available as error.__cause__.
        """
        ...


class LoggingDiagnostics:
    """Writes diagnostics as structured events to a logger.

    no_policy_found is logged at WARNING, evaluation_failed at ERROR.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialize logging diagnostics.

        Args:
            logger: Destination logger. Defaults to the system logger.
        """
        self._logger = logger or get_system_logger()

    def no_policy_found(self, resource_type: str, action: str, requires_resource: bool) -> None:
        """Log a NoPolicyFoundEvent at WARNING."""
        resource_type = sanitize_for_logging(resource_type)
        action = sanitize_for_logging(action)
        event = NoPolicyFoundEvent(
            message=f"No policy found for resource type '{resource_type}' and action '{action}'",
            resource_type=resource_type,
            action=action,
            requires_resource=requires_resource,
        )
        self._logger.warning(serialize_event(event))

    def evaluation_failed(self, error: EvaluationFailure | PolicySourceFailure) -> None:
        """Log an EvaluationFailureEvent at ERROR."""
        cause = error.__cause__ or error
        stage: Literal["policy_source", "evaluation"] = (
            "policy_source" if isinstance(error, PolicySourceFailure) else "evaluation"
        )
        resource_type = sanitize_for_logging(error.resource_type) if error.resource_type is not None else None
        event = EvaluationFailureEvent(
            message=error.message,
            stage=stage,
            resource_type=resource_type,
            action=sanitize_for_logging(error.action or ""),
            requires_resource=error.requires_resource,
            policy_index=getattr(error, "policy_index", None),
            **extract_error_metadata(cause),
        )
        self._logger.error(serialize_event(event))
