"""Pydantic models for structured log events."""

from abac_core.telemetry.models.diagnostics import EvaluationFailureEvent, NoPolicyFoundEvent

__all__ = [
    "EvaluationFailureEvent",
    "NoPolicyFoundEvent",
]
