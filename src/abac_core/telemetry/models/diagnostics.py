"""Pydantic models for access check diagnostics.

IMPORTANT: The 'time' field in all models is Optional[str] = None because:
- Model instances are created WITHOUT timestamps (time=None)
- ISO8601Formatter adds the timestamp during log serialization
- Logged events ALWAYS have a 'time' field in ISO 8601 format

Two events exist, matching the two ways a check can be denied for a
reason other than "no policy granted it":
- NoPolicyFoundEvent: missing authorization coverage
- EvaluationFailureEvent: the policy source or the evaluator failed
"""

from __future__ import annotations

__all__ = [
    "EvaluationFailureEvent",
    "NoPolicyFoundEvent",
]

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class NoPolicyFoundEvent(BaseModel):
    """The policy source returned no condition trees for a check.

    Note: 'time' is None when created, populated by ISO8601Formatter during logging.
    """

    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal["no_policy_found"] = "no_policy_found"
    message: Optional[str] = None

    resource_type: str
    action: str
    requires_resource: bool

    model_config = ConfigDict(frozen=True)


class EvaluationFailureEvent(BaseModel):
    """A check was denied because of an internal fault.

    Attributes:
        stage: "policy_source" if the lookup failed, "evaluation" if a
            condition tree could not be evaluated.
        policy_index: Position of the failing tree (evaluation stage only).
        error_type: Exception class name, e.g. "TimeoutError".
        error_message: Sanitized, truncated exception message.

    Note: 'time' is None when created, populated by ISO8601Formatter during logging.
    """

    time: Optional[str] = Field(
        None,
        description="ISO 8601 timestamp, added by formatter during serialization",
    )
    event: Literal["evaluation_failed"] = "evaluation_failed"
    message: Optional[str] = None

    stage: Literal["policy_source", "evaluation"]
    resource_type: Optional[str] = None
    action: str
    requires_resource: Optional[bool] = None
    policy_index: Optional[int] = None

    error_type: str
    error_message: str

    model_config = ConfigDict(frozen=True)
