"""AuthContext and builder - the frame a condition tree is evaluated in.

An AuthContext always has a subject and has a resource only when the
check was made against a concrete resource instance:

    {"subject": {...}}                      # bare resource type
    {"subject": {...}, "resource": {...}}   # full resource

Subjects and resources may be pydantic models or plain mappings. The
builder dumps models to dicts so dot-paths only ever walk mappings.
"""

from __future__ import annotations

__all__ = [
    "AuthContext",
    "Subject",
    "build_auth_context",
    "to_attributes",
]

from collections.abc import Mapping
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict

from abac_core.constants import RESOURCE_KEY, SUBJECT_KEY

# WHO is asking; opaque to the core apart from dot-path reads
Subject: TypeAlias = "BaseModel | Mapping[str, Any]"


def to_attributes(value: BaseModel | Mapping[str, Any]) -> dict[str, Any]:
    """Convert a model or mapping into a plain attribute dict.

    Args:
        value: Pydantic model or mapping.

    Returns:
        Shallow dict copy (models are fully dumped by alias, nested
        models included, so keys match the paths validation accepts).

    Raises:
        TypeError: If value is neither a model nor a mapping.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Expected a mapping or pydantic model, got {type(value).__name__}")


class AuthContext(BaseModel):
    """Evaluation frame for condition trees.

    Attributes:
        subject: Subject attributes.
        resource: Resource attributes, or None when only a type was given.
    """

    subject: dict[str, Any]
    resource: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_resource(self) -> bool:
        """Whether the context carries a concrete resource."""
        return self.resource is not None

    def as_mapping(self) -> dict[str, Any]:
        """Get the mapping the evaluator walks.

        Returns:
            {"subject": ...} or {"subject": ..., "resource": ...}; the
            "resource" key is absent (not None) without a resource.
        """
        if self.resource is None:
            return {SUBJECT_KEY: self.subject}
        return {SUBJECT_KEY: self.subject, RESOURCE_KEY: self.resource}


def build_auth_context(
    subject: BaseModel | Mapping[str, Any],
    resource: BaseModel | Mapping[str, Any] | None = None,
) -> AuthContext:
    """Build an AuthContext from a subject and optional resource.

    Args:
        subject: Requesting principal.
        resource: Concrete resource, or None for a type-only check.

    Returns:
        Frozen AuthContext.
    """
    return AuthContext(
        subject=to_attributes(subject),
        resource=to_attributes(resource) if resource is not None else None,
    )
