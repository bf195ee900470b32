"""Policy and entitlement models.

Policy structure:
    EntitlementSet
    ├── version: Schema version for migrations
    └── entitlements: List[Entitlement]
        └── Entitlement
            ├── id: Unique integer identifier
            ├── title / description: Human-readable documentation
            ├── resource_type: Resource discriminant the policies apply to
            └── policies: action name → Policy (optional per action)
                └── Policy
                    ├── requires_resource: Whether a concrete instance is needed
                    └── conditions: ConditionTree

Design principles:
1. A policy is an independently sufficient grant (policies combine with OR)
2. Default to DENY when no policy applies (zero trust)
3. Models are frozen; sources hand out fresh values on each lookup
"""

from __future__ import annotations

__all__ = [
    "Entitlement",
    "EntitlementSet",
    "Policy",
]

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from abac_core.constants import INITIAL_VERSION
from abac_core.pdp.condition import ConditionTree


class Policy(BaseModel):
    """One rule bundle for a (resource type, action) pair.

    Attributes:
        requires_resource: True if the policy reads resource attributes and
            only applies to checks made with a concrete resource.
        conditions: Condition tree that must hold for access to be granted.
    """

    requires_resource: bool
    conditions: ConditionTree

    model_config = ConfigDict(frozen=True)


class Entitlement(BaseModel):
    """Named grouping of policies for one resource type.

    Attributes:
        id: Unique identifier within an EntitlementSet.
        title: Short human-readable name.
        description: Optional longer explanation.
        resource_type: Discriminant of the resource variant covered.
        policies: Action name → Policy. Actions without a policy are not
            granted by this entitlement.
    """

    id: int
    title: str = Field(min_length=1)
    description: str = ""
    resource_type: str = Field(min_length=1)
    policies: dict[str, Policy] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("title", "resource_type", mode="after")
    @classmethod
    def reject_blank(cls, v: str) -> str:
        """Reject whitespace-only titles and resource types."""
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace-only")
        return v

    @field_validator("policies", mode="after")
    @classmethod
    def reject_blank_actions(cls, v: dict[str, Policy]) -> dict[str, Policy]:
        """Reject empty action names as policy keys."""
        for action in v:
            if not action.strip():
                raise ValueError("Action names cannot be empty or whitespace-only")
        return v


class EntitlementSet(BaseModel):
    """Complete entitlement document, as stored on disk.

    Attributes:
        version: Schema version for migrations.
        entitlements: Entitlements in lookup order; the order of condition
            trees handed to the evaluator follows this order.
    """

    version: str = INITIAL_VERSION
    entitlements: list[Entitlement] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def ensure_unique_ids(self) -> Self:
        """Validate that entitlement IDs are unique."""
        ids = [e.id for e in self.entitlements]
        if len(ids) != len(set(ids)):
            duplicates = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"Duplicate entitlement IDs: {duplicates}")
        return self

    @property
    def actions(self) -> frozenset[str]:
        """All action names with at least one policy."""
        return frozenset(action for e in self.entitlements for action in e.policies)
