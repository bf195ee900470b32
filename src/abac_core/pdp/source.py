"""Entitlement-backed policy source.

Serves condition trees from an in-memory EntitlementSet, typically loaded
from entitlements.json (see utils/policy). Lookup flow:

1. Keep entitlements whose resource_type matches
2. Keep those with a policy for the action
3. Keep policies whose requires_resource equals the request's flag
4. Return their condition trees in entitlement order

The subject is not used for lookup; subject constraints live in the
condition trees themselves.
"""

from __future__ import annotations

__all__ = ["EntitlementPolicySource"]

from collections.abc import Iterable
from typing import Any

from abac_core.pdp.condition import GroupCondition, LeafCondition
from abac_core.pdp.policy import Entitlement, EntitlementSet


class EntitlementPolicySource:
    """Policy source over a fixed set of entitlements.

    Satisfies PolicySource. Reloading swaps the entitlement reference
    atomically; lookups in flight keep the set they started with.
    """

    def __init__(self, entitlements: EntitlementSet | Iterable[Entitlement]) -> None:
        """Initialize the source.

        Args:
            entitlements: EntitlementSet or entitlements in lookup order.
        """
        self._entitlements = self._coerce(entitlements)

    @staticmethod
    def _coerce(entitlements: EntitlementSet | Iterable[Entitlement]) -> EntitlementSet:
        if isinstance(entitlements, EntitlementSet):
            return entitlements
        return EntitlementSet(entitlements=list(entitlements))

    @property
    def entitlements(self) -> EntitlementSet:
        """Current entitlement set."""
        return self._entitlements

    @property
    def entitlement_count(self) -> int:
        """Number of entitlements currently served."""
        return len(self._entitlements.entitlements)

    def reload(self, entitlements: EntitlementSet | Iterable[Entitlement]) -> None:
        """Replace the served entitlements.

        Args:
            entitlements: New EntitlementSet or entitlements in lookup order.
        """
        self._entitlements = self._coerce(entitlements)

    def lookup(
        self,
        resource_type: str,
        action: str,
        requires_resource: bool,
    ) -> list[GroupCondition | LeafCondition]:
        """Synchronous lookup used by __call__ and the CLI.

        Returns:
            Matching condition trees in entitlement order.
        """
        entitlements = self._entitlements
        conditions: list[GroupCondition | LeafCondition] = []
        for entitlement in entitlements.entitlements:
            if entitlement.resource_type != resource_type:
                continue
            policy = entitlement.policies.get(action)
            if policy is None or policy.requires_resource != requires_resource:
                continue
            conditions.append(policy.conditions)
        return conditions

    async def __call__(
        self,
        subject: Any,
        resource_type: str,
        action: str,
        requires_resource: bool,
    ) -> list[GroupCondition | LeafCondition]:
        """Look up condition trees (PolicySource interface)."""
        return self.lookup(resource_type, action, requires_resource)
