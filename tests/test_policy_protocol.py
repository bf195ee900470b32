"""Tests for the PolicySource protocol and EntitlementPolicySource.

Verifies that the built-in source satisfies the protocol and that lookups
filter by resource type, action and requires_resource in entitlement order.
"""

from __future__ import annotations

from typing import Any

import pytest

from abac_core.pdp import (
    Entitlement,
    EntitlementPolicySource,
    EntitlementSet,
    LeafCondition,
    Policy,
    PolicySource,
)


def owner_policy(requires_resource: bool = True) -> Policy:
    """Policy granting the resource owner."""
    return Policy(
        requires_resource=requires_resource,
        conditions={"left": "subject.id", "op": "eq", "right": "resource.ownerId"},
    )


def role_policy(role: str) -> Policy:
    """Type-level policy granting a role."""
    return Policy(requires_resource=False, conditions={"left": "subject.role", "op": "eq", "right": role})


@pytest.fixture
def entitlements() -> EntitlementSet:
    """Two document entitlements and one folder entitlement."""
    return EntitlementSet(
        entitlements=[
            Entitlement(
                id=1,
                title="Document owners",
                resource_type="document",
                policies={"read": owner_policy(), "update": owner_policy()},
            ),
            Entitlement(
                id=2,
                title="Editors",
                resource_type="document",
                policies={"read": owner_policy(), "create": role_policy("editor")},
            ),
            Entitlement(
                id=3,
                title="Folder admins",
                resource_type="folder",
                policies={"read": role_policy("admin")},
            ),
        ]
    )


class TestPolicySourceProtocolCompliance:
    """Verify sources satisfy the PolicySource protocol."""

    def test_entitlement_source_is_protocol_instance(self, entitlements: EntitlementSet) -> None:
        """EntitlementPolicySource should satisfy PolicySource (runtime check)."""
        source = EntitlementPolicySource(entitlements)
        # runtime_checkable allows isinstance() to work
        assert isinstance(source, PolicySource)

    def test_plain_async_function_is_protocol_instance(self) -> None:
        """A plain async function is callable, so it satisfies PolicySource."""

        async def get_conditions(subject: Any, resource_type: str, action: str, requires_resource: bool) -> list:
            return []

        assert isinstance(get_conditions, PolicySource)


class TestEntitlementPolicySource:
    """Tests for lookups over an EntitlementSet."""

    def test_entitlement_count(self, entitlements: EntitlementSet) -> None:
        """Source should expose the number of entitlements."""
        assert EntitlementPolicySource(entitlements).entitlement_count == 3

    def test_accepts_plain_entitlement_list(self, entitlements: EntitlementSet) -> None:
        """Given a list of entitlements, wraps them in an EntitlementSet."""
        source = EntitlementPolicySource(entitlements.entitlements)
        assert isinstance(source.entitlements, EntitlementSet)
        assert source.entitlement_count == 3

    def test_lookup_in_entitlement_order(self, entitlements: EntitlementSet) -> None:
        """Given two matching entitlements, returns both trees in order."""
        # Act
        trees = EntitlementPolicySource(entitlements).lookup("document", "read", True)

        # Assert
        assert len(trees) == 2
        assert all(isinstance(tree, LeafCondition) for tree in trees)

    def test_lookup_filters_requires_resource(self, entitlements: EntitlementSet) -> None:
        """Given requires_resource=False, instance policies are skipped."""
        source = EntitlementPolicySource(entitlements)
        assert source.lookup("document", "read", False) == []
        assert len(source.lookup("document", "create", False)) == 1

    def test_lookup_filters_resource_type(self, entitlements: EntitlementSet) -> None:
        """Given another resource type, only its entitlements match."""
        trees = EntitlementPolicySource(entitlements).lookup("folder", "read", False)
        assert len(trees) == 1
        assert trees[0].right == "admin"

    def test_lookup_unknown_action_is_empty(self, entitlements: EntitlementSet) -> None:
        """Given an action without policies, returns an empty list."""
        assert EntitlementPolicySource(entitlements).lookup("document", "delete", True) == []

    @pytest.mark.asyncio
    async def test_call_ignores_subject(self, entitlements: EntitlementSet) -> None:
        """Awaiting the source gives the same trees as lookup() for any subject."""
        source = EntitlementPolicySource(entitlements)

        first = await source({"id": 1}, "document", "update", True)
        second = await source({"id": 2}, "document", "update", True)

        assert first == second == source.lookup("document", "update", True)

    def test_reload_swaps_reference(self, entitlements: EntitlementSet) -> None:
        """reload() replaces the served entitlements."""
        # Arrange
        source = EntitlementPolicySource(entitlements)
        new_set = EntitlementSet(
            entitlements=[Entitlement(id=9, title="Deleters", resource_type="document", policies={})]
        )

        # Act
        source.reload(new_set)

        # Assert
        assert source.entitlements is new_set
        assert source.entitlement_count == 1
        assert source.lookup("document", "read", True) == []

    def test_lookup_returns_fresh_list(self, entitlements: EntitlementSet) -> None:
        """Mutating a returned list does not affect later lookups."""
        source = EntitlementPolicySource(entitlements)

        source.lookup("document", "read", True).clear()

        assert len(source.lookup("document", "read", True)) == 2
