"""Unit tests for policy and entitlement models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from abac_core.pdp.condition import GroupCondition, LeafCondition
from abac_core.pdp.policy import Entitlement, EntitlementSet, Policy

OWNER = {"left": "subject.id", "op": "eq", "right": "resource.ownerId"}


class TestPolicy:
    """Tests for the Policy model."""

    def test_parses_raw_conditions(self) -> None:
        """Given a raw condition mapping, conditions become a parsed tree."""
        policy = Policy(requires_resource=True, conditions=OWNER)
        assert isinstance(policy.conditions, LeafCondition)

    def test_parses_group_conditions(self) -> None:
        """Given a raw group, conditions become a GroupCondition."""
        policy = Policy(requires_resource=False, conditions={"join": "and", "conditions": []})
        assert isinstance(policy.conditions, GroupCondition)

    def test_requires_resource_required(self) -> None:
        """Given no requires_resource flag, validation fails."""
        with pytest.raises(ValidationError):
            Policy(conditions=OWNER)  # type: ignore[call-arg]

    def test_malformed_conditions_rejected(self) -> None:
        """Given a tree that is neither leaf nor group, validation fails."""
        with pytest.raises(ValidationError):
            Policy(requires_resource=True, conditions={"op": "eq"})


class TestEntitlement:
    """Tests for the Entitlement model."""

    def test_minimal_entitlement(self) -> None:
        """Given id, title and resource type, defaults fill the rest."""
        entitlement = Entitlement(id=1, title="Owners", resource_type="document")
        assert entitlement.description == ""
        assert entitlement.policies == {}

    @pytest.mark.parametrize("field", ["title", "resource_type"])
    @pytest.mark.parametrize("value", ["", "   "])
    def test_blank_fields_rejected(self, field: str, value: str) -> None:
        """Given a blank title or resource type, validation fails."""
        data = {"id": 1, "title": "Owners", "resource_type": "document", field: value}
        with pytest.raises(ValidationError):
            Entitlement.model_validate(data)

    def test_blank_action_key_rejected(self) -> None:
        """Given a whitespace action name, validation fails."""
        with pytest.raises(ValidationError):
            Entitlement(
                id=1,
                title="Owners",
                resource_type="document",
                policies={" ": Policy(requires_resource=True, conditions=OWNER)},
            )


class TestEntitlementSet:
    """Tests for the EntitlementSet model."""

    def test_default_version(self) -> None:
        """An empty set has version "1"."""
        assert EntitlementSet().version == "1"

    def test_duplicate_ids_rejected(self) -> None:
        """Given two entitlements with the same id, validation fails."""
        with pytest.raises(ValidationError) as exc_info:
            EntitlementSet(
                entitlements=[
                    Entitlement(id=1, title="A", resource_type="document"),
                    Entitlement(id=1, title="B", resource_type="folder"),
                ]
            )

        assert "Duplicate entitlement IDs: [1]" in str(exc_info.value)

    def test_actions_collects_all_policy_keys(self) -> None:
        """actions holds every action with a policy across entitlements."""
        policy = Policy(requires_resource=True, conditions=OWNER)
        entitlements = EntitlementSet(
            entitlements=[
                Entitlement(id=1, title="A", resource_type="document", policies={"read": policy}),
                Entitlement(id=2, title="B", resource_type="folder", policies={"read": policy, "delete": policy}),
            ]
        )
        assert entitlements.actions == frozenset({"read", "delete"})

    def test_round_trips_through_json(self) -> None:
        """model_validate(model_dump(mode="json")) gives an equal set."""
        original = EntitlementSet(
            entitlements=[
                Entitlement(
                    id=1,
                    title="Owners",
                    resource_type="document",
                    policies={"read": Policy(requires_resource=True, conditions=OWNER)},
                )
            ]
        )

        restored = EntitlementSet.model_validate(original.model_dump(mode="json"))

        assert restored == original
