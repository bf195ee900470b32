"""Unit tests for the condition tree evaluator.

Tests path resolution, coercion, operators and group semantics.
Tests use the AAA pattern (Arrange-Act-Assert) for clarity.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping
from typing import Any

import pytest

from abac_core.exceptions import MalformedConditionError
from abac_core.pdp.condition import parse_condition_tree
from abac_core.pdp.evaluator import (
    UNDEFINED,
    coerce_pair,
    compare,
    evaluate_condition_tree,
    resolve_path,
)


def leaf(left: str, op: str, right: Any) -> dict[str, Any]:
    """Build a raw leaf condition."""
    return {"left": left, "op": op, "right": right}


class RecordingMapping(Mapping[str, Any]):
    """Mapping that records which keys were read."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data
        self.reads: list[str] = []

    def __getitem__(self, key: str) -> Any:
        self.reads.append(key)
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)


@pytest.fixture
def owner_context() -> dict[str, Any]:
    """Context where the subject owns the resource."""
    return {
        "subject": {"id": 5, "role": "editor", "profile": {"age": 30}},
        "resource": {"type": "document", "ownerId": 5, "status": "draft"},
    }


# ============================================================================
# Path Resolution
# ============================================================================


class TestResolvePath:
    """Tests for dot-path resolution."""

    def test_resolves_nested_mapping(self, owner_context: dict[str, Any]) -> None:
        """Given a nested path, returns the value at the end."""
        assert resolve_path(owner_context, "subject.profile.age") == 30

    def test_missing_segment_is_undefined(self, owner_context: dict[str, Any]) -> None:
        """Given a missing key, returns UNDEFINED."""
        assert resolve_path(owner_context, "subject.department") is UNDEFINED

    def test_indexing_into_scalar_is_undefined(self, owner_context: dict[str, Any]) -> None:
        """Given a path through a scalar, returns UNDEFINED."""
        assert resolve_path(owner_context, "subject.id.value") is UNDEFINED

    def test_lists_are_not_walked(self) -> None:
        """Given a path through a list, returns UNDEFINED even for a valid index."""
        # Arrange
        context = {"subject": {"groups": ["a", "b"]}}

        # Act / Assert
        assert resolve_path(context, "subject.groups.0") is UNDEFINED

    def test_resolves_none_value(self) -> None:
        """Given a key whose value is None, returns None (not UNDEFINED)."""
        assert resolve_path({"subject": {"manager": None}}, "subject.manager") is None

    def test_undefined_is_falsy_singleton(self) -> None:
        """UNDEFINED is falsy and prints as UNDEFINED."""
        assert not UNDEFINED
        assert repr(UNDEFINED) == "UNDEFINED"
        assert type(UNDEFINED)() is UNDEFINED


# ============================================================================
# Coercion
# ============================================================================


class TestCoercePair:
    """Tests for the coercion applied before every comparison."""

    @pytest.mark.parametrize(
        ("left", "right", "expected"),
        [
            ("21", 18, (21.0, 18.0)),
            (" 3.5 ", "1e2", (3.5, 100.0)),
            (True, 1, (1.0, 1.0)),
            (False, "0", (0.0, 0.0)),
        ],
    )
    def test_numeric_pairs_become_floats(self, left: Any, right: Any, expected: tuple[float, float]) -> None:
        """Given two numeric-like values, both become floats."""
        assert coerce_pair(left, right) == expected

    def test_bool_with_non_numeric_uses_truthiness(self) -> None:
        """Given a bool and a non-numeric string, both become bools."""
        assert coerce_pair(True, "yes") == (True, True)
        assert coerce_pair("no", False) == (True, False)

    def test_bool_with_undefined_is_false(self) -> None:
        """Given a bool and UNDEFINED, UNDEFINED becomes False."""
        assert coerce_pair(UNDEFINED, True) == (False, True)

    def test_bool_with_container_is_true(self) -> None:
        """Given a bool and an empty list, the list is truthy."""
        assert coerce_pair(True, []) == (True, True)

    def test_non_numeric_strings_unchanged(self) -> None:
        """Given two plain strings, values are compared as-is."""
        assert coerce_pair("abc", "abd") == ("abc", "abd")

    @pytest.mark.parametrize("text", ["1_000", "1e", "nan", "inf", "Infinity", "12px", "-0x10"])
    def test_non_numeric_strings_are_not_coerced(self, text: str) -> None:
        """Given a string that is not a finite number literal, it is not coerced."""
        assert coerce_pair(text, 1) == (text, 1)

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("0x10", 16.0), ("0o17", 15.0), ("0b101", 5.0), (" 0XfF ", 255.0)],
    )
    def test_radix_literals_are_numbers(self, text: str, expected: float) -> None:
        """Given a hex, octal or binary literal, it is parsed as an integer."""
        assert coerce_pair(text, 0) == (expected, 0.0)

    @pytest.mark.parametrize("blank", [None, "", "   ", "\t\n"])
    def test_none_and_blank_strings_count_as_zero(self, blank: Any) -> None:
        """Given None or a blank string beside a number, it becomes 0."""
        assert coerce_pair(blank, 3) == (0.0, 3.0)

    def test_none_with_non_numeric_string_unchanged(self) -> None:
        """Given None and a non-numeric string, neither is coerced."""
        assert coerce_pair(None, "abc") == (None, "abc")

    def test_nan_is_not_numeric(self) -> None:
        """Given a NaN float, no numeric coercion happens."""
        left, right = coerce_pair(math.nan, 1)
        assert math.isnan(left)
        assert right == 1

    def test_undefined_is_not_numeric(self) -> None:
        """Given UNDEFINED and a number, values are unchanged."""
        assert coerce_pair(UNDEFINED, 0) == (UNDEFINED, 0)


# ============================================================================
# Operators
# ============================================================================


class TestCompare:
    """Tests for operator application on coerced pairs."""

    @pytest.mark.parametrize(
        ("op", "left", "right", "expected"),
        [
            ("eq", 1.0, 1.0, True),
            ("neq", 1.0, 2.0, True),
            ("gt", 2.0, 1.0, True),
            ("lt", 2.0, 1.0, False),
            ("gte", 1.0, 1.0, True),
            ("lte", 1.0, 0.0, False),
        ],
    )
    def test_known_operators(self, op: str, left: float, right: float, expected: bool) -> None:
        """Given each operator, applies the matching comparison."""
        assert compare(op, left, right) is expected

    def test_unknown_operator_is_false(self) -> None:
        """Given an unknown operator, returns False."""
        assert compare("contains", "abc", "b") is False

    def test_strings_order_by_code_point(self) -> None:
        """Given two strings, ordering is lexicographic."""
        assert compare("lt", "apple", "banana") is True
        assert compare("gt", "Zebra", "apple") is False

    def test_incomparable_ordering_is_false(self) -> None:
        """Given values without an ordering, returns False instead of raising."""
        assert compare("gt", "abc", None) is False
        assert compare("lte", {"a": 1}, {"a": 1}) is False

    def test_equality_is_structural(self) -> None:
        """Given equal dicts, eq is True."""
        assert compare("eq", {"a": [1, 2]}, {"a": [1, 2]}) is True

    def test_undefined_equals_only_itself(self) -> None:
        """UNDEFINED equals another UNDEFINED and nothing else."""
        assert compare("eq", UNDEFINED, UNDEFINED) is True
        assert compare("neq", UNDEFINED, UNDEFINED) is False
        assert compare("eq", UNDEFINED, None) is False
        assert compare("neq", UNDEFINED, "admin") is True

    def test_undefined_has_no_ordering(self) -> None:
        """Given UNDEFINED, every ordering is False, even against itself."""
        for op in ("gt", "lt", "gte", "lte"):
            assert compare(op, UNDEFINED, 1) is False
            assert compare(op, UNDEFINED, UNDEFINED) is False


# ============================================================================
# Leaves
# ============================================================================


class TestLeafEvaluation:
    """Tests for single-leaf trees."""

    def test_cross_reference_equality(self, owner_context: dict[str, Any]) -> None:
        """Given subject.id eq resource.ownerId with matching ids, allows."""
        tree = leaf("subject.id", "eq", "resource.ownerId")
        assert evaluate_condition_tree(tree, owner_context) is True

    def test_cross_reference_mismatch(self, owner_context: dict[str, Any]) -> None:
        """Given a different owner, denies."""
        # Arrange
        owner_context["resource"]["ownerId"] = 6
        tree = leaf("subject.id", "eq", "resource.ownerId")

        # Act / Assert
        assert evaluate_condition_tree(tree, owner_context) is False

    def test_numeric_string_compared_as_number(self) -> None:
        """Given age "21" gte 18, coerces and allows."""
        context = {"subject": {"age": "21"}}
        assert evaluate_condition_tree(leaf("subject.age", "gte", 18), context) is True

    def test_numeric_strings_not_compared_lexicographically(self) -> None:
        """Given "9" lt "10", compares as numbers."""
        context = {"subject": {"level": "9"}}
        assert evaluate_condition_tree(leaf("subject.level", "lt", "10"), context) is True

    def test_bool_against_truthy_string(self) -> None:
        """Given active "yes" eq True, truthiness makes them equal."""
        context = {"subject": {"active": "yes"}}
        assert evaluate_condition_tree(leaf("subject.active", "eq", True), context) is True

    def test_missing_attribute_eq_false_literal(self) -> None:
        """Given a missing attribute compared to False, UNDEFINED coerces to False."""
        context = {"subject": {}}
        assert evaluate_condition_tree(leaf("subject.banned", "eq", False), context) is True

    def test_missing_attribute_eq_literal_denies(self) -> None:
        """Given a missing attribute compared to a string, denies."""
        context = {"subject": {}}
        assert evaluate_condition_tree(leaf("subject.role", "eq", "admin"), context) is False

    def test_missing_attribute_neq_literal_allows(self) -> None:
        """Given a missing attribute, neq any string is True."""
        context = {"subject": {}}
        assert evaluate_condition_tree(leaf("subject.role", "neq", "admin"), context) is True

    def test_two_missing_paths_are_equal(self) -> None:
        """Given two unresolved paths, eq is True and neq is False."""
        context = {"subject": {}, "resource": {"type": "document"}}
        assert evaluate_condition_tree(leaf("subject.a", "eq", "resource.b"), context) is True
        assert evaluate_condition_tree(leaf("subject.a", "neq", "resource.b"), context) is False

    def test_null_attribute_compares_as_zero(self) -> None:
        """Given n = None, "n lte 5" holds because None counts as 0."""
        context = {"subject": {"n": None}}
        assert evaluate_condition_tree(leaf("subject.n", "lte", 5), context) is True

    def test_empty_string_equals_zero(self) -> None:
        """Given s = "", "s eq 0" holds because a blank string counts as 0."""
        context = {"subject": {"s": ""}}
        assert evaluate_condition_tree(leaf("subject.s", "eq", 0), context) is True

    def test_unknown_operator_denies(self, owner_context: dict[str, Any]) -> None:
        """Given an unknown operator, the leaf is False."""
        assert evaluate_condition_tree(leaf("subject.role", "like", "edit%"), owner_context) is False

    def test_resource_prefix_is_literal_without_resource(self) -> None:
        """Given no resource, a "resource." right value is literal text."""
        # Arrange
        context = {"subject": {"note": "resource.ownerId"}}

        # Act
        result = evaluate_condition_tree(leaf("subject.note", "eq", "resource.ownerId"), context)

        # Assert
        assert result is True

    def test_resource_prefix_is_path_with_resource(self, owner_context: dict[str, Any]) -> None:
        """Given a resource, a "resource." right value is resolved."""
        owner_context["subject"]["note"] = "resource.status"
        assert evaluate_condition_tree(leaf("subject.note", "eq", "resource.status"), owner_context) is False

    def test_subject_prefix_always_resolved(self) -> None:
        """Given a "subject." right value, it is always a path."""
        context = {"subject": {"a": 1, "b": 1}}
        assert evaluate_condition_tree(leaf("subject.a", "eq", "subject.b"), context) is True

    def test_other_strings_are_literals(self) -> None:
        """Given a right value without a known prefix, it is compared literally."""
        context = {"subject": {"team": "user.team"}}
        assert evaluate_condition_tree(leaf("subject.team", "eq", "user.team"), context) is True


# ============================================================================
# Groups
# ============================================================================


class TestGroupEvaluation:
    """Tests for AND/OR groups."""

    def test_empty_and_is_true(self) -> None:
        """Given an empty AND group, allows."""
        assert evaluate_condition_tree({"join": "and", "conditions": []}, {"subject": {}}) is True

    def test_empty_or_is_false(self) -> None:
        """Given an empty OR group, denies."""
        assert evaluate_condition_tree({"join": "or", "conditions": []}, {"subject": {}}) is False

    def test_and_requires_all(self, owner_context: dict[str, Any]) -> None:
        """Given AND with one false child, denies."""
        tree = {
            "join": "and",
            "conditions": [
                leaf("subject.id", "eq", "resource.ownerId"),
                leaf("resource.status", "eq", "published"),
            ],
        }
        assert evaluate_condition_tree(tree, owner_context) is False

    def test_or_requires_any(self, owner_context: dict[str, Any]) -> None:
        """Given OR with one true child, allows."""
        tree = {
            "join": "or",
            "conditions": [
                leaf("subject.role", "eq", "admin"),
                leaf("subject.id", "eq", "resource.ownerId"),
            ],
        }
        assert evaluate_condition_tree(tree, owner_context) is True

    def test_nested_groups(self, owner_context: dict[str, Any]) -> None:
        """Given AND(OR(false, true), true), allows."""
        tree = {
            "join": "and",
            "conditions": [
                {
                    "join": "or",
                    "conditions": [
                        leaf("subject.role", "eq", "admin"),
                        leaf("subject.role", "eq", "editor"),
                    ],
                },
                leaf("subject.profile.age", "gte", 18),
            ],
        }
        assert evaluate_condition_tree(tree, owner_context) is True

    def test_and_short_circuits(self) -> None:
        """Given AND whose first child is False, later children are not read."""
        # Arrange
        subject = RecordingMapping({"x": 0, "y": 2})
        tree = {"join": "and", "conditions": [leaf("subject.x", "eq", 1), leaf("subject.y", "eq", 2)]}

        # Act
        result = evaluate_condition_tree(tree, {"subject": subject})

        # Assert
        assert result is False
        assert subject.reads == ["x"]

    def test_or_short_circuits(self) -> None:
        """Given OR whose first child is True, later children are not read."""
        # Arrange
        subject = RecordingMapping({"x": 1, "y": 2})
        tree = {"join": "or", "conditions": [leaf("subject.x", "eq", 1), leaf("subject.y", "eq", 2)]}

        # Act
        result = evaluate_condition_tree(tree, {"subject": subject})

        # Assert
        assert result is True
        assert subject.reads == ["x"]

    def test_deterministic(self, owner_context: dict[str, Any]) -> None:
        """Same tree and context always give the same result."""
        tree = parse_condition_tree(leaf("subject.id", "eq", "resource.ownerId"))
        results = {evaluate_condition_tree(tree, owner_context) for _ in range(5)}
        assert results == {True}

    def test_does_not_mutate_context(self, owner_context: dict[str, Any]) -> None:
        """Evaluation leaves the context unchanged."""
        # Arrange
        snapshot = {"subject": dict(owner_context["subject"]), "resource": dict(owner_context["resource"])}

        # Act
        evaluate_condition_tree(leaf("subject.id", "eq", "resource.ownerId"), owner_context)

        # Assert
        assert owner_context == snapshot


class TestMalformedTrees:
    """Tests for trees that match neither shape."""

    def test_malformed_tree_raises(self) -> None:
        """Given a node without left or join, raises MalformedConditionError."""
        with pytest.raises(MalformedConditionError):
            evaluate_condition_tree({"op": "eq", "right": 1}, {"subject": {}})

    def test_malformed_child_raises(self) -> None:
        """Given a group with a malformed child, raises MalformedConditionError."""
        with pytest.raises(MalformedConditionError):
            evaluate_condition_tree({"join": "and", "conditions": [{"nope": 1}]}, {"subject": {}})
