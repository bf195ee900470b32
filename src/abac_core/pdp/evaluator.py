"""Condition tree evaluator.

Walks a condition tree against an AuthContext mapping and produces a bool.
The evaluator is pure and synchronous: no I/O, no global state, and the
same tree and context always give the same answer.

Evaluation rules:
1. Group "and": all children True (empty group → True), stops at first False
2. Group "or": any child True (empty group → False), stops at first True
3. Leaf: resolve left path, resolve right (path or literal), coerce, compare

Path resolution:
Each dot-separated segment indexes into a mapping. If a segment is missing,
or the value being indexed is not a mapping (lists and scalars included),
the result is UNDEFINED.

Coercion (applied to the resolved pair before every operator):
1. Both values parse as finite numbers → compare as floats
   (bools count as 1/0, decimal and 0x/0o/0b strings are parsed, None and blank
   strings count as 0)
2. Otherwise either value is a bool → compare truthiness of both
3. Otherwise compare the values unchanged

Known limitations:
- Ordering on two strings is code-point order (Python str comparison)
- Ordering on incomparable values (str vs None, dicts) is False
- UNDEFINED equals only itself, so two unresolved paths are equal
- UNDEFINED has no ordering; gt/lt/gte/lte with it are False
"""

from __future__ import annotations

__all__ = [
    "UNDEFINED",
    "coerce_pair",
    "compare",
    "evaluate_condition_tree",
    "resolve_path",
]

import math
import operator
import re
from collections.abc import Callable, Mapping
from numbers import Real
from typing import Any, Final

from abac_core.constants import PATH_SEPARATOR, RESOURCE_KEY
from abac_core.exceptions import MalformedConditionError
from abac_core.pdp.condition import (
    GroupCondition,
    LeafCondition,
    is_path_reference,
    parse_condition_tree,
)

# Decimal literal with optional sign, fraction and exponent
_NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
# Unsigned hex, octal or binary integer literal
_RADIX_PATTERN = re.compile(r"0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")

_ORDERING: dict[str, Callable[[Any, Any], bool]] = {
    "gt": operator.gt,
    "lt": operator.lt,
    "gte": operator.ge,
    "lte": operator.le,
}


class _Undefined:
    """Sentinel for a path that does not resolve."""

    _instance: _Undefined | None = None

    def __new__(cls) -> _Undefined:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"


UNDEFINED: Final = _Undefined()


def resolve_path(context: Mapping[str, Any], path: str) -> Any:
    """Resolve a dot-path against the context.

    Args:
        context: AuthContext mapping ({"subject": ..., "resource": ...}).
        path: Dot-separated path, e.g. "subject.profile.age".

    Returns:
        The value at the path, or UNDEFINED if any segment fails.
    """
    value: Any = context
    for segment in path.split(PATH_SEPARATOR):
        if not isinstance(value, Mapping) or segment not in value:
            return UNDEFINED
        value = value[segment]
    return value


def _to_number(value: Any) -> float | None:
    """Parse value as a finite number, or return None."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _RADIX_PATTERN.fullmatch(text):
            try:
                number = float(int(text, 0))
            except OverflowError:
                return None
        elif _NUMBER_PATTERN.fullmatch(text):
            number = float(text)
        else:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _to_bool(value: Any) -> bool:
    """Truthiness where containers are always true and NaN is false."""
    if value is None or value is UNDEFINED:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, Real):
        number = float(value)
        return number != 0 and not math.isnan(number)
    if isinstance(value, str):
        return value != ""
    return True


def coerce_pair(left: Any, right: Any) -> tuple[Any, Any]:
    """Coerce a resolved (left, right) pair to a common comparable type.

    Args:
        left: Resolved left value.
        right: Resolved right value.

    Returns:
        (float, float), (bool, bool), or the values unchanged.
    """
    left_number = _to_number(left)
    right_number = _to_number(right)
    if left_number is not None and right_number is not None:
        return left_number, right_number

    if isinstance(left, bool) or isinstance(right, bool):
        return _to_bool(left), _to_bool(right)

    return left, right


def compare(op: str, left: Any, right: Any) -> bool:
    """Apply a comparison operator to an already-coerced pair.

    Args:
        op: Operator name.
        left: Coerced left value.
        right: Coerced right value.

    Returns:
        Comparison result. Unknown operators and incomparable values
        give False.
    """
    if op == "eq":
        return bool(left == right)
    if op == "neq":
        return not left == right

    ordering = _ORDERING.get(op)
    if ordering is None:
        return False
    if left is UNDEFINED or right is UNDEFINED:
        return False
    try:
        return bool(ordering(left, right))
    except TypeError:
        return False


def _evaluate_leaf(leaf: LeafCondition, context: Mapping[str, Any]) -> bool:
    left = resolve_path(context, leaf.left)
    if is_path_reference(leaf.right, RESOURCE_KEY in context):
        right = resolve_path(context, leaf.right)
    else:
        right = leaf.right
    return compare(leaf.op, *coerce_pair(left, right))


def _evaluate(node: Any, context: Mapping[str, Any]) -> bool:
    if isinstance(node, GroupCondition):
        if node.join == "and":
            return all(_evaluate(child, context) for child in node.conditions)
        return any(_evaluate(child, context) for child in node.conditions)
    if isinstance(node, LeafCondition):
        return _evaluate_leaf(node, context)
    raise MalformedConditionError(f"Unsupported condition node type: {type(node).__name__}")


def evaluate_condition_tree(tree: Any, context: Mapping[str, Any]) -> bool:
    """Evaluate a condition tree against an AuthContext.

    Args:
        tree: Parsed tree (GroupCondition/LeafCondition) or raw mapping.
        context: {"subject": ...} or {"subject": ..., "resource": ...}.
            Use AuthContext.as_mapping() to build it from models.

    Returns:
        True if the tree holds for the context.

    Raises:
        MalformedConditionError: If the tree shape is invalid.
    """
    return _evaluate(parse_condition_tree(tree), context)
