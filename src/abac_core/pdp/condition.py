"""Condition tree models.

A condition tree is a boolean expression over an AuthContext:

    ConditionTree
    ├── LeafCondition
    │   ├── left: dot-path ("subject.id", "resource.owner.id")
    │   ├── op: "eq" | "neq" | "gt" | "lt" | "gte" | "lte"
    │   └── right: literal value, or dot-path (see is_path_reference)
    └── GroupCondition
        ├── join: "and" | "or"
        └── conditions: ordered ConditionTree children

Trees usually arrive as plain JSON-like mappings from a policy source.
parse_condition_tree() turns them into frozen models; a mapping with a
"join" key is a group, a mapping with a "left" key is a leaf.

Operators are kept as plain strings so an unknown operator survives
parsing and evaluates to False instead of failing the whole check.
Use pdp.validation to reject unknown operators when a policy is loaded.
"""

from __future__ import annotations

__all__ = [
    "ConditionTree",
    "GroupCondition",
    "LeafCondition",
    "is_path_reference",
    "parse_condition_tree",
]

from collections.abc import Mapping
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Tag, TypeAdapter, ValidationError

from abac_core.constants import RESOURCE_PATH_PREFIX, SUBJECT_PATH_PREFIX
from abac_core.exceptions import MalformedConditionError


class LeafCondition(BaseModel):
    """A single comparison between a context attribute and a value.

    Attributes:
        left: Dot-path into the context, always resolved.
        op: Comparison operator name.
        right: Literal value, or a dot-path when is_path_reference() says so.
    """

    left: str
    op: str
    right: Any

    model_config = ConfigDict(frozen=True)


class GroupCondition(BaseModel):
    """An AND/OR group over child trees.

    An empty "and" group is True, an empty "or" group is False.

    Attributes:
        join: How child results combine.
        conditions: Children, evaluated in order with short-circuit.
    """

    join: Literal["and", "or"]
    conditions: tuple[ConditionTree, ...] = ()

    model_config = ConfigDict(frozen=True)


def _node_kind(value: Any) -> str | None:
    """Pick the union member for a raw node (None = matches neither)."""
    if isinstance(value, GroupCondition):
        return "group"
    if isinstance(value, LeafCondition):
        return "leaf"
    if isinstance(value, Mapping):
        if "join" in value:
            return "group"
        if "left" in value:
            return "leaf"
    return None


ConditionTree = Annotated[
    Union[
        Annotated[GroupCondition, Tag("group")],
        Annotated[LeafCondition, Tag("leaf")],
    ],
    Discriminator(_node_kind),
]

GroupCondition.model_rebuild()

_tree_adapter: TypeAdapter[GroupCondition | LeafCondition] = TypeAdapter(ConditionTree)


def parse_condition_tree(raw: Any) -> GroupCondition | LeafCondition:
    """Build a condition tree from a raw mapping.

    Already-parsed trees are returned unchanged.

    Args:
        raw: Mapping (typically decoded JSON) or a parsed tree.

    Returns:
        Frozen GroupCondition or LeafCondition.

    Raises:
        MalformedConditionError: If any node matches neither shape.
    """
    if isinstance(raw, (GroupCondition, LeafCondition)):
        return raw

    try:
        return _tree_adapter.validate_python(raw)
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"]) or "<root>"
            errors.append(f"{loc}: {error['msg']}")
        raise MalformedConditionError("Malformed condition tree: " + "; ".join(errors)) from e


def is_path_reference(value: Any, has_resource: bool) -> bool:
    """Check whether a leaf's right-hand value is a dot-path.

    Strings starting with "subject." are always paths. Strings starting
    with "resource." are paths only while the context holds a resource;
    without one they are compared as literal text.

    Args:
        value: The leaf's right-hand value.
        has_resource: Whether the context being evaluated has a resource.

    Returns:
        True if value should be resolved against the context.
    """
    if not isinstance(value, str):
        return False
    if value.startswith(SUBJECT_PATH_PREFIX):
        return True
    return has_resource and value.startswith(RESOURCE_PATH_PREFIX)
