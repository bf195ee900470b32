"""Schema-driven validation of condition trees.

Condition trees reference attributes by dot-path, so a typo silently
resolves to UNDEFINED at evaluation time. Validating each policy once,
when it is loaded, against pydantic models describing the subject and
resource catches these before they reach the evaluator.

Checks performed per leaf:
- left is a known path ("subject.*", or "resource.*" when a resource exists)
- op is a known operator
- a right-hand path exists, differs from left, and has the same type as left
- a right-hand literal validates against left's type (lax mode)

Known limitations:
- dict/Mapping fields are leaves; paths into them cannot be checked
- Unions other than Optional[X] are treated as leaves
"""

from __future__ import annotations

__all__ = [
    "ValidationIssue",
    "collect_paths",
    "ensure_valid_policy",
    "validate_condition_tree",
    "validate_policy",
]

import types
from dataclasses import dataclass
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError

from abac_core.constants import OPERATORS, RESOURCE_PATH_PREFIX, SUBJECT_PATH_PREFIX
from abac_core.exceptions import PolicyValidationError
from abac_core.pdp.condition import GroupCondition, LeafCondition, is_path_reference, parse_condition_tree
from abac_core.pdp.policy import Policy


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """A problem found in a condition tree.

    Attributes:
        location: Position in the tree, e.g. "conditions.1.left".
        message: Human-readable description.
    """

    location: str
    message: str


def _unwrap_optional(annotation: Any) -> Any:
    """Turn Optional[X] / X | None into X; leave anything else alone."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def collect_paths(model: type[BaseModel], prefix: str = "") -> dict[str, Any]:
    """Collect every leaf dot-path of a pydantic model.

    Nested models are walked; every other field is a leaf.

    Args:
        model: Pydantic model class describing the attributes.
        prefix: Prepended to each path (e.g. "subject.").

    Returns:
        Dot-path → field annotation (Optional unwrapped).
    """
    paths: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        key = field.alias or name
        annotation = _unwrap_optional(field.annotation)
        if _is_model(annotation):
            paths.update(collect_paths(annotation, f"{prefix}{key}."))
        else:
            paths[f"{prefix}{key}"] = annotation
    return paths


def _check_literal(annotation: Any, value: Any) -> str | None:
    """Return an error message if value doesn't fit annotation."""
    if annotation is Any:
        return None
    try:
        TypeAdapter(annotation).validate_python(value)
    except ValidationError as e:
        return e.errors()[0]["msg"]
    return None


def _validate_leaf(
    leaf: LeafCondition,
    location: str,
    paths: dict[str, Any],
    has_resource: bool,
) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []
    prefix = f"{location}." if location else ""

    if leaf.op not in OPERATORS:
        expected = ", ".join(OPERATORS)
        issues.append(ValidationIssue(f"{prefix}op", f"Unknown operator {leaf.op!r}; expected one of: {expected}"))

    left_type: Any = None
    if leaf.left.startswith(RESOURCE_PATH_PREFIX) and not has_resource:
        issues.append(
            ValidationIssue(f"{prefix}left", f"Path {leaf.left!r} needs a resource but the policy does not require one")
        )
    elif not leaf.left.startswith((SUBJECT_PATH_PREFIX, RESOURCE_PATH_PREFIX)):
        issues.append(ValidationIssue(f"{prefix}left", f"Path {leaf.left!r} must start with 'subject.' or 'resource.'"))
    elif leaf.left not in paths:
        issues.append(ValidationIssue(f"{prefix}left", f"Unknown path {leaf.left!r}"))
    else:
        left_type = paths[leaf.left]

    if is_path_reference(leaf.right, has_resource):
        if leaf.right == leaf.left:
            issues.append(ValidationIssue(f"{prefix}right", f"Path {leaf.right!r} is compared with itself"))
        elif leaf.right not in paths:
            issues.append(ValidationIssue(f"{prefix}right", f"Unknown path {leaf.right!r}"))
        elif left_type is not None and paths[leaf.right] != left_type:
            issues.append(
                ValidationIssue(
                    f"{prefix}right",
                    f"Path {leaf.right!r} has a different type than {leaf.left!r}",
                )
            )
    elif left_type is not None:
        message = _check_literal(left_type, leaf.right)
        if message is not None:
            issues.append(
                ValidationIssue(f"{prefix}right", f"Literal {leaf.right!r} does not fit {leaf.left!r}: {message}")
            )

    return issues


def _validate_node(
    node: GroupCondition | LeafCondition,
    location: str,
    paths: dict[str, Any],
    has_resource: bool,
) -> list[ValidationIssue]:
    if isinstance(node, LeafCondition):
        return _validate_leaf(node, location, paths, has_resource)

    issues: list[ValidationIssue] = []
    prefix = f"{location}." if location else ""
    for index, child in enumerate(node.conditions):
        issues.extend(_validate_node(child, f"{prefix}conditions.{index}", paths, has_resource))
    return issues


def validate_condition_tree(
    tree: Any,
    subject_schema: type[BaseModel],
    resource_schema: type[BaseModel] | None = None,
) -> list[ValidationIssue]:
    """Validate a condition tree against subject/resource schemas.

    Args:
        tree: Parsed or raw condition tree.
        subject_schema: Model describing subject attributes.
        resource_schema: Model describing resource attributes, or None if
            the tree is evaluated without a resource.

    Returns:
        Every issue found, in tree order (empty if valid).

    Raises:
        MalformedConditionError: If the tree shape itself is invalid.
    """
    parsed = parse_condition_tree(tree)
    paths = collect_paths(subject_schema, SUBJECT_PATH_PREFIX)
    if resource_schema is not None:
        paths.update(collect_paths(resource_schema, RESOURCE_PATH_PREFIX))
    return _validate_node(parsed, "", paths, has_resource=resource_schema is not None)


def validate_policy(
    policy: Policy,
    subject_schema: type[BaseModel],
    resource_schema: type[BaseModel] | None = None,
) -> list[ValidationIssue]:
    """Validate a policy's tree; the resource schema only applies if required.

    Args:
        policy: Policy to validate.
        subject_schema: Model describing subject attributes.
        resource_schema: Model describing the policy's resource variant.

    Returns:
        Every issue found (empty if valid).
    """
    schema = resource_schema if policy.requires_resource else None
    return validate_condition_tree(policy.conditions, subject_schema, schema)


def ensure_valid_policy(
    policy: Policy,
    subject_schema: type[BaseModel],
    resource_schema: type[BaseModel] | None = None,
) -> Policy:
    """Validate a policy, raising on any issue.

    Returns:
        The policy unchanged.

    Raises:
        PolicyValidationError: If any issue is found.
    """
    issues = validate_policy(policy, subject_schema, resource_schema)
    if issues:
        raise PolicyValidationError(issues)
    return policy
