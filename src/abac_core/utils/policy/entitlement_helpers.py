"""Entitlement loader - load and save entitlement files.

This module reads and writes entitlements.json, the on-disk form of an
EntitlementSet served by EntitlementPolicySource.

Features:
- Secure file permissions (0o700 for directory, 0o600 for file)
- Detailed validation error messages
- Optional schema validation of every policy against subject/resource models
- SHA256 checksum for integrity verification
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

from abac_core.constants import ENTITLEMENTS_FILENAME
from abac_core.exceptions import PolicyValidationError
from abac_core.pdp.policy import EntitlementSet
from abac_core.pdp.validation import ValidationIssue, validate_policy
from abac_core.telemetry.system.system_logger import get_system_logger
from abac_core.utils.file_helpers import (
    compute_file_checksum,
    get_app_dir,
    load_validated_json,
    write_json_atomic,
)

__all__ = [
    "compute_entitlements_checksum",
    "entitlements_exist",
    "get_entitlements_path",
    "load_entitlements",
    "save_entitlements",
    "validate_entitlements",
]


def get_entitlements_path() -> Path:
    """Get the default path to the entitlements file.

    Returns:
        Path to entitlements.json in the OS-appropriate config directory.
    """
    return get_app_dir() / ENTITLEMENTS_FILENAME


def compute_entitlements_checksum(path: Path) -> str:
    """Compute SHA256 checksum of an entitlements file.

    Returns:
        str: Checksum in format "sha256:<hex_digest>".
    """
    return compute_file_checksum(path)


def entitlements_exist(path: Path | None = None) -> bool:
    """Check if an entitlements file exists (default location if path is None)."""
    return (path or get_entitlements_path()).exists()


def validate_entitlements(
    entitlements: EntitlementSet,
    subject_schema: type[BaseModel],
    resource_schemas: Mapping[str, type[BaseModel]],
) -> list[ValidationIssue]:
    """Validate every policy in a set against subject/resource schemas.

    Args:
        entitlements: Set to validate.
        subject_schema: Model describing subject attributes.
        resource_schemas: Resource type → model (a ResourceMap works).

    Returns:
        Issues with locations like "entitlements.0.policies.read.conditions.left".
    """
    issues: list[ValidationIssue] = []
    for index, entitlement in enumerate(entitlements.entitlements):
        base = f"entitlements.{index}"
        resource_schema = resource_schemas.get(entitlement.resource_type)
        if resource_schema is None:
            issues.append(
                ValidationIssue(f"{base}.resource_type", f"Unknown resource type {entitlement.resource_type!r}")
            )
            continue
        for action, policy in entitlement.policies.items():
            prefix = f"{base}.policies.{action}.conditions"
            for issue in validate_policy(policy, subject_schema, resource_schema):
                location = f"{prefix}.{issue.location}" if issue.location else prefix
                issues.append(ValidationIssue(location, issue.message))
    return issues


def load_entitlements(
    path: Path | None = None,
    *,
    subject_schema: type[BaseModel] | None = None,
    resource_schemas: Mapping[str, type[BaseModel]] | None = None,
) -> EntitlementSet:
    """Load entitlements from file.

    When both schemas are given, every policy is validated once here so
    malformed trees never reach the evaluator.

    Args:
        path: Path to entitlements.json. If None, uses default location.
        subject_schema: Optional model describing subject attributes.
        resource_schemas: Optional resource type → model mapping.

    Returns:
        EntitlementSet loaded from file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file contains invalid JSON or schema.
        PolicyValidationError: If schema validation finds issues.
    """
    entitlements_path = path or get_entitlements_path()
    entitlements = load_validated_json(
        entitlements_path,
        EntitlementSet,
        file_type="entitlements",
        recovery_hint="Edit the entitlements file to fix the errors.",
    )

    if subject_schema is not None and resource_schemas is not None:
        issues = validate_entitlements(entitlements, subject_schema, resource_schemas)
        if issues:
            raise PolicyValidationError(issues)

    get_system_logger().debug(
        {
            "event": "entitlements_loaded",
            "message": f"Loaded {len(entitlements.entitlements)} entitlements from {entitlements_path}",
            "path": str(entitlements_path),
            "entitlement_count": len(entitlements.entitlements),
        }
    )
    return entitlements


def save_entitlements(entitlements: EntitlementSet, path: Path | None = None) -> None:
    """Save entitlements to file atomically.

    Args:
        entitlements: EntitlementSet to save.
        path: Path to save to. If None, uses default location.
    """
    write_json_atomic(entitlements.model_dump(mode="json"), path or get_entitlements_path())
