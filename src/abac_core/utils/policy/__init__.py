"""Entitlement file I/O.

Kept out of pdp/ so the evaluator stays free of file access.
"""

from abac_core.utils.policy.entitlement_helpers import (
    compute_entitlements_checksum,
    entitlements_exist,
    get_entitlements_path,
    load_entitlements,
    save_entitlements,
    validate_entitlements,
)

__all__ = [
    "compute_entitlements_checksum",
    "entitlements_exist",
    "get_entitlements_path",
    "load_entitlements",
    "save_entitlements",
    "validate_entitlements",
]
