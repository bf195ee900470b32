"""Context building for ABAC condition evaluation.

This module builds the AuthContext a condition tree is evaluated against:

- context/ (this module): Subject, resource variants, AuthContext
- pdp/: Condition trees, evaluator, access control façade

Structure:
    resource.py       - BaseResource, ResourceMap (ON WHAT)
    context.py        - AuthContext + builder (WHO + ON WHAT)
"""

from abac_core.context.context import AuthContext, Subject, build_auth_context, to_attributes
from abac_core.context.resource import (
    BaseResource,
    ResourceMap,
    ResourceRef,
    requires_resource,
    resource_type_of,
)

__all__ = [
    # Subject (WHO)
    "Subject",
    # Resource (ON WHAT)
    "BaseResource",
    "ResourceMap",
    "ResourceRef",
    "requires_resource",
    "resource_type_of",
    # Context
    "AuthContext",
    "build_auth_context",
    "to_attributes",
]
