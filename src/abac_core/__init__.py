"""abac-core: attribute-based access control decisions over condition trees.

Quick start:
    from abac_core import AccessControl

    async def get_conditions(subject, resource_type, action, requires_resource):
        return [{"left": "subject.id", "op": "eq", "right": "resource.ownerId"}]

    access = AccessControl(["read", "update"], get_conditions)
    allowed = await access.can({"id": 5}).read({"type": "doc", "ownerId": 5})
"""

from abac_core.context import AuthContext, BaseResource, ResourceMap, build_auth_context
from abac_core.exceptions import (
    AccessControlError,
    ConfigurationError,
    EvaluationFailure,
    NoPolicyFound,
    PolicySourceFailure,
    PolicyValidationError,
    UnknownActionError,
)
from abac_core.pdp import (
    AccessControl,
    ConditionTree,
    Decision,
    Entitlement,
    EntitlementPolicySource,
    EntitlementSet,
    GroupCondition,
    LeafCondition,
    Policy,
    PolicySource,
    evaluate_condition_tree,
    parse_condition_tree,
)
from abac_core.telemetry import DiagnosticsSink, LoggingDiagnostics

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Façade
    "AccessControl",
    "Decision",
    # Condition trees
    "ConditionTree",
    "GroupCondition",
    "LeafCondition",
    "evaluate_condition_tree",
    "parse_condition_tree",
    # Context
    "AuthContext",
    "BaseResource",
    "ResourceMap",
    "build_auth_context",
    # Policies
    "Entitlement",
    "EntitlementPolicySource",
    "EntitlementSet",
    "Policy",
    "PolicySource",
    # Diagnostics
    "DiagnosticsSink",
    "LoggingDiagnostics",
    # Errors
    "AccessControlError",
    "ConfigurationError",
    "EvaluationFailure",
    "NoPolicyFound",
    "PolicySourceFailure",
    "PolicyValidationError",
    "UnknownActionError",
]
