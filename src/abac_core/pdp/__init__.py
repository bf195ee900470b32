"""Policy Decision Point (PDP) - condition trees and access decisions.

This module evaluates condition trees against an AuthContext and folds the
results for one access check:

- context/: Builds the AuthContext (subject, optional resource)
- pdp/ (this module): Parses and evaluates condition trees, decides access
- policy sources (external or pdp/source.py): supply the trees

The evaluator is stateless and side-effect free. The only I/O in a check is
the awaited policy source call.

Structure:
    decision.py       - Decision enum (ALLOW/DENY)
    condition.py      - Condition tree models (LeafCondition, GroupCondition)
    evaluator.py      - Pure tree walker with path resolution and coercion
    policy.py         - Policy, Entitlement, EntitlementSet models
    protocol.py       - PolicySource protocol
    source.py         - EntitlementPolicySource (in-memory source)
    validation.py     - Schema-driven path validation for loaded policies
    access_control.py - AccessControl façade (can → checkers)

Entitlement file I/O is in utils/policy/entitlement_helpers.py.
"""

from abac_core.pdp.access_control import AccessControl, ActionCheckers, Checker
from abac_core.pdp.condition import (
    ConditionTree,
    GroupCondition,
    LeafCondition,
    is_path_reference,
    parse_condition_tree,
)
from abac_core.pdp.decision import Decision
from abac_core.pdp.evaluator import UNDEFINED, evaluate_condition_tree, resolve_path
from abac_core.pdp.policy import Entitlement, EntitlementSet, Policy
from abac_core.pdp.protocol import PolicySource
from abac_core.pdp.source import EntitlementPolicySource
from abac_core.pdp.validation import (
    ValidationIssue,
    ensure_valid_policy,
    validate_condition_tree,
    validate_policy,
)

__all__ = [
    # Decision
    "Decision",
    # Façade
    "AccessControl",
    "ActionCheckers",
    "Checker",
    # Condition trees
    "ConditionTree",
    "GroupCondition",
    "LeafCondition",
    "is_path_reference",
    "parse_condition_tree",
    # Evaluator
    "UNDEFINED",
    "evaluate_condition_tree",
    "resolve_path",
    # Policy models
    "Entitlement",
    "EntitlementSet",
    "Policy",
    # Policy sources
    "EntitlementPolicySource",
    "PolicySource",
    # Validation
    "ValidationIssue",
    "ensure_valid_policy",
    "validate_condition_tree",
    "validate_policy",
]
