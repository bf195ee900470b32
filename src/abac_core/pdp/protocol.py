"""Protocol definition for policy sources.

A policy source maps (subject, resource type, action, requires_resource)
to the ordered condition trees that could grant the action. Storage,
caching and authoring live behind this interface; the access control
façade only awaits it.

Implementations do not inherit from our code (structural subtyping).
A plain async function with the right signature qualifies:

    async def get_conditions(subject, resource_type, action, requires_resource):
        rows = await db.fetch_policies(resource_type, action, requires_resource)
        return [row.conditions for row in rows]

See pdp/source.py for the built-in entitlement-backed source.
"""

from __future__ import annotations

__all__ = [
    "PolicySource",
]

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from abac_core.pdp.condition import GroupCondition, LeafCondition


@runtime_checkable
class PolicySource(Protocol):
    """Protocol for policy sources.

    Contract:
    - Called with exactly four positional arguments
    - Returns the applicable condition trees in evaluation order; an empty
      sequence means no policy covers the request (deny + diagnostic)
    - May raise; any exception is treated as a deny (fail-closed)
    - Timeouts and cancellation are the source's own responsibility

    Thread-safety:
    - May be awaited concurrently for different subjects and actions
    """

    async def __call__(
        self,
        subject: Any,
        resource_type: str,
        action: str,
        requires_resource: bool,
    ) -> Sequence["GroupCondition | LeafCondition | Mapping[str, Any]"]:
        """Look up the condition trees for one access check.

        Args:
            subject: The requesting principal, as passed to can().
            resource_type: Resource discriminant being accessed.
            action: Action name being checked.
            requires_resource: True if a concrete resource was supplied.

        Returns:
            Ordered condition trees (parsed or raw mappings), possibly empty.
        """
        ...
