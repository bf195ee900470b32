"""Decision enum for access check outcomes.

Checkers return plain bools; Decision is the named form used in
logs and CLI output.
"""

from __future__ import annotations

__all__ = ["Decision"]

from enum import Enum


class Decision(str, Enum):
    """Access decision outcome.

    Inherits from str for easy serialization and comparison.

    Attributes:
        ALLOW: At least one policy granted access.
        DENY: No policy granted access, none applied, or a fault occurred.
    """

    ALLOW = "allow"
    DENY = "deny"

    @classmethod
    def from_allowed(cls, allowed: bool) -> "Decision":
        """Map a checker result to a Decision."""
        return cls.ALLOW if allowed else cls.DENY
