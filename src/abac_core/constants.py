"""Application-wide constants for abac-core.

Constants that define evaluation behavior.
For user-configurable settings per deployment, see config.py.
"""

__all__ = [
    # Application identity
    "APP_NAME",
    # Condition tree vocabulary
    "OPERATORS",
    "JOINS",
    "PATH_SEPARATOR",
    "SUBJECT_PATH_PREFIX",
    "RESOURCE_PATH_PREFIX",
    # Context keys
    "SUBJECT_KEY",
    "RESOURCE_KEY",
    "RESOURCE_TYPE_FIELD",
    # Entitlement files
    "ENTITLEMENTS_FILENAME",
    "INITIAL_VERSION",
]

# =============================================================================
# Application identity
# =============================================================================

APP_NAME = "abac-core"

# =============================================================================
# Condition tree vocabulary
# =============================================================================

# Leaf comparison operators, in documentation order
OPERATORS: tuple[str, ...] = ("eq", "neq", "gt", "lt", "gte", "lte")

# Group joins
JOINS: tuple[str, ...] = ("and", "or")

PATH_SEPARATOR = "."

# A right-hand string is a path only when it starts with one of these.
# The resource prefix only counts while a resource is in the context.
SUBJECT_PATH_PREFIX = "subject."
RESOURCE_PATH_PREFIX = "resource."

# =============================================================================
# Context keys
# =============================================================================

SUBJECT_KEY = "subject"
RESOURCE_KEY = "resource"

# Discriminant carried by every resource variant
RESOURCE_TYPE_FIELD = "type"

# =============================================================================
# Entitlement files
# =============================================================================

ENTITLEMENTS_FILENAME = "entitlements.json"
INITIAL_VERSION = "1"
