"""Domain enumerations for the authorization layer.

Closed sets used as dispatch keys: principal roles, document operations
and the document-store collections the policy engine knows about.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class Role(_ValuesMixin, str, Enum):
    """Principal role. Exactly one per principal, carried in the claim bundle
    and mirrored on the principals document.
    """

    ADMIN = "admin"
    CONTENT_MANAGER = "content_manager"
    BUSINESS_OPERATOR = "business_operator"
    SALES_AGENT = "sales_agent"
    STANDARD_USER = "standard_user"

    @classmethod
    def parse(cls, value: object) -> "Role | None":
        """Return the Role for value, or None if it is not a valid role string."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# Roles that may manage content without ownership checks.
ELEVATED_ROLES = frozenset({Role.ADMIN, Role.CONTENT_MANAGER})

DEFAULT_ROLE = Role.STANDARD_USER


class Operation(_ValuesMixin, str, Enum):
    """Document operation being authorized."""

    CREATE = "create"
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"


class Collection(_ValuesMixin, str, Enum):
    """Document-store collections (names are the persisted collection ids)."""

    PRINCIPALS = "principals"
    TENANTS = "tenants"
    MANAGED_RESOURCES = "managedResources"
    ANALYTICS_EVENTS = "analyticsEvents"
    ASSETS = "assets"
    TRIPS = "trips"
