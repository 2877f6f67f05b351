"""DTOs for policy evaluation: who is calling and what the engine decided."""

from dataclasses import dataclass

from app.domain.enums import Role


@dataclass(frozen=True)
class Caller:
    """Identity presented with a request, taken from a pre-verified claim bundle.

    uid is None for anonymous callers. role may be None for an authenticated
    account whose claims have not been provisioned yet.
    """

    uid: str | None = None
    role: Role | None = None
    scope_ref: str | None = None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()

    @property
    def is_authenticated(self) -> bool:
        return bool(self.uid)

    def has_role(self, *roles: Role) -> bool:
        """Return True if the caller is authenticated and holds one of roles."""
        return self.is_authenticated and self.role in roles


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy evaluation. Truthy iff access is allowed."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed
