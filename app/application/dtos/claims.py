"""Claim bundle: the authorization attributes attached to a principal's session."""

from dataclasses import dataclass
from typing import Any

from app.application.dtos.policy import Caller
from app.domain.enums import Role


@dataclass(frozen=True)
class ClaimBundle:
    """Role and optional scope reference for one account.

    Stored on the identity-provider account as custom claims
    ({"role": ..., "scopeRef": ...}) and carried, signed, in session tokens.
    """

    uid: str
    role: Role
    scope_ref: str | None = None

    def custom_claims(self) -> dict[str, Any]:
        """Return the custom-claims object written to the provider account."""
        claims: dict[str, Any] = {"role": self.role.value}
        if self.scope_ref:
            claims["scopeRef"] = self.scope_ref
        return claims

    @classmethod
    def from_custom_claims(
        cls, uid: str, claims: dict[str, Any] | None
    ) -> "ClaimBundle | None":
        """Build a bundle from provider custom claims; None if no valid role is present."""
        role = Role.parse((claims or {}).get("role"))
        if role is None:
            return None
        scope_ref = (claims or {}).get("scopeRef")
        return cls(
            uid=uid,
            role=role,
            scope_ref=scope_ref if isinstance(scope_ref, str) else None,
        )

    def to_caller(self) -> Caller:
        return Caller(uid=self.uid, role=self.role, scope_ref=self.scope_ref)
