"""DTOs for principal, tenant and identity-provider account reads."""

from dataclasses import dataclass, field
from typing import Any

from app.domain.enums import Role


@dataclass(frozen=True)
class PrincipalResult:
    """Principal read-model (principals/{uid})."""

    uid: str
    role: Role | None
    email: str | None = None
    resource_scope_ref: str | None = None
    blocked: bool = False
    display_name: str | None = None


@dataclass(frozen=True)
class BusinessTenantResult:
    """Tenant read-model (tenants/{id}) as resolved by the tenant directory."""

    id: str
    name: str
    owner_uid: str
    associated_user_ids: frozenset[str] = frozenset()

    def has_member(self, uid: str | None) -> bool:
        return bool(uid) and uid in self.associated_user_ids


@dataclass(frozen=True)
class IdentityAccount:
    """Identity-provider account as returned by an account lookup."""

    uid: str
    email: str | None = None
    display_name: str | None = None
    disabled: bool = False
    custom_claims: dict[str, Any] = field(default_factory=dict)
