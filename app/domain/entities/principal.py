"""Principal and business-tenant domain entities.

Represent accounts under management and the tenants business operators act
for, independent of persistence.
"""

from dataclasses import dataclass, field
from datetime import datetime

from app.domain.enums import Role
from app.domain.exceptions import ValidationException
from app.domain.value_objects.core import ScopeRef


@dataclass
class PrincipalEntity:
    """An account managed by the lifecycle service.

    The role here mirrors the role in the account's claim bundle; both are
    written by the lifecycle service or the bootstrap handler only.
    """

    uid: str
    role: Role
    email: str | None = None
    resource_scope_ref: str | None = None
    blocked: bool = False
    display_name: str | None = None
    username: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Validate principal rules. Raises ValidationException if invalid."""
        if not self.uid:
            raise ValidationException("Principal uid is required", field="uid")
        if self.role == Role.BUSINESS_OPERATOR:
            scope = ScopeRef.parse(self.resource_scope_ref)
            if scope is None or scope.tenant_id != self.uid:
                raise ValidationException(
                    "A business operator must be scoped to the tenant keyed by its uid",
                    field="resource_scope_ref",
                )

    @property
    def scope(self) -> ScopeRef | None:
        return ScopeRef.parse(self.resource_scope_ref)


@dataclass
class BusinessTenantEntity:
    """A business whose associated principals may edit the resources it owns.

    The tenant id equals the owning operator's uid. associated_user_ids always
    contains the owner.
    """

    id: str
    name: str
    owner_uid: str
    associated_user_ids: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if self.owner_uid and self.owner_uid not in self.associated_user_ids:
            self.associated_user_ids.insert(0, self.owner_uid)
        self.validate()

    def validate(self) -> None:
        """Validate tenant rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Tenant id is required", field="id")
        if not self.name or not self.name.strip():
            raise ValidationException("name must be a non-empty string.", field="name")
        if self.id != self.owner_uid:
            raise ValidationException(
                "Tenant id must equal the owning operator's uid", field="id"
            )

    def has_member(self, uid: str | None) -> bool:
        """Return True if uid may edit resources owned by this tenant."""
        return bool(uid) and uid in self.associated_user_ids
