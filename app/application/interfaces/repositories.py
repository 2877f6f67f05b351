"""Repository interfaces (ports) for the application layer.

Protocols define the persistence contracts the services need; Firestore
implementations live in app.infrastructure.firebase.repositories.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.principal import PrincipalResult
    from app.domain.entities.principal import BusinessTenantEntity, PrincipalEntity
    from app.domain.enums import Collection, Role


class IPrincipalRepository(Protocol):
    """principals/{uid} and, for business operators, tenants/{uid}.

    Multi-document writes go through one atomic batch.
    """

    async def get(self, uid: str) -> PrincipalResult | None:
        """Return the principal document or None."""

    async def save(self, principal: PrincipalEntity) -> None:
        """Create or overwrite principals/{uid}."""

    async def save_with_tenant(
        self, principal: PrincipalEntity, tenant: BusinessTenantEntity
    ) -> None:
        """Write the principal and its tenant in a single batch."""

    async def delete(self, uid: str, *, with_tenant: bool = False) -> None:
        """Delete principals/{uid} (and tenants/{uid}) in a single batch. Idempotent."""

    async def update_role(
        self, uid: str, role: Role, scope_ref: str | None
    ) -> bool:
        """Set role and scope reference; return False if the principal does not exist."""

    async def mark_blocked(self, uid: str) -> bool:
        """Set blocked=true; return False if the principal does not exist."""


class IDocumentStore(Protocol):
    """Generic document access used by the policy-enforcing gateway."""

    async def get(self, collection: Collection, doc_id: str) -> dict[str, Any] | None:
        """Return document data or None."""

    async def create(self, collection: Collection, data: dict[str, Any]) -> str:
        """Create a document with a generated id; return the id."""

    async def update(
        self, collection: Collection, doc_id: str, patch: dict[str, Any]
    ) -> bool:
        """Merge patch into an existing document; return False if it does not exist."""

    async def delete(self, collection: Collection, doc_id: str) -> None:
        """Delete the document. Idempotent."""
