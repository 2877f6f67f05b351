"""Firestore-backed tenant directory (implements ITenantDirectory).

Read-only: tenants are written together with their owning principal by
FirestorePrincipalRepository.save_with_tenant.
"""

from __future__ import annotations

from app.application.dtos.principal import BusinessTenantResult
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.collections import COLLECTION_TENANTS


class FirestoreTenantDirectory:
    """Resolves tenants/{id} and its membership set for policy scope checks."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_TENANTS)

    async def get_tenant(self, tenant_id: str) -> BusinessTenantResult | None:
        """Return tenant by id, or None if it does not exist."""
        if not tenant_id or "/" in tenant_id:
            return None
        doc = await self._coll.document(tenant_id).get()
        if not doc:
            return None
        d = doc.to_dict()
        members = d.get("associatedUserIds") or []
        return BusinessTenantResult(
            id=doc.id,
            name=d.get("name", ""),
            owner_uid=d.get("ownerUid", ""),
            associated_user_ids=frozenset(m for m in members if isinstance(m, str)),
        )
