"""Firestore-backed principal repository (implements IPrincipalRepository)."""

from __future__ import annotations

from typing import Any

from app.application.dtos.principal import PrincipalResult
from app.domain.entities.principal import BusinessTenantEntity, PrincipalEntity
from app.domain.enums import Role
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.collections import (
    COLLECTION_PRINCIPALS,
    COLLECTION_TENANTS,
)
from app.shared.utils.datetime import utc_now


def principal_to_document(principal: PrincipalEntity) -> dict[str, Any]:
    """Return the principals/{uid} document body (camelCase, shared with front-ends)."""
    now = utc_now()
    data: dict[str, Any] = {
        "uid": principal.uid,
        "email": principal.email,
        "role": principal.role.value,
        "resourceScopeRef": principal.resource_scope_ref,
        "blocked": principal.blocked,
        "createdAt": principal.created_at or now,
        "updatedAt": principal.updated_at or now,
    }
    if principal.display_name is not None:
        data["displayName"] = principal.display_name
    if principal.username is not None:
        data["username"] = principal.username
    return data


def tenant_to_document(tenant: BusinessTenantEntity) -> dict[str, Any]:
    """Return the tenants/{id} document body."""
    now = utc_now()
    return {
        "id": tenant.id,
        "name": tenant.name,
        "ownerUid": tenant.owner_uid,
        "associatedUserIds": list(tenant.associated_user_ids),
        "createdAt": tenant.created_at or now,
        "updatedAt": tenant.updated_at or now,
    }


class FirestorePrincipalRepository:
    """Principal repository using Firestore; multi-document writes are batched."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client
        self._coll = client.collection(COLLECTION_PRINCIPALS)

    def _to_result(self, doc_id: str, data: dict) -> PrincipalResult:
        return PrincipalResult(
            uid=doc_id,
            role=Role.parse(data.get("role")),
            email=data.get("email"),
            resource_scope_ref=data.get("resourceScopeRef"),
            blocked=bool(data.get("blocked", False)),
            display_name=data.get("displayName"),
        )

    async def get(self, uid: str) -> PrincipalResult | None:
        """Return principal by uid."""
        doc = await self._coll.document(uid).get()
        if not doc:
            return None
        return self._to_result(doc.id, doc.to_dict())

    async def save(self, principal: PrincipalEntity) -> None:
        """Create or overwrite principals/{uid}."""
        await self._coll.document(principal.uid).set(principal_to_document(principal))

    async def save_with_tenant(
        self, principal: PrincipalEntity, tenant: BusinessTenantEntity
    ) -> None:
        """Write principals/{uid} and tenants/{uid} in one atomic batch."""
        await self._client.batch_write([
            {
                "path": f"{COLLECTION_PRINCIPALS}/{principal.uid}",
                "data": principal_to_document(principal),
            },
            {
                "path": f"{COLLECTION_TENANTS}/{tenant.id}",
                "data": tenant_to_document(tenant),
            },
        ])

    async def delete(self, uid: str, *, with_tenant: bool = False) -> None:
        """Delete principals/{uid} (and tenants/{uid}) in one batch. Missing docs are fine."""
        writes: list[dict[str, Any]] = [
            {"path": f"{COLLECTION_PRINCIPALS}/{uid}", "delete": True},
        ]
        if with_tenant:
            writes.append({"path": f"{COLLECTION_TENANTS}/{uid}", "delete": True})
        await self._client.batch_write(writes)

    async def update_role(
        self, uid: str, role: Role, scope_ref: str | None
    ) -> bool:
        """Set role and resourceScopeRef; False if the principal does not exist."""
        return await self._coll.document(uid).update({
            "role": role.value,
            "resourceScopeRef": scope_ref,
            "updatedAt": utc_now(),
        })

    async def mark_blocked(self, uid: str) -> bool:
        """Set blocked=true; False if the principal does not exist."""
        return await self._coll.document(uid).update({
            "blocked": True,
            "updatedAt": utc_now(),
        })
