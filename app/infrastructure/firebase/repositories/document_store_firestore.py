"""Firestore-backed generic document store (implements IDocumentStore)."""

from __future__ import annotations

from typing import Any

from app.domain.enums import Collection
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.shared.utils.generators import generate_cuid


class FirestoreDocumentStore:
    """Plain CRUD over any known collection; authorization happens before these calls."""

    def __init__(self, client: FirestoreRESTClient) -> None:
        self._client = client

    async def get(self, collection: Collection, doc_id: str) -> dict[str, Any] | None:
        doc = await self._client.collection(collection.value).document(doc_id).get()
        return doc.to_dict() if doc else None

    async def create(self, collection: Collection, data: dict[str, Any]) -> str:
        """Create with a generated id (fails if the id is somehow taken)."""
        doc_id = generate_cuid()
        await self._client.collection(collection.value).create(doc_id, data)
        return doc_id

    async def update(
        self, collection: Collection, doc_id: str, patch: dict[str, Any]
    ) -> bool:
        return await self._client.collection(collection.value).document(doc_id).update(patch)

    async def delete(self, collection: Collection, doc_id: str) -> None:
        await self._client.collection(collection.value).document(doc_id).delete()
