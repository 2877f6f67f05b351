"""Policy-enforced document access.

Every operation loads the current snapshot, asks the policy engine, and only
then touches the store. The authorization read and the write are not one
transaction, so tenant membership may change in between.
"""

from __future__ import annotations

import logging
from typing import Any

from app.application.dtos.policy import Caller
from app.application.interfaces.repositories import IDocumentStore
from app.application.services.policy_engine import PolicyEngine
from app.domain.enums import Collection, Operation
from app.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from app.shared.utils.datetime import utc_now
from app.shared.utils.sanitization import InputSanitizer

logger = logging.getLogger(__name__)


def _collection(name: str, op: Operation) -> Collection:
    try:
        return Collection(name)
    except ValueError:
        raise AuthorizationException(
            resource=name, action=op.value, reason=f"unknown collection: {name}"
        ) from None


def _doc_id(doc_id: str) -> str:
    try:
        return InputSanitizer.sanitize_identifier(doc_id)
    except ValueError as e:
        raise ValidationException(str(e), field="doc_id") from e


def _body(data: Any, *, require_fields: bool = True) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise ValidationException("Document body must be a JSON object", field="data")
    if require_fields and not data:
        raise ValidationException("Document body must not be empty", field="data")
    try:
        InputSanitizer.check_field_names(data)
        return InputSanitizer.resolve_server_values(data, utc_now())
    except ValueError as e:
        raise ValidationException(str(e), field="data") from e


class DocumentAccessService:
    """CRUD over the document store, gated by PolicyEngine."""

    def __init__(self, store: IDocumentStore, policy: PolicyEngine) -> None:
        self.store = store
        self.policy = policy

    async def get(self, caller: Caller, collection: str, doc_id: str) -> dict[str, Any]:
        """Return the document if the caller may read it.

        Raises:
            AuthorizationException: Policy denied the read.
            ResourceNotFoundException: Read allowed but the document is absent.
        """
        coll = _collection(collection, Operation.READ)
        doc_id = _doc_id(doc_id)
        current = await self.store.get(coll, doc_id)
        await self.policy.require(
            caller, Operation.READ, coll, doc_id=doc_id, current=current
        )
        if current is None:
            raise ResourceNotFoundException(coll.value, doc_id)
        return current

    async def create(
        self, caller: Caller, collection: str, data: Any
    ) -> tuple[str, dict[str, Any]]:
        """Create a document with a generated id; return (id, stored data)."""
        coll = _collection(collection, Operation.CREATE)
        proposed = _body(data)
        await self.policy.require(caller, Operation.CREATE, coll, proposed=proposed)
        doc_id = await self.store.create(coll, proposed)
        logger.debug("Created %s/%s", coll.value, doc_id)
        return doc_id, proposed

    async def update(
        self, caller: Caller, collection: str, doc_id: str, patch: Any
    ) -> dict[str, Any]:
        """Merge patch into the document if the caller may change every affected field."""
        coll = _collection(collection, Operation.UPDATE)
        doc_id = _doc_id(doc_id)
        proposed = _body(patch)
        current = await self.store.get(coll, doc_id)
        await self.policy.require(
            caller,
            Operation.UPDATE,
            coll,
            doc_id=doc_id,
            current=current,
            proposed=proposed,
        )
        if current is None or not await self.store.update(coll, doc_id, proposed):
            raise ResourceNotFoundException(coll.value, doc_id)
        return {**current, **proposed}

    async def delete(self, caller: Caller, collection: str, doc_id: str) -> None:
        coll = _collection(collection, Operation.DELETE)
        doc_id = _doc_id(doc_id)
        current = await self.store.get(coll, doc_id)
        await self.policy.require(
            caller, Operation.DELETE, coll, doc_id=doc_id, current=current
        )
        if current is None:
            raise ResourceNotFoundException(coll.value, doc_id)
        await self.store.delete(coll, doc_id)
        logger.debug("Deleted %s/%s", coll.value, doc_id)
