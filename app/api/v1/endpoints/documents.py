"""Document gateway API: CRUD on platform collections, gated by the policy engine.

Denied operations return 403 with the policy reason in details. Allowed
operations on a missing document return 404.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, Response

from app.api.v1.dependencies import get_current_caller, get_document_access_service
from app.application.dtos.policy import Caller
from app.application.services.document_access_service import DocumentAccessService
from app.core.limiter import limit_writes
from app.schemas.document import DocumentResponse

router = APIRouter()

CallerDep = Annotated[Caller, Depends(get_current_caller)]
GatewayDep = Annotated[DocumentAccessService, Depends(get_document_access_service)]


@router.get("/{collection}/{doc_id}", response_model=DocumentResponse)
async def get_document(
    collection: str, doc_id: str, caller: CallerDep, gateway: GatewayDep
):
    data = await gateway.get(caller, collection, doc_id)
    return DocumentResponse(id=doc_id, collection=collection, data=data)


@router.post("/{collection}", response_model=DocumentResponse, status_code=201)
@limit_writes
async def create_document(
    request: Request,
    collection: str,
    caller: CallerDep,
    gateway: GatewayDep,
    data: Annotated[Any, Body()],
):
    """Create a document with a generated id. Anonymous callers may create analytics events."""
    doc_id, stored = await gateway.create(caller, collection, data)
    return DocumentResponse(id=doc_id, collection=collection, data=stored)


@router.patch("/{collection}/{doc_id}", response_model=DocumentResponse)
@limit_writes
async def update_document(
    request: Request,
    collection: str,
    doc_id: str,
    caller: CallerDep,
    gateway: GatewayDep,
    patch: Annotated[Any, Body()],
):
    """Merge top-level fields into the document. One disallowed field rejects the whole patch."""
    merged = await gateway.update(caller, collection, doc_id, patch)
    return DocumentResponse(id=doc_id, collection=collection, data=merged)


@router.delete("/{collection}/{doc_id}", status_code=204)
async def delete_document(
    collection: str, doc_id: str, caller: CallerDep, gateway: GatewayDep
):
    await gateway.delete(caller, collection, doc_id)
    return Response(status_code=204)
