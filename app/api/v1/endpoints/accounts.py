"""Account lifecycle API: create, delete, block and re-role principals.

Admin only. Role and authentication checks happen in AccountLifecycleService
so a missing session surfaces as UNAUTHENTICATED and a non-admin session as
PERMISSION_DENIED, both before any side effect.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_account_lifecycle_service, get_current_caller
from app.application.dtos.policy import Caller
from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.core.limiter import limit_writes
from app.schemas.account import (
    AccountUidResponse,
    BusinessOperatorCreateRequest,
    ContentManagerCreateRequest,
    PromoteRoleRequest,
    PromoteRoleResponse,
    SalesAgentCreateRequest,
)

router = APIRouter()

CallerDep = Annotated[Caller, Depends(get_current_caller)]
LifecycleDep = Annotated[AccountLifecycleService, Depends(get_account_lifecycle_service)]


@router.post("/business-operators", response_model=AccountUidResponse, status_code=201)
@limit_writes
async def create_business_operator(
    request: Request,
    body: BusinessOperatorCreateRequest,
    caller: CallerDep,
    service: LifecycleDep,
):
    """Create an operator login, its principal and its business tenant."""
    uid = await service.create_business_operator(
        caller, body.name, body.username, body.password
    )
    return AccountUidResponse(uid=uid)


@router.delete("/business-operators/{uid}", response_model=AccountUidResponse)
async def delete_business_operator(uid: str, caller: CallerDep, service: LifecycleDep):
    """Delete the operator login, principal and tenant. Safe to repeat."""
    return AccountUidResponse(uid=await service.delete_business_operator(caller, uid))


@router.post("/content-managers", response_model=AccountUidResponse, status_code=201)
@limit_writes
async def create_content_manager(
    request: Request,
    body: ContentManagerCreateRequest,
    caller: CallerDep,
    service: LifecycleDep,
):
    uid = await service.create_content_manager(caller, body.email, body.password)
    return AccountUidResponse(uid=uid)


@router.delete("/content-managers/{uid}", response_model=AccountUidResponse)
async def delete_content_manager(uid: str, caller: CallerDep, service: LifecycleDep):
    return AccountUidResponse(uid=await service.delete_content_manager(caller, uid))


@router.post("/content-managers/{uid}/block", response_model=AccountUidResponse)
async def block_content_manager(uid: str, caller: CallerDep, service: LifecycleDep):
    """Disable sign-in and mark the principal blocked (records are kept)."""
    return AccountUidResponse(uid=await service.block_content_manager(caller, uid))


@router.post("/sales-agents", response_model=AccountUidResponse, status_code=201)
@limit_writes
async def create_sales_agent(
    request: Request,
    body: SalesAgentCreateRequest,
    caller: CallerDep,
    service: LifecycleDep,
):
    uid = await service.create_sales_agent(
        caller, body.email, body.password, body.display_name
    )
    return AccountUidResponse(uid=uid)


@router.delete("/sales-agents/{uid}", response_model=AccountUidResponse)
async def delete_sales_agent(uid: str, caller: CallerDep, service: LifecycleDep):
    """Delete a sales agent; 400 FAILED_PRECONDITION if the account has another role."""
    return AccountUidResponse(uid=await service.delete_sales_agent(caller, uid))


@router.post("/principals/{uid}/role", response_model=PromoteRoleResponse)
async def promote_role(
    uid: str,
    body: PromoteRoleRequest,
    caller: CallerDep,
    service: LifecycleDep,
):
    """Set a principal's role. The principal sees it after refreshing its session."""
    return PromoteRoleResponse(success=await service.promote_role(caller, uid, body.role))
