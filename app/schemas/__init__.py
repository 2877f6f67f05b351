"""Pydantic request/response schemas for the API."""

from app.schemas.account import (
    AccountUidResponse,
    BusinessOperatorCreateRequest,
    ContentManagerCreateRequest,
    PromoteRoleRequest,
    PromoteRoleResponse,
    SalesAgentCreateRequest,
)
from app.schemas.auth import SessionRequest, SessionResponse
from app.schemas.document import DocumentResponse
from app.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from app.schemas.hook import AccountCreatedAck, AccountCreatedEvent
from app.schemas.policy import EditableFieldsResponse

__all__ = [
    "AccountCreatedAck",
    "AccountCreatedEvent",
    "AccountUidResponse",
    "BusinessOperatorCreateRequest",
    "ContentManagerCreateRequest",
    "DocumentResponse",
    "EditableFieldsResponse",
    "HealthResponse",
    "PromoteRoleRequest",
    "PromoteRoleResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "SalesAgentCreateRequest",
    "SessionRequest",
    "SessionResponse",
]
