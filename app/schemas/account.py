"""Account lifecycle API schemas.

Request fields are untyped: missing or wrongly-typed values reach the
service, which checks the caller first and then rejects bad input with
INVALID_ARGUMENT before any side effect.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class BusinessOperatorCreateRequest(BaseModel):
    """Request body for POST /accounts/business-operators."""

    name: Any = Field(default=None, description="Business (tenant) name")
    username: Any = Field(
        default=None,
        description="Login name: at least 3 of [a-zA-Z0-9_.-]",
    )
    password: Any = Field(default=None, description="Password (min 6 characters)")


class ContentManagerCreateRequest(BaseModel):
    """Request body for POST /accounts/content-managers."""

    email: Any = None
    password: Any = Field(default=None, description="Password (min 6 characters)")


class SalesAgentCreateRequest(BaseModel):
    """Request body for POST /accounts/sales-agents."""

    model_config = ConfigDict(populate_by_name=True)

    email: Any = None
    password: Any = Field(default=None, description="Password (min 6 characters)")
    display_name: Any = Field(default=None, alias="displayName")


class PromoteRoleRequest(BaseModel):
    """Request body for POST /accounts/principals/{uid}/role."""

    role: Any = Field(
        default=None,
        description="admin, content_manager, business_operator, sales_agent or standard_user",
    )


class AccountUidResponse(BaseModel):
    """uid of the created, deleted or blocked account."""

    uid: str


class PromoteRoleResponse(BaseModel):
    success: bool
