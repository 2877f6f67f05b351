"""Auth API schemas."""

from pydantic import BaseModel, Field


class SessionRequest(BaseModel):
    """Request body for POST /auth/session: exchange a provider ID token."""

    id_token: str = Field(..., min_length=1, description="Firebase ID token")


class SessionResponse(BaseModel):
    """Session token (signed claim bundle) and the claims it carries."""

    access_token: str
    token_type: str = "bearer"
    uid: str
    role: str
    scope_ref: str | None = None
