"""Identity-provider hook API schemas."""

from pydantic import BaseModel, Field


class AccountCreatedEvent(BaseModel):
    """Body of the account-created hook sent by the identity provider."""

    uid: str = Field(..., min_length=1)
    email: str | None = None


class AccountCreatedAck(BaseModel):
    """Which terminal state the bootstrap handler reached."""

    uid: str
    outcome: str
