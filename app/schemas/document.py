"""Document gateway API schemas."""

from typing import Any

from pydantic import BaseModel, Field


class DocumentResponse(BaseModel):
    """A document and its id."""

    id: str
    collection: str
    data: dict[str, Any] = Field(default_factory=dict)
