"""Policy API schemas."""

from pydantic import BaseModel, Field


class EditableFieldsResponse(BaseModel):
    """Fields a business operator may change on a resource its tenant owns."""

    version: int = Field(..., description="Bumped whenever the field set changes")
    fields: list[str]
    protected_fields: list[str] = Field(
        default_factory=list,
        description="Fields that are never operator-editable",
    )
