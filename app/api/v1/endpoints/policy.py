"""Policy API: publishes the operator-editable field list for client forms."""

from fastapi import APIRouter

from app.domain.field_policy import (
    OPERATOR_EDITABLE_FIELDS,
    OPERATOR_EDITABLE_FIELDS_VERSION,
    OPERATOR_PROTECTED_FIELDS,
)
from app.schemas.policy import EditableFieldsResponse

router = APIRouter()


@router.get("/editable-fields", response_model=EditableFieldsResponse)
def get_editable_fields() -> EditableFieldsResponse:
    """Fields a business operator may change on resources its tenant owns."""
    return EditableFieldsResponse(
        version=OPERATOR_EDITABLE_FIELDS_VERSION,
        fields=sorted(OPERATOR_EDITABLE_FIELDS),
        protected_fields=sorted(OPERATOR_PROTECTED_FIELDS),
    )
