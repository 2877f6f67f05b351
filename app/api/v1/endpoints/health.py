"""Health check endpoint. Liveness has no dependencies; readiness checks the Firebase clients."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from app.infrastructure.firebase.client import get_firestore_client, get_identity_client
from app.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Not ready (Firebase not configured)", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 if both Firebase clients are initialized; 503 otherwise."""
    missing = []
    if get_firestore_client() is None:
        missing.append("Firestore")
    if get_identity_client() is None:
        missing.append("identity provider")
    if not missing:
        return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(
            status="not_ready",
            message=f"{' and '.join(missing)} not configured",
        ).model_dump(),
    )
