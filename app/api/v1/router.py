"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from app.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from app.api.v1.endpoints import accounts, auth, documents, health, hooks, policy

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(accounts.router, prefix="/accounts", tags=["accounts"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(policy.router, prefix="/policy", tags=["policy"])
api_router.include_router(hooks.router, prefix="/hooks", tags=["hooks"])
