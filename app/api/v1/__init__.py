"""API v1: router aggregating all endpoint modules."""

from app.api.v1.router import api_router

__all__ = ["api_router"]
