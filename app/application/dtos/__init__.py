"""Application DTOs (no persistence dependency)."""

from app.application.dtos.claims import ClaimBundle
from app.application.dtos.policy import Caller, Decision
from app.application.dtos.principal import (
    BusinessTenantResult,
    IdentityAccount,
    PrincipalResult,
)

__all__ = [
    "BusinessTenantResult",
    "Caller",
    "ClaimBundle",
    "Decision",
    "IdentityAccount",
    "PrincipalResult",
]
