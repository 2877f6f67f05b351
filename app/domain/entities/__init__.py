"""Domain entities.

Pure domain models; no persistence concerns.
"""

from app.domain.entities.principal import BusinessTenantEntity, PrincipalEntity

__all__ = [
    "BusinessTenantEntity",
    "PrincipalEntity",
]
