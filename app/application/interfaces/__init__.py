"""Application ports: repository and service Protocols."""

from app.application.interfaces.repositories import IDocumentStore, IPrincipalRepository
from app.application.interfaces.services import (
    AccountExistsError,
    AccountNotFoundError,
    IClaimCodec,
    IdentityProviderError,
    IIdentityProvider,
    InvalidIdTokenError,
    ITenantDirectory,
)

__all__ = [
    "AccountExistsError",
    "AccountNotFoundError",
    "IClaimCodec",
    "IDocumentStore",
    "IIdentityProvider",
    "IPrincipalRepository",
    "ITenantDirectory",
    "IdentityProviderError",
    "InvalidIdTokenError",
]
