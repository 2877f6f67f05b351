"""Presentation-layer dependency injection (composition root).

Provides FastAPI Depends() for the Firebase clients and application services.
All services are built from infrastructure implementations here; routes
depend only on these dependencies, not on infra directly.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.policy import Caller
from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.application.services.bootstrap_handler import BootstrapHandler
from app.application.services.document_access_service import DocumentAccessService
from app.application.services.policy_engine import PolicyEngine
from app.core.config import get_settings
from app.infrastructure.firebase._rest_client import FirestoreRESTClient
from app.infrastructure.firebase.client import get_firestore_client, get_identity_client
from app.infrastructure.firebase.identity_toolkit import IdentityToolkitClient
from app.infrastructure.firebase.repositories import (
    FirestoreDocumentStore,
    FirestorePrincipalRepository,
    FirestoreTenantDirectory,
)
from app.infrastructure.security.claims import ClaimCodec, InvalidClaimBundle


def _get_firestore_client_or_raise() -> FirestoreRESTClient:
    """Return Firestore client or raise HTTPException 503 with standard message."""
    client = get_firestore_client()
    if not client:
        raise HTTPException(
            status_code=503,
            detail="Firestore not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


def _get_identity_client_or_raise() -> IdentityToolkitClient:
    """Return identity provider client or raise HTTPException 503."""
    client = get_identity_client()
    if not client:
        raise HTTPException(
            status_code=503,
            detail="Identity provider not configured (set FIREBASE_SERVICE_ACCOUNT_KEY or PATH)",
        )
    return client


def get_claim_codec() -> ClaimCodec:
    """Session token codec (composition root)."""
    return ClaimCodec()


def get_identity_provider(
    client: Annotated[IdentityToolkitClient, Depends(_get_identity_client_or_raise)],
) -> IdentityToolkitClient:
    return client


def get_principal_repo(
    client: Annotated[FirestoreRESTClient, Depends(_get_firestore_client_or_raise)],
) -> FirestorePrincipalRepository:
    return FirestorePrincipalRepository(client)


def get_tenant_directory(
    client: Annotated[FirestoreRESTClient, Depends(_get_firestore_client_or_raise)],
) -> FirestoreTenantDirectory:
    return FirestoreTenantDirectory(client)


def get_document_store(
    client: Annotated[FirestoreRESTClient, Depends(_get_firestore_client_or_raise)],
) -> FirestoreDocumentStore:
    return FirestoreDocumentStore(client)


def get_policy_engine(
    tenant_directory: Annotated[FirestoreTenantDirectory, Depends(get_tenant_directory)],
) -> PolicyEngine:
    """Policy engine backed by the Firestore tenant directory (composition root)."""
    return PolicyEngine(tenant_directory)


def get_document_access_service(
    store: Annotated[FirestoreDocumentStore, Depends(get_document_store)],
    policy: Annotated[PolicyEngine, Depends(get_policy_engine)],
) -> DocumentAccessService:
    """Policy-enforced document gateway (composition root)."""
    return DocumentAccessService(store=store, policy=policy)


def get_account_lifecycle_service(
    identity: Annotated[IdentityToolkitClient, Depends(get_identity_provider)],
    principal_repo: Annotated[FirestorePrincipalRepository, Depends(get_principal_repo)],
) -> AccountLifecycleService:
    """Account lifecycle service (composition root)."""
    return AccountLifecycleService(
        identity=identity,
        principal_repo=principal_repo,
        operator_login_domain=get_settings().operator_login_domain,
    )


def get_bootstrap_handler(
    identity: Annotated[IdentityToolkitClient, Depends(get_identity_provider)],
    principal_repo: Annotated[FirestorePrincipalRepository, Depends(get_principal_repo)],
) -> BootstrapHandler:
    """Bootstrap handler for the account-created hook (composition root)."""
    return BootstrapHandler(
        identity=identity,
        principal_repo=principal_repo,
        recheck_delay_seconds=get_settings().bootstrap_recheck_delay_seconds,
    )


# ---- Auth (caller from session token) ----

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_caller(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
    codec: Annotated[ClaimCodec, Depends(get_claim_codec)],
) -> Caller:
    """Return the caller from the session token; anonymous if absent or invalid.

    Services decide whether an anonymous caller is acceptable (analytics
    events and active resources are readable without a session).
    """
    if not credentials:
        return Caller.anonymous()
    try:
        return codec.verify(credentials.credentials).to_caller()
    except InvalidClaimBundle:
        return Caller.anonymous()


async def get_authenticated_caller(
    caller: Annotated[Caller, Depends(get_current_caller)],
) -> Caller:
    """Return the caller; raise 401 if there is no valid session token."""
    if not caller.is_authenticated:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return caller
