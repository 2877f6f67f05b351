"""Firestore-backed repository implementations."""

from app.infrastructure.firebase.repositories.document_store_firestore import (
    FirestoreDocumentStore,
)
from app.infrastructure.firebase.repositories.principal_repo_firestore import (
    FirestorePrincipalRepository,
)
from app.infrastructure.firebase.repositories.tenant_repo_firestore import (
    FirestoreTenantDirectory,
)

__all__ = [
    "FirestoreDocumentStore",
    "FirestorePrincipalRepository",
    "FirestoreTenantDirectory",
]
