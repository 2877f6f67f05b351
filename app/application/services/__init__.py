"""Application services: policy engine, document gateway, account lifecycle, bootstrap."""

from app.application.services.account_lifecycle_service import AccountLifecycleService
from app.application.services.bootstrap_handler import BootstrapHandler, BootstrapOutcome
from app.application.services.document_access_service import DocumentAccessService
from app.application.services.policy_engine import PolicyEngine

__all__ = [
    "AccountLifecycleService",
    "BootstrapHandler",
    "BootstrapOutcome",
    "DocumentAccessService",
    "PolicyEngine",
]
