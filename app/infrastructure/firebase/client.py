"""Firestore and Identity Toolkit clients (REST-based, no firebase-admin).

Initialized at app startup using either FIREBASE_SERVICE_ACCOUNT_KEY (JSON
string) or FIREBASE_SERVICE_ACCOUNT_PATH (file path). One service account
drives both clients, each with its own OAuth scopes.
"""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

from app.core.config import get_settings  # noqa: E402
from app.infrastructure.firebase._rest_client import (  # noqa: E402
    FIRESTORE_SCOPE,
    FirestoreRESTClient,
    _get_credentials,
)
from app.infrastructure.firebase.identity_toolkit import (  # noqa: E402
    IDENTITY_SCOPES,
    IdentityToolkitClient,
)

_firestore_client: FirestoreRESTClient | None = None
_identity_client: IdentityToolkitClient | None = None


def _load_key_dict():
    """Return service account dict from env key or file path."""
    settings = get_settings()
    key_json = settings.firebase_service_account_key.get_secret_value() if settings.firebase_service_account_key else None
    if key_json:
        try:
            return json.loads(key_json)
        except json.JSONDecodeError as e:
            raise ValueError("FIREBASE_SERVICE_ACCOUNT_KEY is not valid JSON") from e
    path = settings.firebase_service_account_path
    if path:
        resolved = Path(path).expanduser().resolve() if not Path(path).is_absolute() else Path(path)
        if not resolved.is_file():
            logger.warning(
                "FIREBASE_SERVICE_ACCOUNT_PATH set but file not found: %s (resolved: %s)",
                path,
                resolved,
            )
            return None
        with open(resolved, encoding="utf-8") as f:
            return json.load(f)
    return None


def init_firebase() -> bool:
    """Initialize the Firestore and Identity Toolkit clients.

    Safe to call when no credentials are configured (no-op). On invalid or
    malformed credentials, logs the exception and returns False so the app
    can start without Firebase.

    Returns:
        True if both clients were initialized, False if disabled or on error.
    """
    global _firestore_client, _identity_client
    try:
        key_dict = _load_key_dict()
        if not key_dict:
            return False

        project_id = key_dict.get("project_id")
        if not project_id:
            logger.error("Firebase service account JSON missing 'project_id'")
            return False

        settings = get_settings()
        _firestore_client = FirestoreRESTClient(
            project_id,
            _get_credentials(key_dict, (FIRESTORE_SCOPE,)),
            timeout=settings.firestore_request_timeout_seconds,
        )
        _identity_client = IdentityToolkitClient(
            project_id,
            _get_credentials(key_dict, IDENTITY_SCOPES),
            timeout=settings.identity_request_timeout_seconds,
        )
        logger.info("Firebase clients initialized for project %s", project_id)
        return True
    except Exception:
        logger.exception("Firebase initialization failed")
        return False


def get_firestore_client() -> FirestoreRESTClient | None:
    """Return the Firestore client, or None if not configured."""
    return _firestore_client


def get_identity_client() -> IdentityToolkitClient | None:
    """Return the Identity Toolkit client, or None if not configured."""
    return _identity_client


async def close_firebase() -> None:
    """Close both clients' HTTP connection pools. Call from app shutdown."""
    global _firestore_client, _identity_client
    if _firestore_client is not None:
        await _firestore_client.aclose()
        _firestore_client = None
        logger.info("Firestore HTTP client closed")
    if _identity_client is not None:
        await _identity_client.aclose()
        _identity_client = None
        logger.info("Identity Toolkit HTTP client closed")
