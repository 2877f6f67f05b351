"""Identity Toolkit (Firebase Auth) admin REST client (no firebase-admin).

Same approach as the Firestore client: google-auth service account tokens
and httpx.AsyncClient. Provider error codes (EMAIL_EXISTS, USER_NOT_FOUND)
are translated to the application's IdentityProviderError family.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from app.application.dtos.principal import IdentityAccount
from app.application.interfaces.services import (
    AccountExistsError,
    AccountNotFoundError,
    IdentityProviderError,
    InvalidIdTokenError,
)
from app.infrastructure.firebase._rest_client import _get_access_token

logger = logging.getLogger(__name__)

IDENTITY_SCOPES = (
    "https://www.googleapis.com/auth/identitytoolkit",
    "https://www.googleapis.com/auth/cloud-platform",
)
_BASE = "https://identitytoolkit.googleapis.com/v1"

_ERROR_TYPES: dict[str, type[IdentityProviderError]] = {
    "EMAIL_EXISTS": AccountExistsError,
    "DUPLICATE_EMAIL": AccountExistsError,
    "DUPLICATE_LOCAL_ID": AccountExistsError,
    "USER_NOT_FOUND": AccountNotFoundError,
}


def _error_code(resp: httpx.Response) -> str:
    """Extract the provider error code from an error body ("EMAIL_EXISTS : ...")."""
    try:
        message = resp.json().get("error", {}).get("message", "")
    except ValueError:
        message = ""
    code = message.split(":", 1)[0].strip()
    return code or f"HTTP_{resp.status_code}"


def _verify_firebase_token(id_token: str, project_id: str) -> dict[str, Any]:
    from google.auth.transport.requests import Request
    from google.oauth2 import id_token as google_id_token

    return google_id_token.verify_firebase_token(
        id_token, Request(), audience=project_id
    )


class IdentityToolkitClient:
    """Admin operations on identity-provider accounts (implements IIdentityProvider)."""

    def __init__(
        self,
        project_id: str,
        credentials,
        *,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self._project_id = project_id
        self._credentials = credentials
        self._base = f"{_BASE}/projects/{project_id}"
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=timeout)
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it."""
        if self._owns_http:
            await self._http.aclose()

    async def get_token(self) -> str:
        return await asyncio.to_thread(_get_access_token, self._credentials)

    async def _call(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        """POST to accounts<method>; raise IdentityProviderError on error responses."""
        resp = await self._http.post(
            f"{self._base}/accounts{method}",
            headers={"Authorization": f"Bearer {await self.get_token()}"},
            json=body,
        )
        if resp.status_code >= 400:
            code = _error_code(resp)
            raise _ERROR_TYPES.get(code, IdentityProviderError)(code)
        return resp.json() if resp.content else {}

    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> str:
        """Create an account; return the provider-assigned uid."""
        body: dict[str, Any] = {"email": email, "password": password}
        if display_name:
            body["displayName"] = display_name
        out = await self._call("", body)
        uid = out.get("localId")
        if not uid:
            raise IdentityProviderError("MISSING_LOCAL_ID", "Provider returned no uid")
        return uid

    async def delete_account(self, uid: str) -> None:
        await self._call(":delete", {"localId": uid})

    async def disable_account(self, uid: str) -> None:
        await self._call(":update", {"localId": uid, "disableUser": True})

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        await self._call(
            ":update",
            {"localId": uid, "customAttributes": json.dumps(claims)},
        )

    async def get_account(self, uid: str) -> IdentityAccount | None:
        """Look up an account by uid; None if it does not exist."""
        try:
            out = await self._call(":lookup", {"localId": [uid]})
        except AccountNotFoundError:
            return None
        users = out.get("users") or []
        if not users:
            return None
        user = users[0]
        raw_claims = user.get("customAttributes")
        try:
            claims = json.loads(raw_claims) if raw_claims else {}
        except ValueError:
            logger.warning("Ignoring malformed custom claims on account %s", uid)
            claims = {}
        return IdentityAccount(
            uid=user.get("localId", uid),
            email=user.get("email"),
            display_name=user.get("displayName"),
            disabled=bool(user.get("disabled", False)),
            custom_claims=claims if isinstance(claims, dict) else {},
        )

    async def verify_id_token(self, id_token: str) -> dict[str, Any]:
        """Verify a Firebase ID token (signature, audience, expiry) via google-auth."""
        try:
            return await asyncio.to_thread(
                _verify_firebase_token, id_token, self._project_id
            )
        except ValueError as e:
            raise InvalidIdTokenError(str(e)) from e
