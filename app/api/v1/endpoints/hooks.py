"""Identity-provider hooks. Signed with HMAC-SHA256; no session token."""

import hashlib
import hmac
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import ValidationError

from app.api.v1.dependencies import get_bootstrap_handler
from app.application.services.bootstrap_handler import BootstrapHandler
from app.core.config import get_settings
from app.domain.exceptions import ValidationException
from app.schemas.hook import AccountCreatedAck, AccountCreatedEvent

router = APIRouter()

SIGNATURE_HEADER = "X-Webhook-Signature-256"


def _verify_webhook_signature(body: bytes, signature_header: str | None, secret: str) -> bool:
    """Return True if X-Webhook-Signature-256 matches HMAC-SHA256(secret, body)."""
    if not signature_header or not signature_header.startswith("sha256="):
        return False
    expected = hmac.HMAC(
        secret.encode(), body, hashlib.sha256
    ).hexdigest()
    return hmac.compare_digest(signature_header[7:].strip(), expected)


def _require_signed(body: bytes, request: Request) -> None:
    settings = get_settings()
    if not settings.account_hook_secret:
        raise HTTPException(
            status_code=503,
            detail="Account hook is not configured (ACCOUNT_HOOK_SECRET is not set).",
        )
    sig = request.headers.get(SIGNATURE_HEADER)
    secret = settings.account_hook_secret.get_secret_value()
    if not _verify_webhook_signature(body, sig, secret):
        raise HTTPException(
            status_code=401, detail="Invalid or missing webhook signature"
        )


@router.post("/account-created", response_model=AccountCreatedAck)
async def account_created(
    request: Request,
    handler: Annotated[BootstrapHandler, Depends(get_bootstrap_handler)],
):
    """Fired for every new account; assigns standard_user unless already provisioned.

    The response is sent after the recheck delay, so the caller should allow
    a few seconds.
    """
    body = await request.body()
    _require_signed(body, request)
    try:
        event = AccountCreatedEvent.model_validate_json(body)
    except ValidationError as e:
        raise ValidationException("Invalid account-created event body") from e
    outcome = await handler.on_account_created(event.uid, event.email)
    return AccountCreatedAck(uid=event.uid, outcome=outcome.value)
