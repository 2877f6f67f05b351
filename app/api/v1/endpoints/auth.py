"""Auth API: exchange provider ID tokens for session tokens, and refresh them."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_authenticated_caller,
    get_claim_codec,
    get_identity_provider,
)
from app.application.dtos.claims import ClaimBundle
from app.application.dtos.policy import Caller
from app.application.interfaces.services import IIdentityProvider, InvalidIdTokenError
from app.core.limiter import limit_auth
from app.domain.exceptions import AuthenticationException
from app.infrastructure.security.claims import ClaimCodec
from app.schemas.auth import SessionRequest, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter()


async def _current_bundle(identity: IIdentityProvider, uid: str) -> ClaimBundle:
    """Read the account's claims now; 401 if it is gone, disabled or has no role yet."""
    account = await identity.get_account(uid)
    if account is None or account.disabled:
        raise AuthenticationException("Account is disabled or does not exist.")
    bundle = ClaimBundle.from_custom_claims(uid, account.custom_claims)
    if bundle is None:
        raise AuthenticationException("Account has not been provisioned yet; retry shortly.")
    return bundle


def _session(codec: ClaimCodec, bundle: ClaimBundle) -> SessionResponse:
    return SessionResponse(
        access_token=codec.issue_for(bundle),
        uid=bundle.uid,
        role=bundle.role.value,
        scope_ref=bundle.scope_ref,
    )


@router.post("/session", response_model=SessionResponse)
@limit_auth
async def create_session(
    request: Request,
    body: SessionRequest,
    identity: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    codec: Annotated[ClaimCodec, Depends(get_claim_codec)],
):
    """Verify a Firebase ID token and return a session token with the account's claims."""
    try:
        decoded = await identity.verify_id_token(body.id_token)
    except InvalidIdTokenError as e:
        logger.info("Rejected ID token: %s", e)
        raise AuthenticationException("Invalid ID token.") from e
    uid = decoded.get("uid") or decoded.get("sub") or decoded.get("user_id")
    if not uid:
        raise AuthenticationException("Invalid ID token.")
    return _session(codec, await _current_bundle(identity, uid))


@router.post("/refresh", response_model=SessionResponse)
@limit_auth
async def refresh_session(
    request: Request,
    caller: Annotated[Caller, Depends(get_authenticated_caller)],
    identity: Annotated[IIdentityProvider, Depends(get_identity_provider)],
    codec: Annotated[ClaimCodec, Depends(get_claim_codec)],
):
    """Reissue the session token from the account's current claims (picks up role changes)."""
    assert caller.uid is not None
    return _session(codec, await _current_bundle(identity, caller.uid))
