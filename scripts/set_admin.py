"""Grant the admin role to an existing identity-provider account.

Usage:
    uv run python -m scripts.set_admin <uid>
Bootstraps the first administrator, since role promotion over the API
requires an admin caller. Writes the admin claim and the matching
principals/{uid} document. The account must sign in again (or refresh its
session) to pick up the claim.
All imports use app.*.
"""

import asyncio
import sys

from app.application.dtos.claims import ClaimBundle
from app.domain.entities.principal import PrincipalEntity
from app.domain.enums import Role
from app.infrastructure.firebase.client import (
    close_firebase,
    get_firestore_client,
    get_identity_client,
    init_firebase,
)
from app.infrastructure.firebase.repositories import FirestorePrincipalRepository


async def main() -> None:
    """Set role=admin on the account and its principal document."""
    if len(sys.argv) != 2:
        print("Usage: uv run python -m scripts.set_admin <uid>", file=sys.stderr)
        sys.exit(1)
    uid = sys.argv[1]

    if not init_firebase():
        print("Firebase not configured (FIREBASE_SERVICE_ACCOUNT_KEY or PATH)", file=sys.stderr)
        sys.exit(1)
    identity = get_identity_client()
    firestore = get_firestore_client()
    assert identity is not None and firestore is not None
    try:
        account = await identity.get_account(uid)
        if account is None:
            print(f"Account not found: {uid}", file=sys.stderr)
            sys.exit(1)
        bundle = ClaimBundle(uid=uid, role=Role.ADMIN)
        await identity.set_custom_claims(uid, bundle.custom_claims())
        await FirestorePrincipalRepository(firestore).save(
            PrincipalEntity(
                uid=uid,
                role=Role.ADMIN,
                email=account.email,
                display_name=account.display_name,
            )
        )
        print(f"Granted admin to {uid} ({account.email})")
    finally:
        await close_firebase()


if __name__ == "__main__":
    asyncio.run(main())
