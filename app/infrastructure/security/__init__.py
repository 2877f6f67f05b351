"""Security: claim bundle signing and verification."""

from app.infrastructure.security.claims import ClaimCodec, InvalidClaimBundle

__all__ = [
    "ClaimCodec",
    "InvalidClaimBundle",
]
