"""Claim codec: signs and verifies claim bundles carried in session tokens.

A bundle is an HS256 JWT with sub (uid), role and optional scope_ref. Uses
app.core.config for the secret, algorithm and lifetime. Tokens are not
revoked when claims change; holders observe a new role only after they
refresh their session.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

from app.application.dtos.claims import ClaimBundle
from app.core.config import get_settings
from app.domain.enums import Role


class InvalidClaimBundle(ValueError):
    """Raised when a bundle has a bad signature, is expired, or is malformed."""


class ClaimCodec:
    """Issue and verify signed claim bundles."""

    def __init__(
        self,
        secret: str | None = None,
        algorithm: str | None = None,
        ttl: timedelta | None = None,
    ) -> None:
        settings = get_settings()
        self._secret = secret or settings.secret_key.get_secret_value()
        self._algorithm = algorithm or settings.algorithm
        self._ttl = ttl or timedelta(minutes=settings.session_token_expire_minutes)

    def issue(self, uid: str, role: Role, scope_ref: str | None = None) -> str:
        """Return a signed bundle for uid with role and optional scope reference.

        Args:
            uid: Provider-assigned account id (becomes the sub claim).
            role: Role granted to the account.
            scope_ref: Tenant scope reference for business operators.

        Returns:
            Encoded JWT string.
        """
        now = datetime.now(UTC)
        to_encode: dict[str, Any] = {
            "sub": uid,
            "role": Role(role).value,
            "iat": now,
            "exp": now + self._ttl,
        }
        if scope_ref:
            to_encode["scope_ref"] = scope_ref
        encoded = jwt.encode(to_encode, self._secret, algorithm=self._algorithm)
        return cast(str, encoded)

    def issue_for(self, bundle: ClaimBundle) -> str:
        return self.issue(bundle.uid, bundle.role, bundle.scope_ref)

    def verify(self, bundle: str) -> ClaimBundle:
        """Verify and decode a signed bundle.

        Enforces presence of exp and sub, and a role from the Role enum.

        Raises:
            InvalidClaimBundle: If the token is invalid, expired, or missing required claims.
        """
        try:
            payload = jwt.decode(
                bundle,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise InvalidClaimBundle(f"Invalid token: {e!s}") from e
        uid = payload.get("sub")
        if not uid:
            raise InvalidClaimBundle("Token missing required claim: sub")
        role = Role.parse(payload.get("role"))
        if role is None:
            raise InvalidClaimBundle("Token missing or has unknown role claim")
        scope_ref = payload.get("scope_ref")
        return ClaimBundle(
            uid=uid,
            role=role,
            scope_ref=scope_ref if isinstance(scope_ref, str) else None,
        )
