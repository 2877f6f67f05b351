"""Service interfaces (ports) for the application layer.

Protocols define contracts for the identity provider, claim codec and
tenant directory. Provider errors are declared here so application services
can handle them without importing infrastructure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.application.dtos.claims import ClaimBundle
    from app.application.dtos.principal import BusinessTenantResult, IdentityAccount
    from app.domain.enums import Role


class IdentityProviderError(Exception):
    """Error reported by the identity provider.

    Attributes:
        code: Provider error code (e.g. EMAIL_EXISTS, USER_NOT_FOUND).
    """

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or code)


class AccountExistsError(IdentityProviderError):
    """The provider already has an account with this identifier."""


class AccountNotFoundError(IdentityProviderError):
    """The provider has no account with this uid."""


class InvalidIdTokenError(Exception):
    """A provider-issued ID token failed verification."""


# Identity provider interface
class IIdentityProvider(Protocol):
    """Protocol for the identity provider's admin API (accounts and custom claims)."""

    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> str:
        """Create an account and return its uid. Raises AccountExistsError on duplicates."""

    async def delete_account(self, uid: str) -> None:
        """Delete an account. Raises AccountNotFoundError if it does not exist."""

    async def disable_account(self, uid: str) -> None:
        """Disable sign-in for an account without deleting it."""

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        """Replace the account's custom claims."""

    async def get_account(self, uid: str) -> IdentityAccount | None:
        """Return the account (with custom claims) or None if it does not exist."""

    async def verify_id_token(self, id_token: str) -> dict[str, Any]:
        """Verify a provider-issued ID token and return its decoded claims.

        Raises InvalidIdTokenError when the token is invalid or expired.
        """


# Claim codec interface
class IClaimCodec(Protocol):
    """Protocol for signing and verifying claim bundles carried by sessions."""

    def issue(self, uid: str, role: Role, scope_ref: str | None = None) -> str:
        """Return an opaque signed bundle for uid/role/scope_ref."""

    def verify(self, bundle: str) -> ClaimBundle:
        """Return the decoded bundle; raise InvalidClaimBundle if invalid."""


# Tenant directory interface
class ITenantDirectory(Protocol):
    """Read-only lookup of business tenants for scope checks."""

    async def get_tenant(self, tenant_id: str) -> BusinessTenantResult | None:
        """Return the tenant (with its member uids) or None if absent."""
