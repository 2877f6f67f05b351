"""Domain value objects for the authorization layer.

Value objects are immutable types that represent domain concepts with
self-validation. They have no identity, only value.
"""

import re
from dataclasses import dataclass
from typing import ClassVar

_USERNAME_RE = re.compile(r"[a-zA-Z0-9_.-]+")


@dataclass(frozen=True)
class OperatorUsername:
    """Login name of a business operator.

    At least 3 characters of [a-zA-Z0-9_.-]. The identity provider only knows
    email-shaped identifiers, so the username is mapped onto a synthetic
    address under the operator login domain.
    """

    value: str

    MIN_LENGTH: ClassVar[int] = 3

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("username must be a non-empty string.")
        if len(self.value) < self.MIN_LENGTH:
            raise ValueError(
                f"username must be at least {self.MIN_LENGTH} characters."
            )
        if not _USERNAME_RE.fullmatch(self.value):
            raise ValueError(
                "username may only contain letters, digits, '_', '.' and '-'."
            )

    def to_login_email(self, domain: str) -> str:
        """Return the provider-internal email for this username (lower-cased)."""
        return f"{self.value.lower()}@{domain}"


@dataclass(frozen=True)
class ScopeRef:
    """Reference from a principal's claims to the single tenant it acts for.

    Serialized as "tenants/<tenant_id>", the document path of the tenant.
    """

    tenant_id: str

    PREFIX: ClassVar[str] = "tenants/"

    def __post_init__(self) -> None:
        if not self.tenant_id or "/" in self.tenant_id:
            raise ValueError(f"Invalid tenant id for scope reference: {self.tenant_id!r}")

    def __str__(self) -> str:
        return f"{self.PREFIX}{self.tenant_id}"

    @classmethod
    def parse(cls, raw: object) -> "ScopeRef | None":
        """Return ScopeRef for a serialized reference, or None if malformed."""
        if not isinstance(raw, str) or not raw.startswith(cls.PREFIX):
            return None
        try:
            return cls(raw[len(cls.PREFIX):])
        except ValueError:
            return None


def tenant_scope_ref(tenant_id: str) -> str:
    """Return the serialized scope reference for a tenant id."""
    return str(ScopeRef(tenant_id))


def tenant_id_from_scope_ref(raw: object) -> str | None:
    """Return the tenant id a serialized scope reference points at, or None."""
    ref = ScopeRef.parse(raw)
    return ref.tenant_id if ref else None
