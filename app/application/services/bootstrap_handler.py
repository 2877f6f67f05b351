"""Bootstrap handler: default role for accounts nobody else provisioned.

Fired for every new identity-provider account, including the ones the
account lifecycle service creates itself. To avoid overwriting a role that
an in-flight provisioning call is about to write, the handler checks, waits
and checks again before assigning the default role. This narrows the race
window but does not close it: a provisioning call slower than the recheck
delay can still be overwritten.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

from app.application.dtos.claims import ClaimBundle
from app.application.interfaces.repositories import IPrincipalRepository
from app.application.interfaces.services import IIdentityProvider
from app.domain.entities.principal import PrincipalEntity
from app.domain.enums import DEFAULT_ROLE, Role
from app.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)


class BootstrapOutcome(str, Enum):
    """Terminal state reached by one handler invocation."""

    ALREADY_PROVISIONED = "already_provisioned"
    PROVISIONED_CONCURRENTLY = "provisioned_concurrently"
    DEFAULT_ASSIGNED = "default_assigned"
    ACCOUNT_MISSING = "account_missing"


class BootstrapHandler:
    """Assigns the default role unless a role claim shows up within the recheck delay."""

    def __init__(
        self,
        identity: IIdentityProvider,
        principal_repo: IPrincipalRepository,
        recheck_delay_seconds: float = 1.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.identity = identity
        self.principal_repo = principal_repo
        self.recheck_delay_seconds = recheck_delay_seconds
        self._sleep = sleep

    async def _current_role(self, uid: str) -> tuple[bool, Role | None]:
        """Return (account exists, role claim)."""
        account = await self.identity.get_account(uid)
        if account is None:
            return False, None
        return True, Role.parse(account.custom_claims.get("role"))

    @traced("bootstrap.on_account_created")
    async def on_account_created(self, uid: str, email: str | None = None) -> BootstrapOutcome:
        """Run check, wait, recheck, then assign standard_user if still unclaimed."""
        exists, role = await self._current_role(uid)
        if not exists:
            logger.warning("Bootstrap for %s: account no longer exists", uid)
            return BootstrapOutcome.ACCOUNT_MISSING
        if role is not None:
            logger.info("Bootstrap for %s: already provisioned as %s", uid, role.value)
            return BootstrapOutcome.ALREADY_PROVISIONED

        await self._sleep(self.recheck_delay_seconds)

        exists, role = await self._current_role(uid)
        if not exists:
            logger.warning("Bootstrap for %s: account deleted during recheck delay", uid)
            return BootstrapOutcome.ACCOUNT_MISSING
        if role is not None:
            logger.info(
                "Bootstrap for %s: provisioned concurrently as %s", uid, role.value
            )
            return BootstrapOutcome.PROVISIONED_CONCURRENTLY

        bundle = ClaimBundle(uid=uid, role=DEFAULT_ROLE)
        await self.identity.set_custom_claims(uid, bundle.custom_claims())
        await self.principal_repo.save(
            PrincipalEntity(uid=uid, role=DEFAULT_ROLE, email=email)
        )
        add_span_attributes(uid=uid, role=DEFAULT_ROLE.value)
        logger.info("Bootstrap for %s: assigned default role %s", uid, DEFAULT_ROLE.value)
        return BootstrapOutcome.DEFAULT_ASSIGNED
