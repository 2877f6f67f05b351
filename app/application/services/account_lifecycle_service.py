"""Account lifecycle: provision and deprovision principals of each class.

Each operation is a dual write: the identity-provider account (with its
custom claims) first, then the principal records in one document-store
batch. The two are not covered by a single transaction. A failure after the
provider account exists leaves an orphaned account, which is logged with its
uid so it can be reconciled.
"""

from __future__ import annotations

import logging

from app.application.dtos.claims import ClaimBundle
from app.application.dtos.policy import Caller
from app.application.interfaces.repositories import IPrincipalRepository
from app.application.interfaces.services import (
    AccountExistsError,
    AccountNotFoundError,
    IIdentityProvider,
)
from app.domain.entities.principal import BusinessTenantEntity, PrincipalEntity
from app.domain.enums import Role
from app.domain.exceptions import (
    AccountAlreadyExistsException,
    AuthenticationException,
    AuthorizationException,
    FailedPreconditionException,
    InternalServiceException,
    ResourceNotFoundException,
    ValidationException,
)
from app.domain.value_objects.core import OperatorUsername, tenant_scope_ref
from app.shared.telemetry.tracing import add_span_attributes, set_span_error, traced

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _require_string(value: object, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationException(f"{field} must be a non-empty string.", field=field)
    return value


def _require_password(password: object) -> str:
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationException(
            f"password must be at least {MIN_PASSWORD_LENGTH} characters.",
            field="password",
        )
    return password


class AccountLifecycleService:
    """Admin-only operations that create, delete, block and re-role principals."""

    def __init__(
        self,
        identity: IIdentityProvider,
        principal_repo: IPrincipalRepository,
        operator_login_domain: str,
    ) -> None:
        self.identity = identity
        self.principal_repo = principal_repo
        self.operator_login_domain = operator_login_domain

    @staticmethod
    def _require_admin(caller: Caller) -> None:
        """Unauthenticated if there is no caller identity; PermissionDenied unless admin."""
        if not caller.is_authenticated:
            raise AuthenticationException()
        if caller.role != Role.ADMIN:
            raise AuthorizationException(
                message="Must be an administrative user.",
                reason="admin role required",
            )

    # Provider calls

    async def _create_provider_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> str:
        try:
            return await self.identity.create_account(email, password, display_name)
        except AccountExistsError as e:
            raise AccountAlreadyExistsException() from e
        except Exception as e:
            logger.exception("Identity provider create_account failed")
            set_span_error(e)
            raise InternalServiceException() from e

    async def _set_claims(self, bundle: ClaimBundle) -> None:
        try:
            await self.identity.set_custom_claims(bundle.uid, bundle.custom_claims())
        except Exception as e:
            logger.exception("Setting custom claims failed for uid=%s", bundle.uid)
            set_span_error(e)
            raise InternalServiceException() from e

    async def _delete_provider_account(self, uid: str) -> None:
        """Delete the provider account; an account that is already gone is fine."""
        try:
            await self.identity.delete_account(uid)
        except AccountNotFoundError:
            logger.info("Provider account %s already deleted; cleaning up records", uid)
        except Exception as e:
            logger.exception("Identity provider delete_account failed for uid=%s", uid)
            set_span_error(e)
            raise InternalServiceException() from e

    def _orphaned(self, uid: str, e: Exception) -> InternalServiceException:
        logger.warning(
            "Orphaned provider account uid=%s: principal records were not written",
            uid,
            exc_info=e,
        )
        set_span_error(e)
        return InternalServiceException()

    # Business operators

    @traced("accounts.create_business_operator")
    async def create_business_operator(
        self, caller: Caller, name: object, username: object, password: object
    ) -> str:
        """Create an operator account, its principal and its tenant; return the uid.

        The login email is synthesized from the username under the operator
        login domain. The tenant is keyed by the new uid and lists it as its
        only member.
        """
        self._require_admin(caller)
        name = _require_string(name, "name").strip()
        _require_string(username, "username")
        try:
            login = OperatorUsername(str(username).strip())
        except ValueError as e:
            raise ValidationException(str(e), field="username") from e
        password = _require_password(password)

        email = login.to_login_email(self.operator_login_domain)
        uid = await self._create_provider_account(email, password, name)
        add_span_attributes(uid=uid, role=Role.BUSINESS_OPERATOR.value)

        try:
            scope_ref = tenant_scope_ref(uid)
            await self._set_claims(
                ClaimBundle(uid=uid, role=Role.BUSINESS_OPERATOR, scope_ref=scope_ref)
            )
            principal = PrincipalEntity(
                uid=uid,
                role=Role.BUSINESS_OPERATOR,
                email=email,
                resource_scope_ref=scope_ref,
                display_name=name,
                username=login.value,
            )
            tenant = BusinessTenantEntity(id=uid, name=name, owner_uid=uid)
            await self.principal_repo.save_with_tenant(principal, tenant)
        except Exception as e:
            raise self._orphaned(uid, e) from e
        logger.info("Created business operator %s (%s)", uid, login.value)
        return uid

    @traced("accounts.delete_business_operator")
    async def delete_business_operator(self, caller: Caller, uid: object) -> str:
        """Delete the operator account, then its principal and tenant documents."""
        self._require_admin(caller)
        uid = _require_string(uid, "uid")
        await self._delete_provider_account(uid)
        await self._delete_records(uid, with_tenant=True)
        logger.info("Deleted business operator %s", uid)
        return uid

    # Content managers

    @traced("accounts.create_content_manager")
    async def create_content_manager(
        self, caller: Caller, email: object, password: object
    ) -> str:
        """Create a content manager account and principal; return the uid."""
        self._require_admin(caller)
        email = _require_string(email, "email").strip()
        password = _require_password(password)

        uid = await self._create_provider_account(email, password)
        add_span_attributes(uid=uid, role=Role.CONTENT_MANAGER.value)
        try:
            await self._set_claims(ClaimBundle(uid=uid, role=Role.CONTENT_MANAGER))
            await self.principal_repo.save(
                PrincipalEntity(uid=uid, role=Role.CONTENT_MANAGER, email=email)
            )
        except Exception as e:
            raise self._orphaned(uid, e) from e
        logger.info("Created content manager %s", uid)
        return uid

    @traced("accounts.delete_content_manager")
    async def delete_content_manager(self, caller: Caller, uid: object) -> str:
        self._require_admin(caller)
        uid = _require_string(uid, "uid")
        await self._delete_provider_account(uid)
        await self._delete_records(uid)
        logger.info("Deleted content manager %s", uid)
        return uid

    @traced("accounts.block_content_manager")
    async def block_content_manager(self, caller: Caller, uid: object) -> str:
        """Disable sign-in and flag the principal as blocked; nothing is deleted."""
        self._require_admin(caller)
        uid = _require_string(uid, "uid")
        try:
            await self.identity.disable_account(uid)
            flagged = await self.principal_repo.mark_blocked(uid)
        except Exception as e:
            logger.exception("Blocking content manager %s failed", uid)
            set_span_error(e)
            raise InternalServiceException() from e
        if not flagged:
            logger.error("Content manager %s disabled but has no principal to flag", uid)
            raise InternalServiceException()
        logger.info("Blocked content manager %s", uid)
        return uid

    # Sales agents

    @traced("accounts.create_sales_agent")
    async def create_sales_agent(
        self,
        caller: Caller,
        email: object,
        password: object,
        display_name: object,
    ) -> str:
        """Create a sales agent account and principal; return the uid."""
        self._require_admin(caller)
        email = _require_string(email, "email").strip().lower()
        password = _require_password(password)
        display_name = _require_string(display_name, "displayName").strip()

        uid = await self._create_provider_account(email, password, display_name)
        add_span_attributes(uid=uid, role=Role.SALES_AGENT.value)
        try:
            await self._set_claims(ClaimBundle(uid=uid, role=Role.SALES_AGENT))
            await self.principal_repo.save(
                PrincipalEntity(
                    uid=uid,
                    role=Role.SALES_AGENT,
                    email=email,
                    display_name=display_name,
                )
            )
        except Exception as e:
            raise self._orphaned(uid, e) from e
        logger.info("Created sales agent %s", uid)
        return uid

    @traced("accounts.delete_sales_agent")
    async def delete_sales_agent(self, caller: Caller, uid: object) -> str:
        """Delete a sales agent. Refuses accounts whose role is not sales_agent.

        A provider account that is already gone skips the role check; the
        principal document is still removed so repeated calls converge.
        """
        self._require_admin(caller)
        uid = _require_string(uid, "uid")
        try:
            account = await self.identity.get_account(uid)
        except Exception as e:
            logger.exception("Identity provider get_account failed for uid=%s", uid)
            set_span_error(e)
            raise InternalServiceException() from e

        if account is not None:
            role = account.custom_claims.get("role")
            if role != Role.SALES_AGENT.value:
                raise FailedPreconditionException(
                    "The user is not a sales agent.",
                    {"uid": uid, "role": role},
                )
            await self._delete_provider_account(uid)
        await self._delete_records(uid)
        logger.info("Deleted sales agent %s", uid)
        return uid

    # Roles

    @traced("accounts.promote_role")
    async def promote_role(self, caller: Caller, uid: object, role: object) -> bool:
        """Change a principal's role on its document and in its claims.

        The document is updated first; the new claim is visible to the
        principal after its next session refresh. A business operator keeps
        its tenant scope; any other role drops it.
        """
        self._require_admin(caller)
        uid = _require_string(uid, "uid")
        new_role = Role.parse(role)
        if new_role is None:
            raise ValidationException(
                f"role must be one of: {', '.join(Role.values())}.", field="role"
            )

        try:
            existing = await self.principal_repo.get(uid)
        except Exception as e:
            logger.exception("Reading principal %s failed", uid)
            set_span_error(e)
            raise InternalServiceException() from e
        if existing is None:
            raise ResourceNotFoundException("principal", uid)

        scope_ref = (
            existing.resource_scope_ref if new_role == Role.BUSINESS_OPERATOR else None
        )
        try:
            updated = await self.principal_repo.update_role(uid, new_role, scope_ref)
        except Exception as e:
            logger.exception("Updating role for principal %s failed", uid)
            set_span_error(e)
            raise InternalServiceException() from e
        if not updated:
            raise ResourceNotFoundException("principal", uid)

        await self._set_claims(ClaimBundle(uid=uid, role=new_role, scope_ref=scope_ref))
        logger.info("Principal %s role set to %s", uid, new_role.value)
        return True

    async def _delete_records(self, uid: str, *, with_tenant: bool = False) -> None:
        try:
            await self.principal_repo.delete(uid, with_tenant=with_tenant)
        except Exception as e:
            logger.exception("Deleting records for uid=%s failed", uid)
            set_span_error(e)
            raise InternalServiceException() from e
