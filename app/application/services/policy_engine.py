"""Policy engine: per-collection access rules for document operations.

Every read and write that reaches the document store is evaluated here
first. Rules are looked up by collection; an unknown collection is denied.
Evaluation has no side effects, but scope checks for business operators
read the tenant directory (not transactional with the write it authorizes).
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any

from app.application.dtos.policy import Caller, Decision
from app.application.interfaces.services import ITenantDirectory
from app.domain.enums import ELEVATED_ROLES, Collection, Operation, Role
from app.domain.exceptions import AuthorizationException
from app.domain.field_policy import affected_keys, disallowed_operator_fields
from app.domain.value_objects.core import tenant_id_from_scope_ref

ANALYTICS_EVENT_FIELDS = frozenset({"poiId", "categoryId", "timestamp"})
ANALYTICS_ID_MAX_LENGTH = 100

Document = Mapping[str, Any]
Rule = Callable[
    [Caller, Operation, str | None, Document | None, Document | None],
    Awaitable[Decision],
]


def _owner_tenant_id(value: object) -> str | None:
    """Tenant id from an ownerBusinessRef ("tenants/T" or a full document resource name)."""
    if not isinstance(value, str):
        return None
    if "/documents/" in value:
        value = value.split("/documents/", 1)[1]
    return tenant_id_from_scope_ref(value)


def _short_string(value: object) -> bool:
    return isinstance(value, str) and len(value) <= ANALYTICS_ID_MAX_LENGTH


def validate_analytics_event(data: Document | None) -> str | None:
    """Return a denial reason if data is not a well-formed analytics event, else None."""
    if data is None:
        return "analytics event body is required"
    keys = set(data)
    if keys != ANALYTICS_EVENT_FIELDS:
        extra = sorted(keys - ANALYTICS_EVENT_FIELDS)
        missing = sorted(ANALYTICS_EVENT_FIELDS - keys)
        if extra:
            return f"unexpected fields: {', '.join(extra)}"
        return f"missing fields: {', '.join(missing)}"
    if not _short_string(data["poiId"]):
        return f"poiId must be a string of at most {ANALYTICS_ID_MAX_LENGTH} characters"
    if not _short_string(data["categoryId"]):
        return f"categoryId must be a string of at most {ANALYTICS_ID_MAX_LENGTH} characters"
    if not isinstance(data["timestamp"], datetime):
        return "timestamp must be a timestamp"
    return None


class PolicyEngine:
    """Decides whether a caller may create/read/update/delete a document."""

    def __init__(self, tenant_directory: ITenantDirectory) -> None:
        self.tenant_directory = tenant_directory
        self._rules: dict[Collection, Rule] = {
            Collection.ANALYTICS_EVENTS: self._analytics_events,
            Collection.MANAGED_RESOURCES: self._managed_resources,
            Collection.TENANTS: self._tenants,
            Collection.ASSETS: self._assets,
            Collection.PRINCIPALS: self._principals,
            Collection.TRIPS: self._trips,
        }

    async def evaluate(
        self,
        caller: Caller,
        op: Operation,
        collection: Collection | str,
        *,
        doc_id: str | None = None,
        current: Document | None = None,
        proposed: Document | None = None,
    ) -> Decision:
        """Return Allow or Deny(reason) for op on collection.

        Args:
            caller: Identity from the verified claim bundle (may be anonymous).
            op: The operation being attempted.
            collection: Target collection (enum or its persisted name).
            doc_id: Target document id, when addressing one document.
            current: Current document data, None if absent or not yet fetched.
            proposed: Full document for create; the patch for update.
        """
        try:
            coll = Collection(collection)
        except ValueError:
            return Decision.deny(f"unknown collection: {collection}")
        rule = self._rules.get(coll)
        if rule is None:
            return Decision.deny(f"no rules for collection: {coll.value}")
        return await rule(caller, op, doc_id, current, proposed)

    async def require(
        self,
        caller: Caller,
        op: Operation,
        collection: Collection | str,
        *,
        doc_id: str | None = None,
        current: Document | None = None,
        proposed: Document | None = None,
    ) -> None:
        """Raise AuthorizationException carrying the denial reason if not allowed."""
        decision = await self.evaluate(
            caller,
            op,
            collection,
            doc_id=doc_id,
            current=current,
            proposed=proposed,
        )
        if not decision:
            raise AuthorizationException(
                resource=str(getattr(collection, "value", collection)),
                action=op.value,
                reason=decision.reason,
            )

    # Collection rules

    async def _analytics_events(self, caller, op, doc_id, current, proposed) -> Decision:
        if op == Operation.CREATE:
            reason = validate_analytics_event(proposed)
            return Decision.deny(reason) if reason else Decision.allow()
        if op == Operation.UPDATE:
            return Decision.deny("analytics events are immutable")
        return self._admin_only(caller)

    async def _managed_resources(self, caller, op, doc_id, current, proposed) -> Decision:
        if op == Operation.READ:
            if caller.has_role(*ELEVATED_ROLES):
                return Decision.allow()
            if current is None:
                return Decision.deny("resource visibility cannot be established")
            if current.get("active") is True:
                return Decision.allow()
            return Decision.deny("resource is not active")
        if op == Operation.CREATE:
            return self._elevated_only(caller)
        if op == Operation.DELETE:
            return self._admin_only(caller)

        if caller.has_role(*ELEVATED_ROLES):
            return Decision.allow()
        if not caller.has_role(Role.BUSINESS_OPERATOR):
            return Decision.deny("elevated or business_operator role required")
        if current is None:
            return Decision.deny("resource does not exist")
        # Field check first: one disallowed field denies the whole write.
        disallowed = disallowed_operator_fields(affected_keys(current, proposed or {}))
        if disallowed:
            return Decision.deny(f"fields not editable by operators: {', '.join(disallowed)}")
        return await self._operator_owns(caller, current)

    async def _tenants(self, caller, op, doc_id, current, proposed) -> Decision:
        if (
            op == Operation.READ
            and caller.has_role(Role.BUSINESS_OPERATOR)
            and doc_id is not None
            and tenant_id_from_scope_ref(caller.scope_ref) == doc_id
        ):
            return Decision.allow()
        return self._admin_only(caller)

    async def _assets(self, caller, op, doc_id, current, proposed) -> Decision:
        if op == Operation.READ:
            return Decision.allow()
        return self._elevated_only(caller)

    async def _principals(self, caller, op, doc_id, current, proposed) -> Decision:
        if op != Operation.READ:
            return Decision.deny("principals are written by the account service only")
        if caller.has_role(Role.ADMIN):
            return Decision.allow()
        if caller.is_authenticated and doc_id is not None and doc_id == caller.uid:
            return Decision.allow()
        return Decision.deny("principal can only be read by itself or an admin")

    async def _trips(self, caller, op, doc_id, current, proposed) -> Decision:
        if op == Operation.CREATE:
            if not caller.has_role(Role.SALES_AGENT):
                return Decision.deny("sales_agent role required")
            if (proposed or {}).get("agentId") != caller.uid:
                return Decision.deny("agentId must be the caller")
            return Decision.allow()
        if current is None:
            return Decision.deny("trip does not exist")
        is_owner = caller.is_authenticated and current.get("agentId") == caller.uid
        if op == Operation.READ:
            if is_owner or current.get("isShared") is True:
                return Decision.allow()
            return Decision.deny("trip is not shared")
        if not is_owner:
            return Decision.deny("only the owning agent may modify a trip")
        if op == Operation.UPDATE and (proposed or {}).get("agentId", caller.uid) != caller.uid:
            return Decision.deny("agentId must remain the caller")
        return Decision.allow()

    # Shared predicates

    @staticmethod
    def _admin_only(caller: Caller) -> Decision:
        if caller.has_role(Role.ADMIN):
            return Decision.allow()
        return Decision.deny("admin role required")

    @staticmethod
    def _elevated_only(caller: Caller) -> Decision:
        if caller.has_role(*ELEVATED_ROLES):
            return Decision.allow()
        return Decision.deny("admin or content_manager role required")

    async def _operator_owns(self, caller: Caller, resource: Document) -> Decision:
        """Allow iff the caller's tenant contains the caller and owns resource."""
        tenant_id = tenant_id_from_scope_ref(caller.scope_ref)
        if tenant_id is None:
            return Decision.deny("caller has no tenant scope")
        tenant = await self.tenant_directory.get_tenant(tenant_id)
        if tenant is None or not tenant.has_member(caller.uid):
            return Decision.deny("caller is not a member of its scoped tenant")
        if _owner_tenant_id(resource.get("ownerBusinessRef")) != tenant.id:
            return Decision.deny("resource is not owned by the caller's tenant")
        return Decision.allow()
