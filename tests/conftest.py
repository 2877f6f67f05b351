"""Pytest configuration and fixtures for the authorization service.

Uses app.main:app for HTTP tests. Firebase is never configured in tests:
services are wired to the in-memory fakes below through
app.dependency_overrides. All imports use app.*.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-for-session-tokens")
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_KEY", None)
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_PATH", None)

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.api.v1.dependencies import (  # noqa: E402
    get_account_lifecycle_service,
    get_bootstrap_handler,
    get_document_access_service,
    get_identity_provider,
)
from app.application.dtos.policy import Caller  # noqa: E402
from app.application.dtos.principal import (  # noqa: E402
    BusinessTenantResult,
    IdentityAccount,
    PrincipalResult,
)
from app.application.interfaces.services import (  # noqa: E402
    AccountExistsError,
    AccountNotFoundError,
    InvalidIdTokenError,
)
from app.application.services.account_lifecycle_service import (  # noqa: E402
    AccountLifecycleService,
)
from app.application.services.bootstrap_handler import BootstrapHandler  # noqa: E402
from app.application.services.document_access_service import (  # noqa: E402
    DocumentAccessService,
)
from app.application.services.policy_engine import PolicyEngine  # noqa: E402
from app.domain.entities.principal import (  # noqa: E402
    BusinessTenantEntity,
    PrincipalEntity,
)
from app.core.limiter import limiter  # noqa: E402
from app.domain.enums import Collection, Role  # noqa: E402
from app.infrastructure.security.claims import ClaimCodec  # noqa: E402
from app.main import app  # noqa: E402
from app.shared.utils.generators import generate_cuid  # noqa: E402

OPERATOR_DOMAIN = "operators.test"


class FakeIdentityProvider:
    """In-memory identity provider: accounts by uid, emails unique."""

    def __init__(self) -> None:
        self.accounts: dict[str, IdentityAccount] = {}
        self.passwords: dict[str, str] = {}
        self.id_tokens: dict[str, str] = {}
        self.calls: list[str] = []

    def add_account(
        self,
        uid: str,
        email: str | None = None,
        claims: dict[str, Any] | None = None,
        disabled: bool = False,
    ) -> None:
        self.accounts[uid] = IdentityAccount(
            uid=uid,
            email=email,
            display_name=None,
            disabled=disabled,
            custom_claims=dict(claims or {}),
        )

    async def create_account(
        self, email: str, password: str, display_name: str | None = None
    ) -> str:
        self.calls.append("create_account")
        if any(a.email == email for a in self.accounts.values()):
            raise AccountExistsError("EMAIL_EXISTS")
        uid = generate_cuid()
        self.accounts[uid] = IdentityAccount(
            uid=uid,
            email=email,
            display_name=display_name,
            disabled=False,
            custom_claims={},
        )
        self.passwords[uid] = password
        return uid

    async def delete_account(self, uid: str) -> None:
        self.calls.append("delete_account")
        if self.accounts.pop(uid, None) is None:
            raise AccountNotFoundError("USER_NOT_FOUND")

    async def disable_account(self, uid: str) -> None:
        self.calls.append("disable_account")
        account = self.accounts.get(uid)
        if account is None:
            raise AccountNotFoundError("USER_NOT_FOUND")
        self.accounts[uid] = IdentityAccount(
            uid=uid,
            email=account.email,
            display_name=account.display_name,
            disabled=True,
            custom_claims=account.custom_claims,
        )

    async def set_custom_claims(self, uid: str, claims: dict[str, Any]) -> None:
        self.calls.append("set_custom_claims")
        account = self.accounts.get(uid)
        if account is None:
            raise AccountNotFoundError("USER_NOT_FOUND")
        self.accounts[uid] = IdentityAccount(
            uid=uid,
            email=account.email,
            display_name=account.display_name,
            disabled=account.disabled,
            custom_claims=dict(claims),
        )

    async def get_account(self, uid: str) -> IdentityAccount | None:
        return self.accounts.get(uid)

    async def verify_id_token(self, id_token: str) -> dict[str, Any]:
        uid = self.id_tokens.get(id_token)
        if uid is None:
            raise InvalidIdTokenError("Token signature invalid")
        return {"sub": uid, "user_id": uid}


class FakePrincipalRepository:
    """In-memory principals and tenants collections."""

    def __init__(self) -> None:
        self.principals: dict[str, PrincipalEntity] = {}
        self.tenants: dict[str, BusinessTenantEntity] = {}
        self.writes = 0
        self.fail_writes = False

    def _write(self) -> None:
        if self.fail_writes:
            raise RuntimeError("store unavailable")
        self.writes += 1

    async def get(self, uid: str) -> PrincipalResult | None:
        p = self.principals.get(uid)
        if p is None:
            return None
        return PrincipalResult(
            uid=p.uid,
            role=p.role,
            email=p.email,
            resource_scope_ref=p.resource_scope_ref,
            blocked=p.blocked,
            display_name=p.display_name,
        )

    async def save(self, principal: PrincipalEntity) -> None:
        self._write()
        self.principals[principal.uid] = principal

    async def save_with_tenant(
        self, principal: PrincipalEntity, tenant: BusinessTenantEntity
    ) -> None:
        self._write()
        self.principals[principal.uid] = principal
        self.tenants[tenant.id] = tenant

    async def delete(self, uid: str, *, with_tenant: bool = False) -> None:
        self._write()
        self.principals.pop(uid, None)
        if with_tenant:
            self.tenants.pop(uid, None)

    async def update_role(self, uid: str, role: Role, scope_ref: str | None) -> bool:
        self._write()
        p = self.principals.get(uid)
        if p is None:
            return False
        p.role = role
        p.resource_scope_ref = scope_ref
        return True

    async def mark_blocked(self, uid: str) -> bool:
        self._write()
        p = self.principals.get(uid)
        if p is None:
            return False
        p.blocked = True
        return True


class FakeTenantDirectory:
    """Tenant lookup backed by a FakePrincipalRepository's tenants (or a plain dict)."""

    def __init__(self, tenants: dict[str, BusinessTenantEntity] | None = None) -> None:
        self.tenants = tenants if tenants is not None else {}

    def add(self, tenant_id: str, members: list[str], name: str = "Tenant") -> None:
        self.tenants[tenant_id] = BusinessTenantEntity(
            id=tenant_id, name=name, owner_uid=tenant_id, associated_user_ids=list(members)
        )

    async def get_tenant(self, tenant_id: str) -> BusinessTenantResult | None:
        t = self.tenants.get(tenant_id)
        if t is None:
            return None
        return BusinessTenantResult(
            id=t.id,
            name=t.name,
            owner_uid=t.owner_uid,
            associated_user_ids=frozenset(t.associated_user_ids),
        )


class FakeDocumentStore:
    """In-memory document store keyed by (collection, id)."""

    def __init__(self) -> None:
        self.docs: dict[tuple[Collection, str], dict[str, Any]] = {}

    def put(self, collection: Collection, doc_id: str, data: dict[str, Any]) -> None:
        self.docs[(collection, doc_id)] = dict(data)

    async def get(self, collection: Collection, doc_id: str) -> dict[str, Any] | None:
        doc = self.docs.get((collection, doc_id))
        return dict(doc) if doc is not None else None

    async def create(self, collection: Collection, data: dict[str, Any]) -> str:
        doc_id = generate_cuid()
        self.docs[(collection, doc_id)] = dict(data)
        return doc_id

    async def update(
        self, collection: Collection, doc_id: str, patch: dict[str, Any]
    ) -> bool:
        doc = self.docs.get((collection, doc_id))
        if doc is None:
            return False
        doc.update(patch)
        return True

    async def delete(self, collection: Collection, doc_id: str) -> None:
        self.docs.pop((collection, doc_id), None)


async def _no_sleep(_: float) -> None:
    return None


@pytest.fixture
def identity() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
def principal_repo() -> FakePrincipalRepository:
    return FakePrincipalRepository()


@pytest.fixture
def tenant_directory(principal_repo: FakePrincipalRepository) -> FakeTenantDirectory:
    """Shares the tenants dict with principal_repo, like the two Firestore adapters do."""
    return FakeTenantDirectory(principal_repo.tenants)


@pytest.fixture
def document_store() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def policy(tenant_directory: FakeTenantDirectory) -> PolicyEngine:
    return PolicyEngine(tenant_directory)


@pytest.fixture
def lifecycle(
    identity: FakeIdentityProvider, principal_repo: FakePrincipalRepository
) -> AccountLifecycleService:
    return AccountLifecycleService(
        identity=identity,
        principal_repo=principal_repo,
        operator_login_domain=OPERATOR_DOMAIN,
    )


@pytest.fixture
def bootstrap(
    identity: FakeIdentityProvider, principal_repo: FakePrincipalRepository
) -> BootstrapHandler:
    return BootstrapHandler(
        identity=identity,
        principal_repo=principal_repo,
        recheck_delay_seconds=0,
        sleep=_no_sleep,
    )


@pytest.fixture
def gateway(
    document_store: FakeDocumentStore, policy: PolicyEngine
) -> DocumentAccessService:
    return DocumentAccessService(store=document_store, policy=policy)


@pytest.fixture
def admin() -> Caller:
    return Caller(uid="admin-1", role=Role.ADMIN)


@pytest.fixture
def anonymous() -> Caller:
    return Caller.anonymous()


@pytest.fixture
def wired_app(
    identity: FakeIdentityProvider,
    lifecycle: AccountLifecycleService,
    bootstrap: BootstrapHandler,
    gateway: DocumentAccessService,
):
    """The app with every Firebase-backed dependency replaced by the fakes."""
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_account_lifecycle_service] = lambda: lifecycle
    app.dependency_overrides[get_bootstrap_handler] = lambda: bootstrap
    app.dependency_overrides[get_document_access_service] = lambda: gateway
    limiter.reset()
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def session_headers():
    """Build Authorization headers carrying a session token for the given claims."""
    codec = ClaimCodec()

    def _headers(uid: str, role: Role, scope_ref: str | None = None) -> dict[str, str]:
        return {"Authorization": f"Bearer {codec.issue(uid, role, scope_ref)}"}

    return _headers


@pytest.fixture
async def client(wired_app) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=wired_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def bare_client() -> AsyncClient:
    """Client without dependency overrides (Firebase is not configured)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
