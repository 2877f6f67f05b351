"""Session exchange and refresh: ID token in, signed claim bundle out."""

from httpx import AsyncClient

from app.domain.enums import Role
from app.infrastructure.security.claims import ClaimCodec

BASE = "/api/v1/auth"


async def test_session_for_provisioned_operator(client: AsyncClient, identity) -> None:
    identity.add_account("op-1", claims={"role": "business_operator", "scopeRef": "tenants/op-1"})
    identity.id_tokens["id-token-1"] = "op-1"

    response = await client.post(f"{BASE}/session", json={"id_token": "id-token-1"})

    assert response.status_code == 200
    body = response.json()
    assert body["uid"] == "op-1"
    assert body["role"] == "business_operator"
    assert body["scope_ref"] == "tenants/op-1"
    assert body["token_type"] == "bearer"
    bundle = ClaimCodec().verify(body["access_token"])
    assert bundle.role == Role.BUSINESS_OPERATOR
    assert bundle.scope_ref == "tenants/op-1"


async def test_invalid_id_token_returns_401(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/session", json={"id_token": "forged"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid ID token."


async def test_unprovisioned_account_is_told_to_retry(client: AsyncClient, identity) -> None:
    identity.add_account("new-1")
    identity.id_tokens["t"] = "new-1"
    response = await client.post(f"{BASE}/session", json={"id_token": "t"})
    assert response.status_code == 401
    assert "retry" in response.json()["message"]


async def test_disabled_account_gets_no_session(client: AsyncClient, identity) -> None:
    identity.add_account("cm-1", claims={"role": "content_manager"}, disabled=True)
    identity.id_tokens["t"] = "cm-1"
    response = await client.post(f"{BASE}/session", json={"id_token": "t"})
    assert response.status_code == 401


async def test_empty_id_token_is_rejected(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/session", json={"id_token": ""})
    assert response.status_code == 422


async def test_refresh_picks_up_new_role(client: AsyncClient, identity, session_headers) -> None:
    identity.add_account("u1", claims={"role": "content_manager"})
    response = await client.post(
        f"{BASE}/refresh", headers=session_headers("u1", Role.STANDARD_USER)
    )
    assert response.status_code == 200
    assert response.json()["role"] == "content_manager"


async def test_refresh_requires_session(client: AsyncClient) -> None:
    response = await client.post(f"{BASE}/refresh")
    assert response.status_code == 401
