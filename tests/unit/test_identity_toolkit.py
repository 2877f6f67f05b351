"""IdentityToolkitClient: request shapes and provider error-code mapping."""

import json

import httpx
import pytest

from app.application.interfaces.services import (
    AccountExistsError,
    AccountNotFoundError,
    IdentityProviderError,
    InvalidIdTokenError,
)
from app.infrastructure.firebase import identity_toolkit
from app.infrastructure.firebase.identity_toolkit import IdentityToolkitClient

BASE = "/v1/projects/p1/accounts"


def _error(message: str, status: int = 400) -> httpx.Response:
    return httpx.Response(status, json={"error": {"code": status, "message": message}})


def _client(handler) -> tuple[IdentityToolkitClient, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def record(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = IdentityToolkitClient(
        "p1", credentials=None, http_client=httpx.AsyncClient(transport=httpx.MockTransport(record))
    )

    async def token() -> str:
        return "test-token"

    client.get_token = token
    return client, seen


async def test_create_account_returns_local_id() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"localId": "u1"}))
    uid = await client.create_account("a@example.com", "secret1", "Ana")
    assert uid == "u1"
    assert seen[0].url.path == BASE
    assert json.loads(seen[0].content) == {
        "email": "a@example.com",
        "password": "secret1",
        "displayName": "Ana",
    }
    assert seen[0].headers["Authorization"] == "Bearer test-token"


async def test_create_account_email_exists() -> None:
    client, _ = _client(lambda r: _error("EMAIL_EXISTS"))
    with pytest.raises(AccountExistsError) as exc_info:
        await client.create_account("a@example.com", "secret1")
    assert exc_info.value.code == "EMAIL_EXISTS"


async def test_delete_missing_account() -> None:
    client, seen = _client(lambda r: _error("USER_NOT_FOUND"))
    with pytest.raises(AccountNotFoundError):
        await client.delete_account("u1")
    assert seen[0].url.path == f"{BASE}:delete"


async def test_other_errors_keep_their_code() -> None:
    client, _ = _client(lambda r: _error("WEAK_PASSWORD : Password should be at least 6 characters"))
    with pytest.raises(IdentityProviderError) as exc_info:
        await client.create_account("a@example.com", "x")
    assert exc_info.value.code == "WEAK_PASSWORD"
    assert not isinstance(exc_info.value, AccountExistsError)


async def test_error_without_body_uses_status() -> None:
    client, _ = _client(lambda r: httpx.Response(503, content=b"unavailable"))
    with pytest.raises(IdentityProviderError) as exc_info:
        await client.disable_account("u1")
    assert exc_info.value.code == "HTTP_503"


async def test_set_custom_claims_serializes_attributes() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"localId": "u1"}))
    await client.set_custom_claims("u1", {"role": "business_operator", "scopeRef": "tenants/u1"})
    body = json.loads(seen[0].content)
    assert seen[0].url.path == f"{BASE}:update"
    assert body["localId"] == "u1"
    assert json.loads(body["customAttributes"]) == {
        "role": "business_operator",
        "scopeRef": "tenants/u1",
    }


async def test_disable_account() -> None:
    client, seen = _client(lambda r: httpx.Response(200, json={"localId": "u1"}))
    await client.disable_account("u1")
    assert json.loads(seen[0].content) == {"localId": "u1", "disableUser": True}


async def test_get_account_parses_claims() -> None:
    client, _ = _client(lambda r: httpx.Response(200, json={"users": [{
        "localId": "u1",
        "email": "a@example.com",
        "disabled": True,
        "customAttributes": '{"role": "sales_agent"}',
    }]}))
    account = await client.get_account("u1")
    assert account is not None
    assert account.email == "a@example.com"
    assert account.disabled is True
    assert account.custom_claims == {"role": "sales_agent"}


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={}),
        httpx.Response(200, json={"users": []}),
        _error("USER_NOT_FOUND"),
    ],
)
async def test_get_missing_account_is_none(response) -> None:
    client, _ = _client(lambda r: response)
    assert await client.get_account("u1") is None


async def test_malformed_claims_are_ignored() -> None:
    client, _ = _client(lambda r: httpx.Response(200, json={"users": [{
        "localId": "u1",
        "customAttributes": "{not json",
    }]}))
    account = await client.get_account("u1")
    assert account is not None
    assert account.custom_claims == {}


async def test_verify_id_token_maps_value_error(monkeypatch) -> None:
    def reject(id_token: str, project_id: str) -> dict:
        raise ValueError("Token expired")

    monkeypatch.setattr(identity_toolkit, "_verify_firebase_token", reject)
    client, _ = _client(lambda r: httpx.Response(200))
    with pytest.raises(InvalidIdTokenError):
        await client.verify_id_token("tok")


async def test_verify_id_token_passes_project_as_audience(monkeypatch) -> None:
    seen = {}

    def accept(id_token: str, project_id: str) -> dict:
        seen["audience"] = project_id
        return {"sub": "u1"}

    monkeypatch.setattr(identity_toolkit, "_verify_firebase_token", accept)
    client, _ = _client(lambda r: httpx.Response(200))
    assert await client.verify_id_token("tok") == {"sub": "u1"}
    assert seen["audience"] == "p1"
