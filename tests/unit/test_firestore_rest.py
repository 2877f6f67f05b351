"""Firestore REST client and repositories against an httpx.MockTransport."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from app.domain.entities.principal import BusinessTenantEntity, PrincipalEntity
from app.domain.enums import Collection, Role
from app.infrastructure.firebase._rest_client import DocumentExistsError, FirestoreRESTClient
from app.infrastructure.firebase._rest_encoding import decode_document, encode_fields
from app.infrastructure.firebase.repositories import (
    FirestoreDocumentStore,
    FirestorePrincipalRepository,
    FirestoreTenantDirectory,
)

PREFIX = "projects/p1/databases/(default)/documents"


class Recorder:
    """Records requests and answers from a queue of (status, json) responses."""

    def __init__(self, *responses: tuple[int, dict | None]) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self._responses.pop(0) if self._responses else (200, {})
        return httpx.Response(status, json=body) if body is not None else httpx.Response(status)

    def body(self, i: int = -1) -> dict:
        return json.loads(self.requests[i].content)


def _client(recorder: Recorder) -> FirestoreRESTClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    client = FirestoreRESTClient("p1", credentials=None, http_client=http)

    async def token() -> str:
        return "test-token"

    client.get_token = token
    return client


class TestEncoding:
    def test_scalar_and_nested_values(self) -> None:
        ts = datetime(2025, 1, 2, 3, 4, 5, 123456, tzinfo=UTC)
        fields = encode_fields({
            "s": "x",
            "n": 3,
            "b": True,
            "f": 1.5,
            "none": None,
            "t": ts,
            "list": ["a", 1],
            "map": {"k": "v"},
        })
        assert fields["n"] == {"integerValue": "3"}
        assert fields["b"] == {"booleanValue": True}
        assert fields["t"] == {"timestampValue": "2025-01-02T03:04:05.123456Z"}
        assert decode_document(fields) == {
            "s": "x",
            "n": 3,
            "b": True,
            "f": 1.5,
            "none": None,
            "t": ts,
            "list": ["a", 1],
            "map": {"k": "v"},
        }

    def test_nanosecond_timestamps_and_references_decode(self) -> None:
        decoded = decode_document({
            "t": {"timestampValue": "2025-01-02T03:04:05.123456789Z"},
            "owner": {"referenceValue": f"{PREFIX}/tenants/t1"},
        })
        assert decoded["t"] == datetime(2025, 1, 2, 3, 4, 5, 123456, tzinfo=UTC)
        assert decoded["owner"] == f"{PREFIX}/tenants/t1"

    def test_unsupported_type(self) -> None:
        with pytest.raises(TypeError):
            encode_fields({"x": object()})


class TestRESTClient:
    async def test_update_sends_mask_and_precondition(self) -> None:
        rec = Recorder((200, {"name": "x"}))
        ok = await _client(rec).collection("principals").document("u1").update({"role": "admin"})
        assert ok is True
        req = rec.requests[0]
        assert req.method == "PATCH"
        assert req.url.path.endswith(f"{PREFIX}/principals/u1")
        assert req.url.params.get_list("updateMask.fieldPaths") == ["role"]
        assert req.url.params["currentDocument.exists"] == "true"
        assert req.headers["Authorization"] == "Bearer test-token"

    async def test_update_missing_document_returns_false(self) -> None:
        rec = Recorder((404, {"error": {"status": "NOT_FOUND"}}))
        assert await _client(rec).collection("principals").document("u1").update({"a": 1}) is False

    async def test_get_missing_returns_none(self) -> None:
        rec = Recorder((404, None))
        assert await _client(rec).collection("tenants").document("t1").get() is None

    async def test_create_conflict_raises(self) -> None:
        rec = Recorder((409, {"error": {"status": "ALREADY_EXISTS"}}))
        with pytest.raises(DocumentExistsError):
            await _client(rec).collection("assets").create("a1", {"x": 1})

    async def test_batch_write_body(self) -> None:
        rec = Recorder((200, {"writeResults": []}))
        await _client(rec).batch_write([
            {"path": "principals/u1", "data": {"role": "admin"}},
            {"path": "tenants/u1", "delete": True},
        ])
        assert rec.requests[0].url.path.endswith(f"{PREFIX}:commit")
        assert rec.body() == {
            "writes": [
                {
                    "update": {
                        "name": f"{PREFIX}/principals/u1",
                        "fields": {"role": {"stringValue": "admin"}},
                    }
                },
                {"delete": f"{PREFIX}/tenants/u1"},
            ]
        }

    async def test_server_error_propagates(self) -> None:
        rec = Recorder((500, {"error": {}}))
        with pytest.raises(httpx.HTTPStatusError):
            await _client(rec).collection("tenants").document("t1").get()


class TestPrincipalRepository:
    async def test_save_with_tenant_is_one_commit(self) -> None:
        rec = Recorder()
        repo = FirestorePrincipalRepository(_client(rec))
        principal = PrincipalEntity(
            uid="u1",
            role=Role.BUSINESS_OPERATOR,
            email="acme1@ops.test",
            resource_scope_ref="tenants/u1",
            display_name="Acme",
            username="acme1",
        )
        await repo.save_with_tenant(principal, BusinessTenantEntity(id="u1", name="Acme", owner_uid="u1"))

        assert len(rec.requests) == 1
        writes = rec.body()["writes"]
        principal_fields = writes[0]["update"]["fields"]
        tenant_fields = writes[1]["update"]["fields"]
        assert principal_fields["role"] == {"stringValue": "business_operator"}
        assert principal_fields["resourceScopeRef"] == {"stringValue": "tenants/u1"}
        assert principal_fields["username"] == {"stringValue": "acme1"}
        assert tenant_fields["associatedUserIds"] == {
            "arrayValue": {"values": [{"stringValue": "u1"}]}
        }
        assert tenant_fields["ownerUid"] == {"stringValue": "u1"}

    async def test_delete_with_tenant(self) -> None:
        rec = Recorder()
        await FirestorePrincipalRepository(_client(rec)).delete("u1", with_tenant=True)
        assert rec.body()["writes"] == [
            {"delete": f"{PREFIX}/principals/u1"},
            {"delete": f"{PREFIX}/tenants/u1"},
        ]

    async def test_get_parses_role(self) -> None:
        rec = Recorder((200, {
            "name": f"{PREFIX}/principals/u1",
            "fields": {
                "role": {"stringValue": "sales_agent"},
                "blocked": {"booleanValue": False},
                "resourceScopeRef": {"nullValue": None},
            },
        }))
        result = await FirestorePrincipalRepository(_client(rec)).get("u1")
        assert result is not None
        assert result.uid == "u1"
        assert result.role == Role.SALES_AGENT
        assert result.resource_scope_ref is None

    async def test_update_role_writes_three_fields(self) -> None:
        rec = Recorder((200, {"name": "x"}))
        repo = FirestorePrincipalRepository(_client(rec))
        assert await repo.update_role("u1", Role.ADMIN, None) is True
        assert sorted(rec.requests[0].url.params.get_list("updateMask.fieldPaths")) == [
            "resourceScopeRef",
            "role",
            "updatedAt",
        ]


class TestTenantDirectory:
    async def test_get_tenant_members(self) -> None:
        rec = Recorder((200, {
            "name": f"{PREFIX}/tenants/t1",
            "fields": {
                "name": {"stringValue": "Acme"},
                "ownerUid": {"stringValue": "t1"},
                "associatedUserIds": {"arrayValue": {"values": [
                    {"stringValue": "t1"},
                    {"stringValue": "u2"},
                ]}},
            },
        }))
        tenant = await FirestoreTenantDirectory(_client(rec)).get_tenant("t1")
        assert tenant is not None
        assert tenant.associated_user_ids == frozenset({"t1", "u2"})

    async def test_bad_ids_do_not_hit_the_store(self) -> None:
        rec = Recorder()
        directory = FirestoreTenantDirectory(_client(rec))
        assert await directory.get_tenant("") is None
        assert await directory.get_tenant("a/b") is None
        assert rec.requests == []


class TestDocumentStore:
    async def test_create_uses_generated_id(self) -> None:
        rec = Recorder((200, {"name": "x"}))
        doc_id = await FirestoreDocumentStore(_client(rec)).create(
            Collection.ANALYTICS_EVENTS, {"resourceId": "r1"}
        )
        assert doc_id
        req = rec.requests[0]
        assert req.method == "POST"
        assert req.url.path.endswith(f"{PREFIX}/analyticsEvents")
        assert req.url.params["documentId"] == doc_id
