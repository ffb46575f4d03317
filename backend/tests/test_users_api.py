"""
UserHub Backend — HTTP API Tests
==================================

What:  End-to-end request tests through the full middleware and handler stack.
How:   HTTPX AsyncClient over ASGITransport; storage is the in-memory
       repository (or an AsyncMock when a failure needs simulating).

What we test:
    ✅ GET /api/users/{id}: 200 with exactly the public fields, 404 empty, 400 malformed
    ✅ POST / PATCH / DELETE status codes and headers
    ✅ Error bodies carry the request ID and never leak storage details
    ✅ Unexpected exceptions still answer 500 with the X-Request-ID header
    ✅ GET /health: 200 healthy, 503 when storage is unreachable
"""

import logging
import uuid

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from userhub.api.middleware.logging import level_for_status
from userhub.api.middleware.request_id import RequestIdLogFilter
from userhub.bootstrap import services_for_repository
from userhub.main import create_app
from userhub.shared.exceptions import ConflictError, DatabaseError


@pytest_asyncio.fixture
async def mock_client(mock_repository):
    """
    Client over an app whose repository is an AsyncMock.

    Unhandled exceptions are answered by the app (500) instead of being
    re-raised into the test.
    """
    app = create_app(services=services_for_repository(mock_repository))
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class TestGetUser:

    @pytest.mark.asyncio
    async def test_existing_user(self, test_client, alice_id):
        response = await test_client.get(f"/api/users/{alice_id}")

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"id", "name", "email", "created_at"}
        assert body["id"] == alice_id
        assert body["name"] == "Alice"
        assert body["email"] == "alice@example.com"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_uppercase_identifier_resolves(self, test_client, alice_id):
        response = await test_client.get(f"/api/users/{alice_id.upper()}")
        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_missing_user_is_404_with_empty_body(self, test_client, missing_id):
        response = await test_client.get(f"/api/users/{missing_id}")

        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_malformed_identifier_is_400(self, test_client):
        response = await test_client.get("/api/users/not-a-uuid")

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "invalid_identifier"
        assert body["details"]["field"] == "id"
        assert body["request_id"] == response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_storage_failure_is_generic_500(self, mock_client, mock_repository, alice_id):
        mock_repository.get_by_id.side_effect = DatabaseError(
            context={"operation": "get_by_id", "error_type": "OperationalError"}
        )

        response = await mock_client.get(f"/api/users/{alice_id}")

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "OperationalError" not in response.text
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_unexpected_error_is_500_with_request_id(self, mock_client, mock_repository, alice_id):
        mock_repository.get_by_id.side_effect = RuntimeError("boom")

        response = await mock_client.get(
            f"/api/users/{alice_id}", headers={"X-Request-ID": "trace-1"}
        )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "trace-1"
        assert "boom" not in response.text
        assert response.headers["X-Request-ID"] == "trace-1"

    @pytest.mark.asyncio
    async def test_client_request_id_is_echoed(self, test_client, alice_id):
        response = await test_client.get(
            f"/api/users/{alice_id}", headers={"X-Request-ID": "trace-abc"}
        )
        assert response.headers["X-Request-ID"] == "trace-abc"


class TestListUsers:

    @pytest.mark.asyncio
    async def test_list_sets_total_header(self, test_client, alice_id):
        response = await test_client.get("/api/users")

        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 1
        assert body["limit"] == 20
        assert body["offset"] == 0
        assert [u["id"] for u in body["items"]] == [alice_id]
        assert response.headers["X-Total-Count"] == "1"

    @pytest.mark.asyncio
    async def test_limit_out_of_range_is_422(self, test_client):
        response = await test_client.get("/api/users", params={"limit": 0})
        assert response.status_code == 422


class TestCreateUser:

    @pytest.mark.asyncio
    async def test_create_returns_201_and_location(self, test_client):
        response = await test_client.post(
            "/api/users", json={"name": "Bob", "email": "Bob@Example.com"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "bob@example.com"
        assert uuid.UUID(body["id"])
        assert response.headers["Location"] == f"/api/users/{body['id']}"

        fetched = await test_client.get(response.headers["Location"])
        assert fetched.status_code == 200

    @pytest.mark.asyncio
    async def test_duplicate_email_is_409(self, test_client):
        response = await test_client.post(
            "/api/users", json={"name": "Other", "email": "alice@example.com"}
        )

        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_blank_name_is_400(self, test_client):
        response = await test_client.post(
            "/api/users", json={"name": "   ", "email": "bob@example.com"}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert response.json()["details"]["field"] == "name"

    @pytest.mark.asyncio
    async def test_missing_field_is_422(self, test_client):
        response = await test_client.post("/api/users", json={"name": "Bob"})
        assert response.status_code == 422


class TestUpdateUser:

    @pytest.mark.asyncio
    async def test_patch_name(self, test_client, alice_id):
        response = await test_client.patch(
            f"/api/users/{alice_id}", json={"name": "Alice Liddell"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Alice Liddell"

    @pytest.mark.asyncio
    async def test_patch_missing_is_404(self, test_client, missing_id):
        response = await test_client.patch(f"/api/users/{missing_id}", json={"name": "X"})

        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_concurrent_update_is_409(self, mock_client, mock_repository, alice_id):
        mock_repository.update.side_effect = ConflictError(
            message="The user was modified by another request; reload and retry",
            field="version",
        )

        response = await mock_client.patch(f"/api/users/{alice_id}", json={"name": "Al"})

        assert response.status_code == 409
        assert response.json()["details"]["field"] == "version"

    @pytest.mark.asyncio
    async def test_empty_patch_is_400(self, test_client, alice_id):
        response = await test_client.patch(f"/api/users/{alice_id}", json={})
        assert response.status_code == 400


class TestDeleteUser:

    @pytest.mark.asyncio
    async def test_delete_then_gone(self, test_client, alice_id):
        deleted = await test_client.delete(f"/api/users/{alice_id}")
        assert deleted.status_code == 204

        fetched = await test_client.get(f"/api/users/{alice_id}")
        assert fetched.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_is_404(self, test_client, missing_id):
        response = await test_client.delete(f"/api/users/{missing_id}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_malformed_is_400(self, test_client):
        response = await test_client.delete("/api/users/123")
        assert response.status_code == 400


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["storage"] == "connected"

    @pytest.mark.asyncio
    async def test_storage_down_is_503(self, mock_client, mock_repository):
        mock_repository.ping.return_value = False

        response = await mock_client.get("/health")

        assert response.status_code == 503
        assert response.json()["storage"] == "disconnected"


class TestMiddleware:

    @pytest.mark.parametrize(
        "status_code,level",
        [(200, logging.INFO), (204, logging.INFO), (404, logging.WARNING), (503, logging.ERROR)],
    )
    def test_access_log_level_by_status(self, status_code, level):
        assert level_for_status(status_code) == level

    def test_log_filter_defaults_request_id(self):
        record = logging.LogRecord("t", logging.INFO, __file__, 1, "msg", None, None)
        assert RequestIdLogFilter().filter(record) is True
        assert record.request_id == "-"
