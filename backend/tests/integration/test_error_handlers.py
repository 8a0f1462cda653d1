"""Tests for the error envelope produced by the global exception handlers."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.domain.exceptions import BusinessRuleViolationError
from app.infrastructure.dependencies import get_entity_service
from app.main import app
from tests.auth_tokens import auth_headers


class _ExplodingService:
    async def list_entities(self, identity, page_request):
        raise RuntimeError("SELECT * FROM entities -- password=hunter2")

    async def get_entity(self, identity, entity_id):
        raise BusinessRuleViolationError("Entity is locked")


@pytest.fixture
def exploding_service():
    app.dependency_overrides[get_entity_service] = lambda: _ExplodingService()
    yield
    app.dependency_overrides.pop(get_entity_service, None)


@pytest.mark.asyncio
async def test_unexpected_error_is_generic_500(exploding_service):
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/entities", headers=auth_headers())

    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "INTERNAL_SERVER_ERROR"
    assert body["correlationId"] in body["message"]
    assert "SELECT" not in response.text
    assert "hunter2" not in response.text
    assert "details" not in body


@pytest.mark.asyncio
async def test_non_conflict_business_rule_is_400(exploding_service):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get(
            "/api/v1/entities/4f1f2d8e-1111-4c4c-9c9c-000000000001", headers=auth_headers(),
        )

    assert response.status_code == 400
    assert response.json()["code"] == "BUSINESS_RULE_VIOLATION"


@pytest.mark.asyncio
async def test_correlation_ids_are_unique_per_failure():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        first = await client.get("/api/v1/entities")
        second = await client.get("/api/v1/entities")

    assert first.status_code == second.status_code == 401
    assert first.json()["correlationId"] != second.json()["correlationId"]


@pytest.mark.asyncio
async def test_wrong_method_is_405_with_envelope():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.put("/api/v1/entities", headers=auth_headers())

    assert response.status_code == 405
    body = response.json()
    assert body["code"] == "METHOD_NOT_ALLOWED"
    assert body["message"] == "Method Not Allowed"
    assert body["correlationId"]
    assert "detail" not in body
    assert response.headers["allow"]


@pytest.mark.asyncio
async def test_unknown_route_is_404_with_envelope():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/api/v1/no-such-thing")

    assert response.status_code == 404
    body = response.json()
    assert body["code"] == "RESOURCE_NOT_FOUND"
    assert body["correlationId"]
    assert "detail" not in body
