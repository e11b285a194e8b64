"""
Integration tests for the health and root endpoints
"""
import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["health"] == "/health"


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    body = response.json()
    assert body["status"] == "healthy"
    assert body["environment"] == "testing"


@pytest.mark.asyncio
async def test_api_health(client: AsyncClient):
    response = await client.get("/api/v1/health")

    assert response.json() == {"status": "healthy", "service": "BSAP Statistics API"}


@pytest.mark.asyncio
async def test_liveness(client: AsyncClient):
    response = await client.get("/api/v1/health/live")

    assert response.json()["status"] == "alive"


@pytest.mark.asyncio
async def test_readiness_with_schema(client: AsyncClient):
    response = await client.get("/api/v1/health/ready")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["checks"]["database"]["tables_ready"] is True


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient):
    response = await client.get("/api/v1/does-not-exist")

    assert response.status_code == 404
    body = response.json()
    assert body["status"] == "ERROR"
    assert body["code"] == "HTTP_ERROR"


@pytest.mark.asyncio
async def test_security_headers(client: AsyncClient):
    response = await client.get("/health")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc12345"})

    assert response.headers["x-request-id"] == "abc12345"
    assert response.headers["x-response-time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_generated_when_missing(client: AsyncClient):
    response = await client.get("/health")

    assert len(response.headers["x-request-id"]) == 8


@pytest.mark.asyncio
async def test_oversized_body_rejected(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/login",
        content=b"x" * (10 * 1024 * 1024 + 1),
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 413
    assert response.json()["code"] == "REQUEST_TOO_LARGE"
