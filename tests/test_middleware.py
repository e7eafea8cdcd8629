"""Tests for middleware and app-wide error handling."""

import pytest
from httpx import ASGITransport, AsyncClient

from linkvault.db.engine import get_db
from linkvault.main import app


@pytest.mark.asyncio
async def test_security_headers_on_health(client):
    """Health endpoint returns security headers."""
    r = await client.get("/api/health")
    assert r.status_code == 200
    assert r.headers["X-Content-Type-Options"] == "nosniff"
    assert r.headers["X-Frame-Options"] == "DENY"
    assert r.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
    assert r.headers["Cache-Control"] == "no-store"


@pytest.mark.asyncio
async def test_no_hsts_on_http(client):
    """HSTS header is NOT set on HTTP connections (only HTTPS)."""
    r = await client.get("/api/health")
    assert "Strict-Transport-Security" not in r.headers


@pytest.mark.asyncio
async def test_request_id_generated(client):
    """Each request gets a unique X-Request-ID header."""
    r1 = await client.get("/api/health")
    r2 = await client.get("/api/health")
    assert "X-Request-ID" in r1.headers
    assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_request_id_propagated(client):
    """Incoming X-Request-ID is propagated through the response."""
    r = await client.get("/api/health", headers={"X-Request-ID": "trace-12345"})
    assert r.headers["X-Request-ID"] == "trace-12345"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_body(client):
    r = await client.get("/api/nope")
    assert r.status_code == 404
    assert "error" in r.json()


@pytest.mark.asyncio
async def test_unexpected_failure_returns_json_500():
    """An exception nobody handles becomes a generic 500, not a crash."""

    async def broken_db():
        raise RuntimeError("database exploded")
        yield  # pragma: no cover

    app.dependency_overrides[get_db] = broken_db
    try:
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            r = await ac.get("/api/health")
    finally:
        app.dependency_overrides.clear()

    assert r.status_code == 500
    assert r.json() == {"error": "An internal server error occurred."}
