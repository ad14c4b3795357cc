"""Tests for request ID / security headers middleware and CORS configuration."""

import pytest
from httpx import ASGITransport, AsyncClient


@pytest.mark.asyncio
async def test_security_headers_present(mock_settings):
    """Every response includes security headers."""
    from postboard.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/health")

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


@pytest.mark.asyncio
async def test_security_headers_on_error_responses(client):
    """Handled errors carry the headers too."""
    response = await client.get("/posts/12345")

    assert response.status_code == 404
    assert response.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_request_id_is_echoed(mock_settings):
    from postboard.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/health", headers={"X-Request-ID": "abc-123"})

    assert response.headers["X-Request-ID"] == "abc-123"


@pytest.mark.asyncio
async def test_request_id_is_generated_when_absent(mock_settings):
    from postboard.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.get("/health")

    assert len(response.headers["X-Request-ID"]) == 36


@pytest.mark.asyncio
async def test_cors_allows_explicit_methods(mock_settings):
    """CORS preflight returns explicit methods, not wildcard."""
    from postboard.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.options(
            "/posts",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "PUT",
            },
        )

    allowed = response.headers.get("Access-Control-Allow-Methods", "")
    assert "PUT" in allowed
    assert "DELETE" in allowed
    # Wildcard should not be present
    assert allowed != "*"


@pytest.mark.asyncio
async def test_cors_allows_authorization_header(mock_settings):
    """CORS preflight allows the bearer token header."""
    from postboard.main import app

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        response = await client.options(
            "/posts",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Authorization",
            },
        )

    assert response.status_code == 200
    allowed = response.headers.get("Access-Control-Allow-Headers", "").lower()
    assert "authorization" in allowed
