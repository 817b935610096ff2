"""Tests for SupabaseAuthClient against a mocked auth service."""
import json

import httpx
import pytest

from app.services.auth_client import AuthenticationError, SupabaseAuthClient

USER = {"id": "6f1c2b0e-3c1e-4b7a-9a55-0d4c7f0e2a11", "email": "fan@example.com"}


def _handler(request: httpx.Request) -> httpx.Response:
    assert request.headers["apikey"] == "anon-key"

    if request.url.path == "/auth/v1/token":
        assert request.url.params["grant_type"] == "password"
        body = json.loads(request.content)
        if body["password"] != "correct-horse":
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})
        return httpx.Response(200, json={
            "access_token": "token-123",
            "refresh_token": "refresh-456",
            "expires_in": 3600,
            "user": USER,
        })

    if request.url.path == "/auth/v1/user":
        if request.headers.get("Authorization") != "Bearer token-123":
            return httpx.Response(401, json={"msg": "invalid JWT"})
        return httpx.Response(200, json=USER)

    return httpx.Response(404)


@pytest.fixture
def client() -> SupabaseAuthClient:
    return SupabaseAuthClient(
        base_url="https://auth.example.test/",
        anon_key="anon-key",
        timeout=5.0,
        transport=httpx.MockTransport(_handler),
    )


@pytest.mark.asyncio
async def test_sign_in_returns_session(client):
    session = await client.sign_in("fan@example.com", "correct-horse")

    assert session.access_token == "token-123"
    assert session.refresh_token == "refresh-456"
    assert session.user["id"] == USER["id"]


@pytest.mark.asyncio
async def test_sign_in_with_wrong_password(client):
    with pytest.raises(AuthenticationError, match="Invalid login credentials"):
        await client.sign_in("fan@example.com", "wrong")


@pytest.mark.asyncio
async def test_get_user_with_valid_token(client):
    assert await client.get_user("token-123") == USER


@pytest.mark.asyncio
async def test_get_user_with_invalid_token(client):
    with pytest.raises(AuthenticationError, match="invalid JWT"):
        await client.get_user("forged")


@pytest.mark.asyncio
async def test_unconfigured_service_fails_closed():
    client = SupabaseAuthClient(base_url="", anon_key="")

    with pytest.raises(AuthenticationError):
        await client.get_user("token-123")
