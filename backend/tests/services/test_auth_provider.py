"""
Unit tests for SupabaseAuthClient.

The provider is replaced by an httpx.MockTransport, so requests never
leave the process.
"""

import json

import httpx
import pytest

from app.services.auth_provider import (
    AuthProviderError,
    AuthProviderUnavailable,
    SupabaseAuthClient,
)

USER = {"id": "0b6c6f0e-8f3b-4d4e-9a52-2f1d3c5e8a90", "email": "parent@example.com"}


def make_client(handler, service_role_key=None) -> SupabaseAuthClient:
    return SupabaseAuthClient(
        base_url="https://auth.example.com/",
        anon_key="anon-key",
        service_role_key=service_role_key,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
class TestSupabaseAuthClient:

    async def test_sign_up_sends_credentials_with_anon_key(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["apikey"] = request.headers["apikey"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=USER)

        user = await make_client(handler).sign_up("parent@example.com", "secret1")

        assert user == USER
        assert seen["url"] == "https://auth.example.com/auth/v1/signup"
        assert seen["apikey"] == "anon-key"
        assert seen["body"] == {"email": "parent@example.com", "password": "secret1"}

    async def test_sign_up_unwraps_session_response(self):
        def handler(request):
            return httpx.Response(200, json={"access_token": "a", "user": USER})

        assert await make_client(handler).sign_up("parent@example.com", "secret1") == USER

    async def test_password_login_uses_grant_type(self):
        def handler(request):
            assert request.url.params["grant_type"] == "password"
            return httpx.Response(200, json={"access_token": "a", "refresh_token": "r", "user": USER})

        data = await make_client(handler).sign_in_with_password("parent@example.com", "secret1")

        assert data["refresh_token"] == "r"

    async def test_rejection_carries_provider_message(self):
        def handler(request):
            return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Invalid login credentials"})

        with pytest.raises(AuthProviderError) as exc_info:
            await make_client(handler).sign_in_with_password("parent@example.com", "wrong")

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid login credentials"

    async def test_refresh(self):
        def handler(request):
            assert request.url.params["grant_type"] == "refresh_token"
            assert json.loads(request.content) == {"refresh_token": "r1"}
            return httpx.Response(200, json={"access_token": "a2", "refresh_token": "r2"})

        data = await make_client(handler).refresh_session("r1")

        assert data["access_token"] == "a2"

    async def test_network_failure_is_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AuthProviderUnavailable):
            await make_client(handler).refresh_session("r1")

    async def test_admin_lookup_uses_service_role_key(self):
        def handler(request):
            assert request.headers["Authorization"] == "Bearer service-key"
            assert request.url.path == f"/auth/v1/admin/users/{USER['id']}"
            return httpx.Response(200, json=USER)

        client = make_client(handler, service_role_key="service-key")

        assert client.can_lookup_users is True
        assert await client.get_user_by_id(USER["id"]) == USER

    async def test_admin_lookup_missing_user(self):
        def handler(request):
            return httpx.Response(404, json={"msg": "User not found"})

        client = make_client(handler, service_role_key="service-key")

        assert await client.get_user_by_id(USER["id"]) is None

    async def test_lookup_requires_service_role_key(self):
        assert make_client(lambda request: httpx.Response(200)).can_lookup_users is False
