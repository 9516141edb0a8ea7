"""
Auth Provider Client

Thin async client for the auth provider's REST API (Supabase GoTrue):

- POST /auth/v1/signup                          create an account
- POST /auth/v1/token?grant_type=password       email/password login
- POST /auth/v1/token?grant_type=refresh_token  refresh a session
- GET  /auth/v1/admin/users/{id}                look up an account (service role)

Request authentication checks tokens locally (app.core.auth); this client
is only used by the auth routes and by account lookups.
"""

from functools import lru_cache
from typing import Any, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import UnexpectedError
from app.core.logging import get_logger

logger = get_logger(__name__)


class AuthProviderError(Exception):
    """The provider rejected a request (bad credentials, duplicate account...)."""

    def __init__(self, message: str, status_code: int):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthProviderUnavailable(AuthProviderError):
    """The provider could not be reached."""


class SupabaseAuthClient:
    """GoTrue REST client."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport

    @property
    def can_lookup_users(self) -> bool:
        return bool(self.service_role_key)

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
        admin: bool = False,
    ) -> dict[str, Any]:
        key = self.service_role_key if admin else self.anon_key
        headers = {"apikey": key, "Authorization": f"Bearer {key}"}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, path, json=json, params=params, headers=headers)
        except httpx.HTTPError as e:
            logger.error("auth_provider_unreachable", path=path, error=str(e))
            raise AuthProviderUnavailable("Auth provider unavailable", status_code=503) from e

        if response.is_error:
            message = _error_message(response)
            logger.info("auth_provider_rejected", path=path, status=response.status_code, message=message)
            raise AuthProviderError(message, status_code=response.status_code)

        return response.json()

    # ========================================
    # Operations
    # ========================================

    async def sign_up(self, email: str, password: str) -> dict[str, Any]:
        """Create an account. Returns the provider's user object."""
        data = await self._request("POST", "/auth/v1/signup", json={"email": email, "password": password})
        # With email confirmation disabled the provider answers with a session that wraps the user
        return data.get("user", data)

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Log in. Returns the session (access_token, refresh_token, expires_in, user...)."""
        return await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

    async def refresh_session(self, refresh_token: str) -> dict[str, Any]:
        return await self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": refresh_token},
        )

    async def get_user_by_id(self, user_id: str) -> Optional[dict[str, Any]]:
        """Admin lookup; None if the account does not exist."""
        try:
            return await self._request("GET", f"/auth/v1/admin/users/{user_id}", admin=True)
        except AuthProviderError as e:
            if e.status_code == 404:
                return None
            raise


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or "Auth provider error"
    for field in ("msg", "error_description", "message", "error"):
        if isinstance(body.get(field), str) and body[field]:
            return body[field]
    return "Auth provider error"


@lru_cache
def get_optional_auth_client() -> Optional[SupabaseAuthClient]:
    """The auth provider client, or None when SUPABASE_URL is not configured."""
    if not settings.SUPABASE_URL or not settings.SUPABASE_ANON_KEY:
        return None
    return SupabaseAuthClient(
        base_url=settings.SUPABASE_URL,
        anon_key=settings.SUPABASE_ANON_KEY,
        service_role_key=settings.SUPABASE_SERVICE_ROLE_KEY,
        timeout=settings.AUTH_REQUEST_TIMEOUT_SECONDS,
    )


def get_auth_client() -> SupabaseAuthClient:
    """FastAPI dependency returning the auth provider client."""
    client = get_optional_auth_client()
    if client is None:
        raise UnexpectedError("Auth provider is not configured")
    return client
