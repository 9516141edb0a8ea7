"""
Authentication dependencies for FastAPI.

This module provides:
- Identity: the authenticated account as seen by route handlers
- IdentityProvider: the injected capability that turns a bearer credential
  into an Identity (or raises AuthenticationError)
- get_current_identity: dependency used by every protected route

Accounts live in the external auth provider, not in our database. Profiles
reference them by `user_id` (the token's `sub` claim).

Testing:
--------
Override `get_identity_provider` to substitute a fake:

    app.dependency_overrides[get_identity_provider] = lambda: FakeProvider()

References:
-----------
- FastAPI Security: https://fastapi.tiangolo.com/tutorial/security/
"""

from dataclasses import dataclass
from typing import Annotated, Optional, Protocol

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import AuthenticationError
from app.core.security import decode_access_token

# ================================
# Bearer Scheme
# ================================

# auto_error=False so a missing header becomes our own 401 body
# instead of FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


# ================================
# Identity
# ================================

@dataclass(frozen=True)
class Identity:
    """An authenticated account."""

    id: str
    email: Optional[str] = None


class IdentityProvider(Protocol):
    """Resolves a bearer credential into an Identity."""

    def authenticate(self, token: str) -> Identity:
        """Return the identity for `token` or raise AuthenticationError."""
        ...


class JWTIdentityProvider:
    """
    Verifies provider-issued JWTs locally.

    The token signature is checked against SUPABASE_JWT_SECRET, so no
    network round trip is needed per request.
    """

    def authenticate(self, token: str) -> Identity:
        payload = decode_access_token(token)
        if payload is None:
            raise AuthenticationError("Invalid or expired token")

        subject: str | None = payload.get("sub")
        if not subject:
            raise AuthenticationError("Invalid or expired token")

        # UUIDs compare case-insensitively; every ownership check relies on this
        return Identity(id=subject.lower(), email=payload.get("email"))


_identity_provider = JWTIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    """Dependency returning the identity provider (overridable in tests)."""
    return _identity_provider


# ================================
# Route Dependencies
# ================================

async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    provider: IdentityProvider = Depends(get_identity_provider),
) -> Identity:
    """
    Get the authenticated identity for the current request.

    Raises:
        AuthenticationError (401): header missing, malformed, or token rejected
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Unauthorized")

    return provider.authenticate(credentials.credentials)


CurrentIdentity = Annotated[Identity, Depends(get_current_identity)]
