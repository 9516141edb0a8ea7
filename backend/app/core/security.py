"""
Access-token utilities.

Access tokens are issued by the auth provider (Supabase-compatible) as
HS256-signed JWTs. We never issue tokens for real accounts; we only verify
them with the project's JWT secret (python-jose).

Claims we rely on:
------------------
- sub: account id (UUID string)
- aud: "authenticated" for signed-in users
- exp: expiry, enforced by jose
- email: optional, informational

References:
-----------
- JWT Standard: https://jwt.io/introduction
- python-jose: https://python-jose.readthedocs.io/
"""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt

from app.core.config import settings


def decode_access_token(token: str) -> dict[str, Any] | None:
    """
    Decode and verify a provider-issued access token.

    Checks signature, algorithm, expiry and audience.

    Args:
        token: JWT string from the Authorization header

    Returns:
        Dictionary of claims if valid, None if invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.SUPABASE_JWT_AUDIENCE,
        )
    except JWTError:
        return None


def create_access_token(
    subject: str,
    email: str | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Sign a token shaped like the provider's.

    Only used for local development and tests, where no provider is running.

    Example:
        >>> token = create_access_token("0b6c...-uuid", email="kid@example.com")
        >>> decode_access_token(token)["sub"]
        '0b6c...-uuid'
    """
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=1))
    claims: dict[str, Any] = {
        "sub": subject,
        "aud": settings.SUPABASE_JWT_AUDIENCE,
        "role": "authenticated",
        "exp": expire,
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
