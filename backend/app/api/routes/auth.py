"""
Authentication API endpoints.

Accounts and sessions live in the auth provider; these routes proxy
sign-up, login and refresh so clients only ever talk to this API.

Flow:
-----
1. POST /auth/signup  -> account created at the provider
2. POST /auth/login   -> {user, session}; keep session.access_token
3. Send "Authorization: Bearer <access_token>" on protected routes
4. POST /auth/refresh -> new session when the access token expires
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from app.core.exceptions import AuthenticationError, UnexpectedError, ValidationError
from app.schemas.auth import (
    AuthSession,
    AuthUser,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    SignUpRequest,
    SignUpResponse,
)
from app.schemas.common import ErrorResponse
from app.services.auth_provider import (
    AuthProviderError,
    AuthProviderUnavailable,
    SupabaseAuthClient,
    get_auth_client,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# ========================================
# Helper Functions
# ========================================

def _to_user(data: dict[str, Any]) -> AuthUser:
    return AuthUser(id=data["id"], email=data.get("email"), created_at=data.get("created_at"))


def _to_session(data: dict[str, Any]) -> AuthSession:
    return AuthSession(
        access_token=data["access_token"],
        refresh_token=data["refresh_token"],
        expires_in=data.get("expires_in"),
        token_type=data.get("token_type") or "bearer",
    )


# ========================================
# Endpoints
# ========================================

@router.post(
    "/signup",
    response_model=SignUpResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={400: {"model": ErrorResponse, "description": "Rejected by the auth provider"}},
)
async def signup(
    payload: SignUpRequest,
    client: SupabaseAuthClient = Depends(get_auth_client),
):
    try:
        user = await client.sign_up(payload.email, payload.password)
    except AuthProviderUnavailable as e:
        raise UnexpectedError(e.message) from e
    except AuthProviderError as e:
        raise ValidationError(e.message) from e

    return SignUpResponse(user=_to_user(user))


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in with email and password",
    responses={401: {"model": ErrorResponse, "description": "Invalid login credentials"}},
)
async def login(
    payload: LoginRequest,
    client: SupabaseAuthClient = Depends(get_auth_client),
):
    try:
        data = await client.sign_in_with_password(payload.email, payload.password)
    except AuthProviderUnavailable as e:
        raise UnexpectedError(e.message) from e
    except AuthProviderError as e:
        raise AuthenticationError(e.message or "Invalid login credentials") from e

    return LoginResponse(user=_to_user(data["user"]), session=_to_session(data))


@router.post(
    "/refresh",
    response_model=RefreshResponse,
    summary="Exchange a refresh token for a new session",
    responses={401: {"model": ErrorResponse, "description": "Invalid or expired refresh token"}},
)
async def refresh(
    payload: RefreshRequest,
    client: SupabaseAuthClient = Depends(get_auth_client),
):
    try:
        data = await client.refresh_session(payload.refresh_token)
    except AuthProviderUnavailable as e:
        raise UnexpectedError(e.message) from e
    except AuthProviderError as e:
        raise AuthenticationError("Invalid or expired refresh token") from e

    return RefreshResponse(session=_to_session(data))
