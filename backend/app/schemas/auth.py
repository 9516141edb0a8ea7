"""
Authentication schemas (Pydantic models for request/response).

Accounts and sessions are owned by the auth provider; these schemas only
describe what we forward to it and what we hand back to the client.

References:
-----------
- Pydantic: https://docs.pydantic.dev/latest/
- FastAPI Request Body: https://fastapi.tiangolo.com/tutorial/body/
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field


# ================================
# Requests
# ================================

class SignUpRequest(BaseModel):
    """
    Account registration request.

    Example request:
        POST /api/auth/signup
        {
            "email": "parent@example.com",
            "password": "SecurePassword123!"
        }
    """
    email: EmailStr = Field(
        ...,
        description="Account email address",
        examples=["parent@example.com"]
    )
    password: str = Field(
        ...,
        min_length=6,
        description="Account password (the provider requires at least 6 characters)",
        examples=["SecurePassword123!"]
    )


class LoginRequest(BaseModel):
    """Email/password login request."""
    email: EmailStr = Field(..., examples=["parent@example.com"])
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1, description="Refresh token from a previous login")


# ================================
# Responses
# ================================

class AuthUser(BaseModel):
    """The provider's account, reduced to what the client needs."""
    id: str = Field(..., description="Account id (UUID); profiles reference it as user_id")
    email: Optional[str] = None
    created_at: Optional[str] = None


class AuthSession(BaseModel):
    """
    Session tokens.

    Client should send the access token in future requests:
        Authorization: Bearer <access_token>
    """
    access_token: str
    refresh_token: str
    expires_in: Optional[int] = Field(None, description="Access token lifetime in seconds")
    token_type: str = "bearer"


class SignUpResponse(BaseModel):
    user: AuthUser


class LoginResponse(BaseModel):
    user: AuthUser
    session: AuthSession


class RefreshResponse(BaseModel):
    session: AuthSession
