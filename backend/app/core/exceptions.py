"""
Application error taxonomy.

Every error a route can surface derives from AppError and carries the HTTP
status it maps to. The handlers registered in app.main turn them into the
uniform response body:

    {"error": "<message>"}

Usage:
    raise NotFoundError("Playlist not found")
    raise ConflictError("Story already exists in this playlist")
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return None


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthenticationError(AppError):
    """No credential, or a credential the identity provider rejects."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"

    @property
    def headers(self) -> Optional[dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    """Authenticated, but the resource belongs to another account."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(AppError):
    """Uniqueness violation (duplicate favorite, playlist entry, profile name...)."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class UnexpectedError(AppError):
    """Data-store or collaborator failure that the client cannot fix."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
