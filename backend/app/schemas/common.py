"""Schemas shared by every router."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error response body.

    Every failure (400, 401, 403, 404, 409, 500) uses this shape.

    Example:
        {"error": "Story already exists in this playlist"}
    """
    error: str = Field(..., description="Human-readable error message")


class MessageResponse(BaseModel):
    message: str


# OpenAPI documentation for the error statuses most routes share
COMMON_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    403: {"model": ErrorResponse, "description": "Resource belongs to another account"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
}
