"""
Pydantic schemas for request/response validation.

Import all schemas here for easy access.
"""

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
from app.schemas.catalog import (
    CategoryCreatedResponse,
    CategoryResponse,
    LanguageResponse,
    StoryInLanguage,
    StoryMinified,
    StoryPageResponse,
    StorySummary,
    StoryTranslationDetail,
    StoryTranslationSummary,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.schemas.favorite import FavoriteCreate, FavoriteResponse, FavoriteStory
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDeleteResponse,
    PlaylistDetail,
    PlaylistEntryCreate,
    PlaylistEntryDetail,
    PlaylistEntryRemoveResponse,
    PlaylistEntryResponse,
    PlaylistResponse,
    PlaylistUpdate,
    PlaylistWithEntries,
)
from app.schemas.profile import (
    DeletedCounts,
    ProfileCategoryCreate,
    ProfileCategoryResponse,
    ProfileDeleteResponse,
    ProfileDetailResponse,
    ProfileResponse,
)

__all__ = [
    # Common
    "ErrorResponse",
    "MessageResponse",
    # Authentication
    "SignUpRequest",
    "LoginRequest",
    "RefreshRequest",
    "AuthUser",
    "AuthSession",
    "SignUpResponse",
    "LoginResponse",
    "RefreshResponse",
    # Catalog
    "LanguageResponse",
    "CategoryResponse",
    "CategoryCreatedResponse",
    "StorySummary",
    "StoryTranslationSummary",
    "StoryPageResponse",
    "StoryTranslationDetail",
    "StoryMinified",
    "StoryInLanguage",
    # Profiles
    "ProfileResponse",
    "ProfileDetailResponse",
    "ProfileCategoryCreate",
    "ProfileCategoryResponse",
    "DeletedCounts",
    "ProfileDeleteResponse",
    # Playlists
    "PlaylistCreate",
    "PlaylistUpdate",
    "PlaylistEntryCreate",
    "PlaylistEntryResponse",
    "PlaylistEntryDetail",
    "PlaylistResponse",
    "PlaylistWithEntries",
    "PlaylistDetail",
    "PlaylistDeleteResponse",
    "PlaylistEntryRemoveResponse",
    # Favorites
    "FavoriteCreate",
    "FavoriteResponse",
    "FavoriteStory",
]
