"""Business logic services."""

from app.services.auth_provider import AuthProviderError, SupabaseAuthClient, get_auth_client
from app.services.playlist_ordering import PlaylistOrderingService, get_playlist_ordering_service
from app.services.profile_deletion import (
    ProfileDeletionResult,
    ProfileDeletionService,
    cleanup_stored_asset,
    get_profile_deletion_service,
)
from app.services.storage import (
    InMemoryStorageClient,
    S3StorageClient,
    StorageClient,
    get_storage_client,
)

__all__ = [
    "PlaylistOrderingService",
    "get_playlist_ordering_service",
    "ProfileDeletionService",
    "ProfileDeletionResult",
    "get_profile_deletion_service",
    "cleanup_stored_asset",
    "StorageClient",
    "S3StorageClient",
    "InMemoryStorageClient",
    "get_storage_client",
    "SupabaseAuthClient",
    "AuthProviderError",
    "get_auth_client",
]
