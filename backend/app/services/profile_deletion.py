"""
Profile Deletion Service

Deletes a profile together with everything that hangs off it, in two
phases:

1. Database phase (one transaction, all-or-nothing):
   playlist entries -> playlists -> favorites -> category links -> profile
2. Cleanup phase (after commit, best-effort):
   the profile photo is deleted from object storage. A failure is logged
   and otherwise ignored; the committed deletion stands and the response
   is unaffected.

    result = await ProfileDeletionService(db).delete_profile(profile)
    background_tasks.add_task(cleanup_stored_asset, storage, result.photo_url)

Ownership must be verified by the caller.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import UnexpectedError
from app.core.logging import get_logger
from app.db.deps import DBTransaction
from app.models import Favorite, Playlist, PlaylistStory, Profile, ProfileCategory
from app.services.storage import StorageClient, key_from_public_url

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProfileDeletionResult:
    """Outcome of the database phase."""

    profile_id: int
    playlist_stories: int
    playlists: int
    favorites: int
    profile_categories: int
    photo_url: Optional[str]

    @property
    def had_photo(self) -> bool:
        return bool(self.photo_url)


class ProfileDeletionService:
    """Transactional deletion of a profile and its dependents."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========================================
    # Steps (run inside one transaction)
    # ========================================

    async def _playlist_ids(self, profile_id: int) -> list[int]:
        result = await self.db.execute(
            select(Playlist.id).where(Playlist.profile_id == profile_id)
        )
        return list(result.scalars().all())

    async def _delete_playlist_entries(self, playlist_ids: list[int]) -> int:
        if not playlist_ids:
            return 0
        result = await self.db.execute(
            delete(PlaylistStory)
            .where(PlaylistStory.playlist_id.in_(playlist_ids))
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def _delete_playlists(self, profile_id: int) -> int:
        result = await self.db.execute(
            delete(Playlist)
            .where(Playlist.profile_id == profile_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def _delete_favorites(self, profile_id: int) -> int:
        result = await self.db.execute(
            delete(Favorite)
            .where(Favorite.profile_id == profile_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def _delete_profile_categories(self, profile_id: int) -> int:
        result = await self.db.execute(
            delete(ProfileCategory)
            .where(ProfileCategory.profile_id == profile_id)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount

    async def _delete_profile_row(self, profile_id: int) -> None:
        await self.db.execute(
            delete(Profile)
            .where(Profile.id == profile_id)
            .execution_options(synchronize_session="fetch")
        )

    # ========================================
    # Operation
    # ========================================

    async def delete_profile(self, profile: Profile) -> ProfileDeletionResult:
        """
        Delete `profile` and its playlists, playlist entries, favorites and
        category links atomically.

        The photo is NOT touched here; hand `result.photo_url` to
        cleanup_stored_asset once this returns.

        Raises:
            UnexpectedError: any step failed; the transaction was rolled back
                and no rows were removed
        """
        profile_id = profile.id
        photo_url = profile.photo_url

        try:
            async with DBTransaction(self.db):
                playlist_ids = await self._playlist_ids(profile_id)
                playlist_stories = await self._delete_playlist_entries(playlist_ids)
                playlists = await self._delete_playlists(profile_id)
                favorites = await self._delete_favorites(profile_id)
                profile_categories = await self._delete_profile_categories(profile_id)
                await self._delete_profile_row(profile_id)
        except SQLAlchemyError as e:
            logger.error("profile_deletion_failed", profile_id=profile_id, exc_info=True)
            raise UnexpectedError("Failed to delete profile") from e

        result = ProfileDeletionResult(
            profile_id=profile_id,
            playlist_stories=playlist_stories,
            playlists=playlists,
            favorites=favorites,
            profile_categories=profile_categories,
            photo_url=photo_url,
        )
        logger.info(
            "profile_deleted",
            profile_id=profile_id,
            playlist_stories=playlist_stories,
            playlists=playlists,
            favorites=favorites,
            profile_categories=profile_categories,
            had_photo=result.had_photo,
        )
        return result


def get_profile_deletion_service(db: AsyncSession) -> ProfileDeletionService:
    return ProfileDeletionService(db)


# ========================================
# Cleanup Phase
# ========================================

def cleanup_stored_asset(storage: StorageClient, url: Optional[str]) -> bool:
    """
    Best-effort deletion of a stored object referenced by its public URL.

    Runs after the owning row change has been committed, usually as a
    FastAPI background task (sync, so it runs in the threadpool). Never
    raises.

    Returns:
        True if the object was deleted, False if there was nothing to delete
        or the deletion failed
    """
    if not url:
        return False

    key = key_from_public_url(url)
    if key is None:
        logger.warning("stored_asset_outside_bucket", url=url)
        return False

    try:
        storage.delete_object(key)
    except Exception:
        logger.warning("stored_asset_cleanup_failed", key=key, exc_info=True)
        return False

    logger.info("stored_asset_deleted", key=key)
    return True
