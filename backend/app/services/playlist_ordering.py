"""
Playlist Ordering Service

Maintains the position of stories inside a playlist.

Invariant:
----------
For a playlist with n entries the `order` values are exactly
{0, 1, ..., n-1}. Every method below leaves that invariant intact:

- insert at k (clamped to [0, n]): entries with order >= k move to order+1,
  then the new entry is written at k. Without k the entry is appended at n.
- remove at p: the entry is deleted, entries with order > p move to order-1.

The shift and the write are one transaction (DBTransaction): either both
are committed or neither is.

Concurrency:
------------
Each operation first locks the parent playlist row (SELECT ... FOR UPDATE),
so two requests changing the same playlist run one after the other and
never compute a position from a stale entry count. SQLite ignores the
lock clause; it serializes writers on its own.
"""

from typing import Optional, Sequence

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.deps import DBTransaction
from app.models import Playlist, PlaylistStory, Story

logger = get_logger(__name__)


def clamp_position(position: Optional[int], count: int) -> int:
    """Resolve a requested position against the current entry count."""
    if position is None:
        return count
    return max(0, min(position, count))


class PlaylistOrderingService:
    """Ordered insert/remove of playlist entries."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========================================
    # Helpers
    # ========================================

    async def _lock_playlist(self, playlist_id: int) -> None:
        result = await self.db.execute(
            select(Playlist.id).where(Playlist.id == playlist_id).with_for_update()
        )
        if result.scalar_one_or_none() is None:
            raise NotFoundError("Playlist not found")

    async def _count_entries(self, playlist_id: int) -> int:
        result = await self.db.execute(
            select(func.count(PlaylistStory.id)).where(PlaylistStory.playlist_id == playlist_id)
        )
        return result.scalar_one()

    async def _shift(self, playlist_id: int, from_order: int, delta: int) -> None:
        """Move every entry at `from_order` or later by `delta`."""
        await self.db.execute(
            update(PlaylistStory)
            .where(
                PlaylistStory.playlist_id == playlist_id,
                PlaylistStory.order >= from_order,
            )
            .values(order=PlaylistStory.order + delta)
            .execution_options(synchronize_session="fetch")
        )

    # ========================================
    # Operations
    # ========================================

    async def insert_entry(
        self,
        playlist_id: int,
        story_id: int,
        position: Optional[int] = None,
    ) -> PlaylistStory:
        """
        Add a story to a playlist.

        Args:
            playlist_id: Target playlist (ownership already checked)
            story_id: Story to add
            position: Zero-based target position; None appends

        Returns:
            The new entry, with its final `order`

        Raises:
            NotFoundError: playlist or story does not exist
            ConflictError: story is already in the playlist
        """
        async with DBTransaction(self.db):
            await self._lock_playlist(playlist_id)

            if await self.db.get(Story, story_id) is None:
                raise NotFoundError("Story not found")

            existing = await self.db.execute(
                select(PlaylistStory.id).where(
                    PlaylistStory.playlist_id == playlist_id,
                    PlaylistStory.story_id == story_id,
                )
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError("Story already exists in this playlist")

            count = await self._count_entries(playlist_id)
            final_position = clamp_position(position, count)

            if final_position < count:
                await self._shift(playlist_id, final_position, +1)

            entry = PlaylistStory(
                playlist_id=playlist_id,
                story_id=story_id,
                order=final_position,
            )
            self.db.add(entry)
            await self.db.flush()

        logger.info(
            "playlist_entry_inserted",
            playlist_id=playlist_id,
            story_id=story_id,
            requested_position=position,
            order=final_position,
        )
        return entry

    async def remove_entry(self, playlist_id: int, story_id: int) -> int:
        """
        Remove a story from a playlist and close the gap it leaves.

        Returns:
            The order the removed entry had

        Raises:
            NotFoundError: the story is not in the playlist (nothing changes)
        """
        async with DBTransaction(self.db):
            await self._lock_playlist(playlist_id)

            result = await self.db.execute(
                select(PlaylistStory).where(
                    PlaylistStory.playlist_id == playlist_id,
                    PlaylistStory.story_id == story_id,
                )
            )
            entry = result.scalar_one_or_none()
            if entry is None:
                raise NotFoundError("Story not found in playlist")

            removed_order = entry.order
            await self.db.delete(entry)
            await self.db.flush()

            await self._shift(playlist_id, removed_order + 1, -1)

        logger.info(
            "playlist_entry_removed",
            playlist_id=playlist_id,
            story_id=story_id,
            order=removed_order,
        )
        return removed_order

    async def create_playlist(
        self,
        profile_id: int,
        name: str,
        story_ids: Sequence[int] = (),
    ) -> Playlist:
        """
        Create a playlist whose entries get order 0..n-1 in `story_ids` order.

        Raises:
            ValidationError: `story_ids` repeats a story
            NotFoundError: some stories do not exist (all missing ids are listed)
        """
        if len(set(story_ids)) != len(story_ids):
            raise ValidationError("story_ids must not contain duplicates")

        async with DBTransaction(self.db):
            if story_ids:
                result = await self.db.execute(select(Story.id).where(Story.id.in_(story_ids)))
                found = set(result.scalars().all())
                missing = [story_id for story_id in story_ids if story_id not in found]
                if missing:
                    raise NotFoundError(
                        f"Stories not found: {', '.join(str(story_id) for story_id in missing)}"
                    )

            playlist = Playlist(profile_id=profile_id, name=name.strip())
            self.db.add(playlist)
            await self.db.flush()

            self.db.add_all(
                PlaylistStory(playlist_id=playlist.id, story_id=story_id, order=index)
                for index, story_id in enumerate(story_ids)
            )
            await self.db.flush()

        logger.info(
            "playlist_created",
            playlist_id=playlist.id,
            profile_id=profile_id,
            entries=len(story_ids),
        )
        return playlist

    async def delete_playlist(self, playlist_id: int) -> int:
        """
        Delete a playlist and all of its entries in one transaction.

        Returns:
            Number of entries removed
        """
        async with DBTransaction(self.db):
            await self._lock_playlist(playlist_id)
            result = await self.db.execute(
                delete(PlaylistStory)
                .where(PlaylistStory.playlist_id == playlist_id)
                .execution_options(synchronize_session="fetch")
            )
            await self.db.execute(
                delete(Playlist)
                .where(Playlist.id == playlist_id)
                .execution_options(synchronize_session="fetch")
            )

        logger.info("playlist_deleted", playlist_id=playlist_id, entries=result.rowcount)
        return result.rowcount

    async def list_entries(self, playlist_id: int) -> list[PlaylistStory]:
        result = await self.db.execute(
            select(PlaylistStory)
            .where(PlaylistStory.playlist_id == playlist_id)
            .order_by(PlaylistStory.order)
        )
        return list(result.scalars().all())


def get_playlist_ordering_service(db: AsyncSession) -> PlaylistOrderingService:
    return PlaylistOrderingService(db)
