"""
Unit tests for PlaylistOrderingService.

Tests cover:
- Append and positional insert, including clamping
- Removal and gap closing
- Dense ordering after mixed sequences
- Conflicts and missing entries leave the playlist unchanged
- A failure after the shift leaves the playlist unchanged
- Playlist creation and deletion
"""

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models import Playlist, PlaylistStory
from app.services.playlist_ordering import PlaylistOrderingService, clamp_position


# ========================================
# Fixtures
# ========================================

@pytest.fixture
def service(db_session):
    return PlaylistOrderingService(db_session)


@pytest_asyncio.fixture
async def playlist_id(service, profile, catalog) -> int:
    """Playlist holding stories 0, 1, 2 at orders 0, 1, 2."""
    playlist = await service.create_playlist(profile.id, "Bedtime", catalog.story_ids[:3])
    return playlist.id


# ========================================
# clamp_position
# ========================================

class TestClampPosition:

    def test_none_appends(self):
        assert clamp_position(None, 4) == 4

    def test_within_range_is_kept(self):
        assert clamp_position(0, 4) == 0
        assert clamp_position(2, 4) == 2
        assert clamp_position(4, 4) == 4

    def test_above_count_clamps_to_count(self):
        assert clamp_position(10, 3) == 3

    def test_negative_clamps_to_zero(self):
        assert clamp_position(-5, 3) == 0

    def test_empty_playlist(self):
        assert clamp_position(7, 0) == 0


# ========================================
# insert_entry
# ========================================

@pytest.mark.asyncio
class TestInsertEntry:

    async def test_append_without_position(self, service, playlist_id, catalog, playlist_orders):
        entry = await service.insert_entry(playlist_id, catalog.story_ids[3])

        assert entry.order == 3
        s = catalog.story_ids
        assert await playlist_orders(playlist_id) == [(s[0], 0), (s[1], 1), (s[2], 2), (s[3], 3)]

    async def test_insert_at_front_shifts_everything(self, service, playlist_id, catalog, playlist_orders):
        entry = await service.insert_entry(playlist_id, catalog.story_ids[3], position=0)

        assert entry.order == 0
        s = catalog.story_ids
        assert await playlist_orders(playlist_id) == [(s[3], 0), (s[0], 1), (s[1], 2), (s[2], 3)]

    async def test_insert_in_middle_shifts_tail_only(self, service, playlist_id, catalog, playlist_orders):
        entry = await service.insert_entry(playlist_id, catalog.story_ids[3], position=1)

        assert entry.order == 1
        s = catalog.story_ids
        assert await playlist_orders(playlist_id) == [(s[0], 0), (s[3], 1), (s[1], 2), (s[2], 3)]

    async def test_position_beyond_end_appends(self, service, playlist_id, catalog, playlist_orders):
        entry = await service.insert_entry(playlist_id, catalog.story_ids[3], position=99)

        assert entry.order == 3
        assert (await playlist_orders(playlist_id))[-1] == (catalog.story_ids[3], 3)

    async def test_negative_position_inserts_first(self, service, playlist_id, catalog, playlist_orders):
        entry = await service.insert_entry(playlist_id, catalog.story_ids[3], position=-2)

        assert entry.order == 0
        assert (await playlist_orders(playlist_id))[0] == (catalog.story_ids[3], 0)

    async def test_insert_into_empty_playlist(self, service, profile, catalog, playlist_orders):
        playlist = await service.create_playlist(profile.id, "Empty")

        entry = await service.insert_entry(playlist.id, catalog.story_ids[0], position=5)

        assert entry.order == 0
        assert await playlist_orders(playlist.id) == [(catalog.story_ids[0], 0)]

    async def test_duplicate_story_conflicts_without_changes(self, service, playlist_id, catalog, playlist_orders):
        before = await playlist_orders(playlist_id)

        with pytest.raises(ConflictError) as exc_info:
            await service.insert_entry(playlist_id, catalog.story_ids[1], position=0)

        assert exc_info.value.message == "Story already exists in this playlist"
        assert await playlist_orders(playlist_id) == before

    async def test_unknown_story(self, service, playlist_id, playlist_orders):
        before = await playlist_orders(playlist_id)

        with pytest.raises(NotFoundError) as exc_info:
            await service.insert_entry(playlist_id, 9999, position=0)

        assert exc_info.value.message == "Story not found"
        assert await playlist_orders(playlist_id) == before

    async def test_unknown_playlist(self, service, catalog):
        with pytest.raises(NotFoundError) as exc_info:
            await service.insert_entry(9999, catalog.story_ids[0])

        assert exc_info.value.message == "Playlist not found"

    async def test_failed_write_rolls_back_the_shift(
        self, service, playlist_id, catalog, db_session, playlist_orders, monkeypatch
    ):
        before = await playlist_orders(playlist_id)

        async def failing_flush(objects=None):
            raise OperationalError("INSERT INTO playlist_stories", {}, Exception("database is locked"))

        monkeypatch.setattr(db_session, "flush", failing_flush)

        with pytest.raises(OperationalError):
            await service.insert_entry(playlist_id, catalog.story_ids[3], position=0)

        assert await playlist_orders(playlist_id) == before


# ========================================
# remove_entry
# ========================================

@pytest.mark.asyncio
class TestRemoveEntry:

    async def test_remove_first_closes_gap(self, service, playlist_id, catalog, playlist_orders):
        removed = await service.remove_entry(playlist_id, catalog.story_ids[0])

        assert removed == 0
        s = catalog.story_ids
        assert await playlist_orders(playlist_id) == [(s[1], 0), (s[2], 1)]

    async def test_remove_middle(self, service, playlist_id, catalog, playlist_orders):
        removed = await service.remove_entry(playlist_id, catalog.story_ids[1])

        assert removed == 1
        s = catalog.story_ids
        assert await playlist_orders(playlist_id) == [(s[0], 0), (s[2], 1)]

    async def test_remove_last_leaves_others_untouched(self, service, playlist_id, catalog, playlist_orders):
        removed = await service.remove_entry(playlist_id, catalog.story_ids[2])

        assert removed == 2
        s = catalog.story_ids
        assert await playlist_orders(playlist_id) == [(s[0], 0), (s[1], 1)]

    async def test_remove_missing_story_changes_nothing(self, service, playlist_id, catalog, playlist_orders):
        before = await playlist_orders(playlist_id)

        with pytest.raises(NotFoundError) as exc_info:
            await service.remove_entry(playlist_id, catalog.story_ids[4])

        assert exc_info.value.message == "Story not found in playlist"
        assert await playlist_orders(playlist_id) == before

    async def test_remove_only_entry(self, service, profile, catalog, playlist_orders):
        playlist = await service.create_playlist(profile.id, "Single", [catalog.story_ids[0]])

        await service.remove_entry(playlist.id, catalog.story_ids[0])

        assert await playlist_orders(playlist.id) == []

    async def test_failed_gap_close_restores_the_entry(
        self, service, playlist_id, catalog, playlist_orders, monkeypatch
    ):
        before = await playlist_orders(playlist_id)

        async def failing_shift(playlist_id, from_order, delta):
            raise OperationalError("UPDATE playlist_stories", {}, Exception("database is locked"))

        monkeypatch.setattr(service, "_shift", failing_shift)

        with pytest.raises(OperationalError):
            await service.remove_entry(playlist_id, catalog.story_ids[0])

        assert await playlist_orders(playlist_id) == before


# ========================================
# Density
# ========================================

@pytest.mark.asyncio
class TestDenseOrdering:

    async def test_orders_stay_dense_after_mixed_operations(self, service, playlist_id, catalog, playlist_orders):
        s = catalog.story_ids

        await service.insert_entry(playlist_id, s[3], position=1)
        await service.remove_entry(playlist_id, s[0])
        await service.insert_entry(playlist_id, s[4], position=-1)
        await service.remove_entry(playlist_id, s[2])
        await service.insert_entry(playlist_id, s[0], position=2)

        orders = await playlist_orders(playlist_id)
        assert [order for _, order in orders] == list(range(len(orders)))
        assert [story_id for story_id, _ in orders] == [s[4], s[3], s[0], s[1]]

    async def test_other_playlists_are_not_shifted(self, service, profile, playlist_id, catalog, playlist_orders):
        other = await service.create_playlist(profile.id, "Morning", catalog.story_ids[:2])

        await service.insert_entry(playlist_id, catalog.story_ids[3], position=0)
        await service.remove_entry(playlist_id, catalog.story_ids[0])

        s = catalog.story_ids
        assert await playlist_orders(other.id) == [(s[0], 0), (s[1], 1)]


# ========================================
# create_playlist / delete_playlist
# ========================================

@pytest.mark.asyncio
class TestCreatePlaylist:

    async def test_entries_follow_given_sequence(self, service, profile, catalog, playlist_orders):
        s = catalog.story_ids
        playlist = await service.create_playlist(profile.id, "  Favourites  ", [s[4], s[1], s[2]])

        assert playlist.name == "Favourites"
        assert await playlist_orders(playlist.id) == [(s[4], 0), (s[1], 1), (s[2], 2)]

    async def test_missing_stories_are_listed_and_nothing_is_created(self, service, profile, catalog, db_session):
        profile_id = profile.id

        with pytest.raises(NotFoundError) as exc_info:
            await service.create_playlist(profile_id, "Broken", [catalog.story_ids[0], 3001, 3002])

        assert exc_info.value.message == "Stories not found: 3001, 3002"
        count = await db_session.execute(
            select(func.count(Playlist.id)).where(Playlist.profile_id == profile_id)
        )
        assert count.scalar_one() == 0

    async def test_duplicate_story_ids_rejected(self, service, profile, catalog):
        with pytest.raises(ValidationError):
            await service.create_playlist(profile.id, "Twice", [catalog.story_ids[0], catalog.story_ids[0]])


@pytest.mark.asyncio
class TestDeletePlaylist:

    async def test_deletes_playlist_and_entries(self, service, playlist_id, db_session):
        deleted = await service.delete_playlist(playlist_id)

        assert deleted == 3
        remaining = await db_session.execute(
            select(func.count(PlaylistStory.id)).where(PlaylistStory.playlist_id == playlist_id)
        )
        assert remaining.scalar_one() == 0
        assert await db_session.get(Playlist, playlist_id) is None

    async def test_unknown_playlist(self, service):
        with pytest.raises(NotFoundError):
            await service.delete_playlist(4242)
