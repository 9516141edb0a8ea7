"""
Tests for profile and playlist model behavior.
"""

from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError

from app.models import Favorite, Playlist, PlaylistStory, Profile

from conftest import USER_ID


class TestProfileAge:

    def test_without_date_of_birth(self):
        assert Profile(user_id=USER_ID, name="Mia").age is None

    def test_birthday_already_passed_this_year(self):
        today = date.today()
        born = date(today.year - 7, 1, 1)

        assert Profile(user_id=USER_ID, name="Mia", date_of_birth=born).age == 7

    def test_birthday_later_this_year(self):
        today = date.today()
        born = date(today.year - 7, 12, 31)
        expected = 7 if (today.month, today.day) == (12, 31) else 6

        assert Profile(user_id=USER_ID, name="Mia", date_of_birth=born).age == expected


@pytest.mark.asyncio
class TestUniqueConstraints:

    async def test_story_appears_once_per_playlist(self, db_session, profile, catalog):
        playlist = Playlist(profile_id=profile.id, name="Bedtime")
        db_session.add(playlist)
        await db_session.flush()

        db_session.add_all([
            PlaylistStory(playlist_id=playlist.id, story_id=catalog.story_ids[0], order=0),
            PlaylistStory(playlist_id=playlist.id, story_id=catalog.story_ids[0], order=1),
        ])

        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_story_favorited_once_per_profile(self, db_session, profile, catalog):
        db_session.add_all([
            Favorite(profile_id=profile.id, story_id=catalog.story_ids[1]),
            Favorite(profile_id=profile.id, story_id=catalog.story_ids[1]),
        ])

        with pytest.raises(IntegrityError):
            await db_session.flush()
