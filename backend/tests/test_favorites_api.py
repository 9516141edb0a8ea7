"""
Tests for the favorite endpoints.
"""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.integration


@pytest.mark.asyncio
class TestFavorites:

    async def test_add_and_list_in_language(self, client: AsyncClient, auth_headers, profile, catalog):
        response = await client.post(
            "/api/favorites",
            json={"profile_id": profile.id, "story_id": catalog.story_ids[0]},
            headers=auth_headers,
        )
        assert response.status_code == 201
        assert response.json()["story_id"] == catalog.story_ids[0]

        listing = await client.get(
            f"/api/favorites/profiles/{profile.id}/languages/{catalog.spanish_id}",
            headers=auth_headers,
        )

        assert listing.status_code == 200
        favorites = listing.json()
        assert len(favorites) == 1
        assert favorites[0]["title"] == "Cuento 0"
        assert favorites[0]["photo_url"].endswith("/story/0.png")

    async def test_add_twice(self, client: AsyncClient, auth_headers, profile, catalog):
        payload = {"profile_id": profile.id, "story_id": catalog.story_ids[1]}
        await client.post("/api/favorites", json=payload, headers=auth_headers)

        response = await client.post("/api/favorites", json=payload, headers=auth_headers)

        assert response.status_code == 409
        assert response.json() == {"error": "Story is already in favorites"}

    async def test_unknown_story(self, client: AsyncClient, auth_headers, profile):
        response = await client.post(
            "/api/favorites",
            json={"profile_id": profile.id, "story_id": 12345},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Story not found"}

    async def test_other_users_profile(self, client: AsyncClient, other_auth_headers, profile, catalog):
        response = await client.post(
            "/api/favorites",
            json={"profile_id": profile.id, "story_id": catalog.story_ids[0]},
            headers=other_auth_headers,
        )

        assert response.status_code == 403

    async def test_remove(self, client: AsyncClient, auth_headers, profile, catalog):
        await client.post(
            "/api/favorites",
            json={"profile_id": profile.id, "story_id": catalog.story_ids[2]},
            headers=auth_headers,
        )

        response = await client.delete(
            f"/api/favorites/profiles/{profile.id}/stories/{catalog.story_ids[2]}",
            headers=auth_headers,
        )
        listing = await client.get(
            f"/api/favorites/profiles/{profile.id}/languages/{catalog.english_id}",
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert listing.json() == []

    async def test_remove_missing(self, client: AsyncClient, auth_headers, profile, catalog):
        response = await client.delete(
            f"/api/favorites/profiles/{profile.id}/stories/{catalog.story_ids[2]}",
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Favorite not found"}
