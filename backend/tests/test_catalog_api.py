"""
Tests for the catalog endpoints (languages, categories, stories).
"""

import pytest
from httpx import AsyncClient

from app.services.storage import key_from_public_url

pytestmark = pytest.mark.integration

PNG = ("cover.png", b"\x89PNG\r\n\x1a\n cover", "image/png")


@pytest.mark.asyncio
class TestLanguages:

    async def test_list(self, client: AsyncClient, auth_headers, catalog):
        response = await client.get("/api/languages", headers=auth_headers)

        assert response.status_code == 200
        assert [(lang["name"], lang["country_code"]) for lang in response.json()] == [
            ("English", "GB"),
            ("Español", "ES"),
        ]


@pytest.mark.asyncio
class TestCategories:

    async def test_list_in_language_sorted_by_name(self, client: AsyncClient, auth_headers, catalog):
        response = await client.get(f"/api/categories/languages/{catalog.english_id}", headers=auth_headers)

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Animals", "Bedtime"]

    async def test_create(self, client: AsyncClient, auth_headers, catalog, storage):
        response = await client.post(
            "/api/categories",
            data={"name": "Adventure", "language_id": str(catalog.english_id)},
            files={"photo": PNG},
            headers=auth_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Adventure"
        assert data["language_id"] == catalog.english_id
        assert key_from_public_url(data["photo_url"]) in storage.objects

    async def test_create_duplicate_name(self, client: AsyncClient, auth_headers, catalog, storage):
        response = await client.post(
            "/api/categories",
            data={"name": "animals", "language_id": str(catalog.english_id)},
            files={"photo": PNG},
            headers=auth_headers,
        )

        assert response.status_code == 409
        assert storage.objects == {}

    async def test_create_unknown_language(self, client: AsyncClient, auth_headers):
        response = await client.post(
            "/api/categories",
            data={"name": "Adventure", "language_id": "77"},
            files={"photo": PNG},
            headers=auth_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Language not found"}


@pytest.mark.asyncio
class TestStories:

    async def test_latest_is_public_and_limited(self, client: AsyncClient, catalog):
        response = await client.get("/api/stories", params={"limit": 2})

        assert response.status_code == 200
        assert len(response.json()) == 2

    async def test_latest_default_limit(self, client: AsyncClient, catalog):
        response = await client.get("/api/stories")

        assert len(response.json()) == 5

    async def test_pages_window(self, client: AsyncClient, catalog):
        story_id = catalog.story_ids[0]

        response = await client.get(
            f"/api/stories/{story_id}/languages/{catalog.english_id}",
            params={"pages": 3, "offset": 2},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["title"] == "Story 0"
        assert data["total_pages"] == 7
        assert [p["page_number"] for p in data["pages"]] == [3, 4, 5]

    async def test_default_page_window(self, client: AsyncClient, catalog):
        response = await client.get(f"/api/stories/{catalog.story_ids[0]}/languages/{catalog.english_id}")

        assert [p["page_number"] for p in response.json()["pages"]] == [1, 2, 3, 4, 5]

    async def test_missing_translation(self, client: AsyncClient, catalog):
        response = await client.get(f"/api/stories/{catalog.story_ids[1]}/languages/{catalog.spanish_id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Story translation not found"}

    async def test_missing_story(self, client: AsyncClient, catalog):
        response = await client.get(f"/api/stories/9999/languages/{catalog.english_id}")

        assert response.status_code == 404
        assert response.json() == {"error": "Story not found"}

    async def test_translations_of_story(self, client: AsyncClient, auth_headers, catalog):
        response = await client.get(f"/api/stories/{catalog.story_ids[0]}/languages", headers=auth_headers)

        assert response.status_code == 200
        assert [t["language"]["name"] for t in response.json()] == ["English", "Español"]

    async def test_stories_in_category(self, client: AsyncClient, auth_headers, catalog):
        response = await client.get(
            f"/api/stories/categories/{catalog.category_ids[0]}/languages/{catalog.english_id}",
            headers=auth_headers,
        )

        assert [s["title"] for s in response.json()] == ["Story 0", "Story 1"]

    async def test_minified(self, client: AsyncClient, auth_headers, catalog):
        response = await client.get(
            f"/api/stories/{catalog.story_ids[2]}/languages/{catalog.english_id}/minified",
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["title"] == "Story 2"
        assert response.json()["duration"] == 180

    async def test_story_categories(self, client: AsyncClient, auth_headers, catalog):
        plain = await client.get(f"/api/stories/{catalog.story_ids[0]}/categories")
        named = await client.get(
            f"/api/stories/{catalog.story_ids[0]}/categories/languages/{catalog.spanish_id}",
            headers=auth_headers,
        )

        assert [c["id"] for c in plain.json()] == [catalog.category_ids[0]]
        assert [c["name"] for c in named.json()] == ["Animales"]


@pytest.mark.asyncio
class TestErrorShape:

    async def test_health(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    async def test_query_validation_is_400(self, client: AsyncClient, catalog):
        response = await client.get("/api/stories", params={"limit": 0})

        assert response.status_code == 400
        assert response.json()["error"].startswith("limit:")

    async def test_path_validation_is_400(self, client: AsyncClient, auth_headers):
        response = await client.get("/api/profiles/abc", headers=auth_headers)

        assert response.status_code == 400

    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}
