"""
Tests for the catalog seeding script.
"""

import pytest
from sqlalchemy import func, select

from app.models import Category, Language, Story, StoryPage
from scripts.seed_catalog import SAMPLE_CATALOG, seed_catalog


@pytest.mark.asyncio
class TestSeedCatalog:

    async def test_sample_catalog(self, db_session):
        counts = await seed_catalog(db_session, SAMPLE_CATALOG)

        assert counts == {"languages": 2, "categories": 2, "stories": 1, "pages": 4}
        pages = await db_session.execute(select(func.count(StoryPage.id)))
        assert pages.scalar_one() == 4

    async def test_languages_and_categories_are_reused(self, db_session):
        await seed_catalog(db_session, SAMPLE_CATALOG)

        counts = await seed_catalog(db_session, SAMPLE_CATALOG)

        assert counts["languages"] == 0
        assert counts["categories"] == 0
        for model, expected in ((Language, 2), (Category, 2), (Story, 2)):
            result = await db_session.execute(select(func.count(model.id)))
            assert result.scalar_one() == expected

    async def test_unknown_language_rolls_back(self, db_session):
        catalog = {
            "languages": [{"name": "English", "country_code": "GB"}],
            "stories": [{"translations": {"Klingon": {"title": "Qapla'"}}}],
        }

        with pytest.raises(KeyError):
            await seed_catalog(db_session, catalog)

        result = await db_session.execute(select(func.count(Language.id)))
        assert result.scalar_one() == 0
