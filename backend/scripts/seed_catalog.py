#!/usr/bin/env python3
"""
Seed the story catalog (languages, categories, stories).

The catalog is read-only through the API, so this script is how stories
get into a fresh database. Input is a JSON file:

    {
      "languages": [{"name": "English", "country_code": "GB"}],
      "categories": [
        {"key": "animals", "photo_url": "https://...", "names": {"English": "Animals"}}
      ],
      "stories": [
        {
          "photo_url": "https://...",
          "duration": 240,
          "categories": ["animals"],
          "translations": {
            "English": {"title": "The Brave Fox", "description": "...", "pages": ["Once...", "Then..."]}
          }
        }
      ]
    }

Languages are matched by name and categories by their name in any
language, so running the script twice does not duplicate them. Stories
are always inserted.

Usage:
    python scripts/seed_catalog.py catalog.json
    python scripts/seed_catalog.py            # small built-in sample
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger, setup_logging
from app.db.deps import DBTransaction
from app.db.session import AsyncSessionLocal, close_db
from app.models import (
    Category,
    CategoryTranslation,
    Language,
    Story,
    StoryCategory,
    StoryPage,
    StoryTranslation,
)

logger = get_logger("seed_catalog")

SAMPLE_CATALOG: dict[str, Any] = {
    "languages": [
        {"name": "English", "country_code": "GB"},
        {"name": "Español", "country_code": "ES"},
    ],
    "categories": [
        {"key": "animals", "names": {"English": "Animals", "Español": "Animales"}},
        {"key": "bedtime", "names": {"English": "Bedtime", "Español": "Hora de dormir"}},
    ],
    "stories": [
        {
            "duration": 180,
            "categories": ["animals", "bedtime"],
            "translations": {
                "English": {
                    "title": "The Sleepy Owl",
                    "description": "An owl who could not stay awake at night.",
                    "pages": [
                        "Olive the owl yawned when the moon came up.",
                        "Her friends hooted, but Olive was already dreaming.",
                    ],
                },
                "Español": {
                    "title": "La lechuza dormilona",
                    "description": "Una lechuza que no podía quedarse despierta.",
                    "pages": [
                        "Olivia la lechuza bostezó cuando salió la luna.",
                        "Sus amigos ulularon, pero Olivia ya estaba soñando.",
                    ],
                },
            },
        },
    ],
}


async def _get_or_create_language(
    db: AsyncSession,
    name: str,
    country_code: str,
) -> tuple[Language, bool]:
    result = await db.execute(select(Language).where(Language.name == name))
    language = result.scalar_one_or_none()
    if language is not None:
        return language, False
    language = Language(name=name, country_code=country_code)
    db.add(language)
    await db.flush()
    return language, True


async def _find_category(db: AsyncSession, names: dict[str, str]) -> Category | None:
    result = await db.execute(
        select(Category)
        .join(CategoryTranslation, CategoryTranslation.category_id == Category.id)
        .where(CategoryTranslation.name.in_(list(names.values())))
        .limit(1)
    )
    return result.scalar_one_or_none()


async def seed_catalog(db: AsyncSession, catalog: dict[str, Any]) -> dict[str, int]:
    """
    Insert `catalog` in one transaction.

    Returns:
        Counts of rows created per kind
    """
    counts = {"languages": 0, "categories": 0, "stories": 0, "pages": 0}

    async with DBTransaction(db):
        languages: dict[str, Language] = {}
        for entry in catalog.get("languages", []):
            language, created = await _get_or_create_language(db, entry["name"], entry["country_code"])
            languages[entry["name"]] = language
            counts["languages"] += int(created)

        categories: dict[str, Category] = {}
        for entry in catalog.get("categories", []):
            category = await _find_category(db, entry["names"])
            if category is None:
                category = Category(photo_url=entry.get("photo_url"))
                db.add(category)
                await db.flush()
                for language_name, name in entry["names"].items():
                    db.add(CategoryTranslation(
                        category_id=category.id,
                        language_id=languages[language_name].id,
                        name=name,
                    ))
                counts["categories"] += 1
            categories[entry["key"]] = category

        for entry in catalog.get("stories", []):
            story = Story(photo_url=entry.get("photo_url"), duration=entry.get("duration"))
            db.add(story)
            await db.flush()

            for key in entry.get("categories", []):
                db.add(StoryCategory(story_id=story.id, category_id=categories[key].id))

            for language_name, translation_data in entry.get("translations", {}).items():
                translation = StoryTranslation(
                    story_id=story.id,
                    language_id=languages[language_name].id,
                    title=translation_data["title"],
                    description=translation_data.get("description"),
                )
                db.add(translation)
                await db.flush()

                for page_number, text in enumerate(translation_data.get("pages", []), start=1):
                    db.add(StoryPage(
                        story_translation_id=translation.id,
                        page_number=page_number,
                        text_content=text,
                    ))
                    counts["pages"] += 1

            counts["stories"] += 1

    logger.info("catalog_seeded", **counts)
    return counts


async def main() -> int:
    parser = argparse.ArgumentParser(description="Seed the story catalog")
    parser.add_argument("catalog", nargs="?", type=Path, help="Path to a catalog JSON file")
    args = parser.parse_args()

    setup_logging()

    if args.catalog:
        catalog = json.loads(args.catalog.read_text(encoding="utf-8"))
    else:
        catalog = SAMPLE_CATALOG

    try:
        async with AsyncSessionLocal() as db:
            counts = await seed_catalog(db, catalog)
    except KeyError as e:
        logger.error("catalog_invalid", missing=str(e))
        return 1
    finally:
        await close_db()

    print(
        f"Seeded {counts['languages']} languages, {counts['categories']} categories, "
        f"{counts['stories']} stories ({counts['pages']} pages)"
    )
    return 0


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
