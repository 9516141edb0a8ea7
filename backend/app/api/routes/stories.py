"""
Story API endpoints.

The catalog is read-only through the API. Stories are language-independent;
their title, description and pages come from the translation for the
requested language.

Story text is paginated:

    GET /api/stories/4/languages/1?pages=5&offset=10

returns pages 11..15 (ordered by page number) plus `total_pages`.
"""

from typing import Optional

from fastapi import APIRouter, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.auth import CurrentIdentity
from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.db.deps import DBSession
from app.models import Category, CategoryTranslation, Story, StoryCategory, StoryPage, StoryTranslation
from app.schemas.catalog import (
    CategoryResponse,
    StoryInLanguage,
    StoryMinified,
    StoryPageResponse,
    StorySummary,
    StoryTranslationDetail,
    StoryTranslationSummary,
)
from app.schemas.common import COMMON_ERROR_RESPONSES, ErrorResponse

router = APIRouter(prefix="/stories", tags=["Stories"])

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Story or translation not found"}}


# ========================================
# Helper Functions
# ========================================

async def _get_story(db: AsyncSession, story_id: int) -> Story:
    story = await db.get(Story, story_id)
    if story is None:
        raise NotFoundError("Story not found")
    return story


async def _get_translation(db: AsyncSession, story_id: int, language_id: int) -> StoryTranslation:
    result = await db.execute(
        select(StoryTranslation).where(
            StoryTranslation.story_id == story_id,
            StoryTranslation.language_id == language_id,
        )
    )
    translation = result.scalar_one_or_none()
    if translation is None:
        raise NotFoundError("Story translation not found")
    return translation


# ========================================
# Endpoints
# ========================================

@router.get(
    "",
    response_model=list[StorySummary],
    summary="Latest stories, newest first",
)
async def list_latest_stories(
    db: DBSession,
    limit: Optional[int] = Query(None, ge=1, le=50, description="Defaults to STORIES_LATEST_LIMIT"),
):
    result = await db.execute(
        select(Story)
        .order_by(Story.created_at.desc(), Story.id.desc())
        .limit(limit or settings.STORIES_LATEST_LIMIT)
    )
    return result.scalars().all()


@router.get(
    "/categories/{category_id}/languages/{language_id}",
    response_model=list[StoryInLanguage],
    summary="Stories of a category, titled in a language",
    responses={401: COMMON_ERROR_RESPONSES[401]},
)
async def list_stories_in_category(
    category_id: int,
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    result = await db.execute(
        select(Story, StoryTranslation.title, StoryTranslation.description)
        .join(StoryCategory, StoryCategory.story_id == Story.id)
        .outerjoin(
            StoryTranslation,
            (StoryTranslation.story_id == Story.id) & (StoryTranslation.language_id == language_id),
        )
        .where(StoryCategory.category_id == category_id)
        .order_by(Story.id)
    )
    return [
        StoryInLanguage(
            id=story.id,
            photo_url=story.photo_url,
            duration=story.duration,
            title=title,
            description=description,
        )
        for story, title, description in result
    ]


@router.get(
    "/{story_id}/languages",
    response_model=list[StoryTranslationSummary],
    summary="Languages a story is available in",
    responses={401: COMMON_ERROR_RESPONSES[401], **NOT_FOUND},
)
async def list_story_translations(story_id: int, db: DBSession, identity: CurrentIdentity):
    await _get_story(db, story_id)
    result = await db.execute(
        select(StoryTranslation)
        .options(selectinload(StoryTranslation.language))
        .where(StoryTranslation.story_id == story_id)
        .order_by(StoryTranslation.language_id)
    )
    return result.scalars().all()


@router.get(
    "/{story_id}/languages/{language_id}",
    response_model=StoryTranslationDetail,
    summary="A story in one language with a window of its pages",
    responses=NOT_FOUND,
)
async def get_story_translation(
    story_id: int,
    language_id: int,
    db: DBSession,
    pages: Optional[int] = Query(None, ge=1, le=100, description="Number of pages to return"),
    offset: int = Query(0, ge=0, description="Number of pages to skip"),
):
    story = await _get_story(db, story_id)
    translation = await _get_translation(db, story_id, language_id)
    limit = pages or settings.STORY_PAGES_DEFAULT

    total = await db.execute(
        select(func.count(StoryPage.id)).where(StoryPage.story_translation_id == translation.id)
    )
    page_rows = await db.execute(
        select(StoryPage)
        .where(StoryPage.story_translation_id == translation.id)
        .order_by(StoryPage.page_number)
        .offset(offset)
        .limit(limit)
    )

    return StoryTranslationDetail(
        id=translation.id,
        story_id=story.id,
        language_id=language_id,
        title=translation.title,
        description=translation.description,
        photo_url=story.photo_url,
        duration=story.duration,
        total_pages=total.scalar_one(),
        offset=offset,
        limit=limit,
        pages=[StoryPageResponse.model_validate(page) for page in page_rows.scalars()],
    )


@router.get(
    "/{story_id}/languages/{language_id}/minified",
    response_model=StoryMinified,
    summary="Title, description, photo and duration of a story",
    responses={401: COMMON_ERROR_RESPONSES[401], **NOT_FOUND},
)
async def get_story_minified(
    story_id: int,
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    story = await _get_story(db, story_id)
    translation = await _get_translation(db, story_id, language_id)
    return StoryMinified(
        id=story.id,
        title=translation.title,
        description=translation.description,
        photo_url=story.photo_url,
        duration=story.duration,
    )


@router.get(
    "/{story_id}/categories",
    response_model=list[CategoryResponse],
    summary="Categories of a story",
    responses=NOT_FOUND,
)
async def list_story_categories(story_id: int, db: DBSession):
    await _get_story(db, story_id)
    result = await db.execute(
        select(Category)
        .join(StoryCategory, StoryCategory.category_id == Category.id)
        .where(StoryCategory.story_id == story_id)
        .order_by(Category.id)
    )
    return [CategoryResponse(id=category.id, photo_url=category.photo_url) for category in result.scalars()]


@router.get(
    "/{story_id}/categories/languages/{language_id}",
    response_model=list[CategoryResponse],
    summary="Categories of a story with names in a language",
    responses={401: COMMON_ERROR_RESPONSES[401], **NOT_FOUND},
)
async def list_story_categories_in_language(
    story_id: int,
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    await _get_story(db, story_id)
    result = await db.execute(
        select(Category.id, Category.photo_url, CategoryTranslation.name)
        .join(StoryCategory, StoryCategory.category_id == Category.id)
        .outerjoin(
            CategoryTranslation,
            (CategoryTranslation.category_id == Category.id)
            & (CategoryTranslation.language_id == language_id),
        )
        .where(StoryCategory.story_id == story_id)
        .order_by(Category.id)
    )
    return [
        CategoryResponse(id=row.id, photo_url=row.photo_url, name=row.name, language_id=language_id)
        for row in result
    ]
