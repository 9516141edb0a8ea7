"""
Favorite API endpoints.

A profile can favorite a story once; a second attempt is a 409.
"""

from fastapi import APIRouter, status
from sqlalchemy import select

from app.core.auth import CurrentIdentity
from app.core.exceptions import ConflictError, NotFoundError
from app.core.logging import get_logger
from app.db.deps import DBSession, DBTransaction
from app.models import Favorite, Story, StoryTranslation
from app.schemas.common import COMMON_ERROR_RESPONSES, ErrorResponse, MessageResponse
from app.schemas.favorite import FavoriteCreate, FavoriteResponse, FavoriteStory
from app.services.ownership import get_owned_profile

logger = get_logger(__name__)

router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.post(
    "",
    response_model=FavoriteResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Mark a story as favorite",
    responses={
        **COMMON_ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Story is already a favorite"},
    },
)
async def add_favorite(payload: FavoriteCreate, db: DBSession, identity: CurrentIdentity):
    profile = await get_owned_profile(db, payload.profile_id, identity)

    if await db.get(Story, payload.story_id) is None:
        raise NotFoundError("Story not found")

    existing = await db.execute(
        select(Favorite.id).where(
            Favorite.profile_id == profile.id,
            Favorite.story_id == payload.story_id,
        )
    )
    if existing.first() is not None:
        raise ConflictError("Story is already in favorites")

    async with DBTransaction(db):
        favorite = Favorite(profile_id=profile.id, story_id=payload.story_id)
        db.add(favorite)
        await db.flush()

    logger.info("favorite_added", profile_id=profile.id, story_id=payload.story_id)
    return FavoriteResponse.model_validate(favorite)


@router.get(
    "/profiles/{profile_id}/languages/{language_id}",
    response_model=list[FavoriteStory],
    summary="Favorites of a profile, titled in a language",
    responses={**COMMON_ERROR_RESPONSES},
)
async def list_favorites(
    profile_id: int,
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    profile = await get_owned_profile(db, profile_id, identity)

    result = await db.execute(
        select(Favorite, Story, StoryTranslation.title, StoryTranslation.description)
        .join(Story, Story.id == Favorite.story_id)
        .outerjoin(
            StoryTranslation,
            (StoryTranslation.story_id == Story.id) & (StoryTranslation.language_id == language_id),
        )
        .where(Favorite.profile_id == profile.id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )
    return [
        FavoriteStory(
            id=favorite.id,
            profile_id=favorite.profile_id,
            story_id=favorite.story_id,
            created_at=favorite.created_at,
            photo_url=story.photo_url,
            duration=story.duration,
            title=title,
            description=description,
        )
        for favorite, story, title, description in result
    ]


@router.delete(
    "/profiles/{profile_id}/stories/{story_id}",
    response_model=MessageResponse,
    summary="Remove a story from favorites",
    responses={**COMMON_ERROR_RESPONSES},
)
async def remove_favorite(
    profile_id: int,
    story_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    profile = await get_owned_profile(db, profile_id, identity)

    result = await db.execute(
        select(Favorite).where(
            Favorite.profile_id == profile.id,
            Favorite.story_id == story_id,
        )
    )
    favorite = result.scalar_one_or_none()
    if favorite is None:
        raise NotFoundError("Favorite not found")

    async with DBTransaction(db):
        await db.delete(favorite)

    logger.info("favorite_removed", profile_id=profile.id, story_id=story_id)
    return MessageResponse(message="Favorite removed successfully")
