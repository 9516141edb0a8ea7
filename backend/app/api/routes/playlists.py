"""
Playlist API endpoints.

Entry positions are maintained by PlaylistOrderingService; routes here
only authorize, validate and shape responses.

Adding at a position:
    POST /api/playlists/3/stories  {"story_id": 9, "position": 1}
    -> the story lands at order 1, entries previously at 1.. move down by one
"""

from collections import defaultdict

from fastapi import APIRouter, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentIdentity
from app.db.deps import DBSession, DBTransaction
from app.models import Playlist, PlaylistStory, Story, StoryTranslation
from app.schemas.common import COMMON_ERROR_RESPONSES, ErrorResponse
from app.schemas.playlist import (
    PlaylistCreate,
    PlaylistDeleteResponse,
    PlaylistDetail,
    PlaylistEntryCreate,
    PlaylistEntryDetail,
    PlaylistEntryRemoveResponse,
    PlaylistEntryResponse,
    PlaylistResponse,
    PlaylistUpdate,
    PlaylistWithEntries,
)
from app.services.ownership import get_owned_playlist, get_owned_profile
from app.services.playlist_ordering import PlaylistOrderingService

router = APIRouter(prefix="/playlists", tags=["Playlists"])


# ========================================
# Helper Functions
# ========================================

async def _entries_by_playlist(
    db: AsyncSession,
    playlist_ids: list[int],
) -> dict[int, list[PlaylistStory]]:
    grouped: dict[int, list[PlaylistStory]] = defaultdict(list)
    if not playlist_ids:
        return grouped

    result = await db.execute(
        select(PlaylistStory)
        .where(PlaylistStory.playlist_id.in_(playlist_ids))
        .order_by(PlaylistStory.playlist_id, PlaylistStory.order)
    )
    for entry in result.scalars():
        grouped[entry.playlist_id].append(entry)
    return grouped


def _with_entries(playlist: Playlist, entries: list[PlaylistStory]) -> PlaylistWithEntries:
    return PlaylistWithEntries(
        id=playlist.id,
        profile_id=playlist.profile_id,
        name=playlist.name,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        story_count=len(entries),
        entries=[PlaylistEntryResponse.model_validate(entry) for entry in entries],
    )


# ========================================
# Playlists
# ========================================

@router.post(
    "",
    response_model=PlaylistWithEntries,
    status_code=status.HTTP_201_CREATED,
    summary="Create a playlist",
    responses={**COMMON_ERROR_RESPONSES},
)
async def create_playlist(payload: PlaylistCreate, db: DBSession, identity: CurrentIdentity):
    profile = await get_owned_profile(db, payload.profile_id, identity)

    service = PlaylistOrderingService(db)
    playlist = await service.create_playlist(profile.id, payload.name, payload.story_ids)
    entries = await service.list_entries(playlist.id)
    return _with_entries(playlist, entries)


@router.get(
    "/profiles/{profile_id}",
    response_model=list[PlaylistWithEntries],
    summary="Playlists of a profile with their entries in order",
    responses={**COMMON_ERROR_RESPONSES},
)
async def list_profile_playlists(profile_id: int, db: DBSession, identity: CurrentIdentity):
    profile = await get_owned_profile(db, profile_id, identity)

    result = await db.execute(
        select(Playlist).where(Playlist.profile_id == profile.id).order_by(Playlist.id)
    )
    playlists = list(result.scalars().all())
    entries = await _entries_by_playlist(db, [playlist.id for playlist in playlists])
    return [_with_entries(playlist, entries[playlist.id]) for playlist in playlists]


@router.get(
    "/{playlist_id}/languages/{language_id}",
    response_model=PlaylistDetail,
    summary="A playlist with its stories titled in a language",
    responses={**COMMON_ERROR_RESPONSES},
)
async def get_playlist_in_language(
    playlist_id: int,
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    playlist = await get_owned_playlist(db, playlist_id, identity)

    result = await db.execute(
        select(PlaylistStory, Story, StoryTranslation.title, StoryTranslation.description)
        .join(Story, Story.id == PlaylistStory.story_id)
        .outerjoin(
            StoryTranslation,
            (StoryTranslation.story_id == Story.id) & (StoryTranslation.language_id == language_id),
        )
        .where(PlaylistStory.playlist_id == playlist.id)
        .order_by(PlaylistStory.order)
    )
    entries = [
        PlaylistEntryDetail(
            id=entry.id,
            playlist_id=entry.playlist_id,
            story_id=entry.story_id,
            order=entry.order,
            title=title,
            description=description,
            photo_url=story.photo_url,
            duration=story.duration,
        )
        for entry, story, title, description in result
    ]
    return PlaylistDetail(
        id=playlist.id,
        profile_id=playlist.profile_id,
        name=playlist.name,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        story_count=len(entries),
        entries=entries,
    )


@router.put(
    "/{playlist_id}",
    response_model=PlaylistResponse,
    summary="Rename a playlist",
    responses={**COMMON_ERROR_RESPONSES},
)
async def rename_playlist(
    playlist_id: int,
    payload: PlaylistUpdate,
    db: DBSession,
    identity: CurrentIdentity,
):
    playlist = await get_owned_playlist(db, playlist_id, identity)

    async with DBTransaction(db):
        playlist.name = payload.name.strip()
        await db.flush()

    count = await db.execute(
        select(func.count(PlaylistStory.id)).where(PlaylistStory.playlist_id == playlist.id)
    )
    return PlaylistResponse(
        id=playlist.id,
        profile_id=playlist.profile_id,
        name=playlist.name,
        created_at=playlist.created_at,
        updated_at=playlist.updated_at,
        story_count=count.scalar_one(),
    )


@router.delete(
    "/{playlist_id}",
    response_model=PlaylistDeleteResponse,
    summary="Delete a playlist and its entries",
    responses={**COMMON_ERROR_RESPONSES},
)
async def delete_playlist(playlist_id: int, db: DBSession, identity: CurrentIdentity):
    playlist = await get_owned_playlist(db, playlist_id, identity)
    deleted_entries = await PlaylistOrderingService(db).delete_playlist(playlist.id)
    return PlaylistDeleteResponse(id=playlist_id, deleted_entries=deleted_entries)


# ========================================
# Playlist Entries
# ========================================

@router.post(
    "/{playlist_id}/stories",
    response_model=PlaylistEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a story to a playlist",
    responses={
        **COMMON_ERROR_RESPONSES,
        409: {"model": ErrorResponse, "description": "Story already in playlist"},
    },
)
async def add_story_to_playlist(
    playlist_id: int,
    payload: PlaylistEntryCreate,
    db: DBSession,
    identity: CurrentIdentity,
):
    playlist = await get_owned_playlist(db, playlist_id, identity)
    entry = await PlaylistOrderingService(db).insert_entry(
        playlist.id,
        payload.story_id,
        position=payload.position,
    )
    return PlaylistEntryResponse.model_validate(entry)


@router.delete(
    "/{playlist_id}/stories/{story_id}",
    response_model=PlaylistEntryRemoveResponse,
    summary="Remove a story from a playlist",
    responses={**COMMON_ERROR_RESPONSES},
)
async def remove_story_from_playlist(
    playlist_id: int,
    story_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    playlist = await get_owned_playlist(db, playlist_id, identity)
    removed_order = await PlaylistOrderingService(db).remove_entry(playlist.id, story_id)
    return PlaylistEntryRemoveResponse(
        playlist_id=playlist.id,
        story_id=story_id,
        removed_order=removed_order,
    )
