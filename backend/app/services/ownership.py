"""
Ownership checks.

Every profile-scoped resource is authorized by walking back to its
profile and comparing the profile's `user_id` with the caller:

    profile = await get_owned_profile(db, profile_id, identity)

Missing resources are 404; resources of another account are 403.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import Identity
from app.core.exceptions import AuthorizationError, NotFoundError
from app.models import Playlist, Profile


async def get_owned_profile(db: AsyncSession, profile_id: int, identity: Identity) -> Profile:
    profile = await db.get(Profile, profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    if profile.user_id != identity.id:
        raise AuthorizationError("Forbidden - you can only access your own profiles")
    return profile


async def get_owned_playlist(db: AsyncSession, playlist_id: int, identity: Identity) -> Playlist:
    result = await db.execute(
        select(Playlist, Profile.user_id)
        .join(Profile, Playlist.profile_id == Profile.id)
        .where(Playlist.id == playlist_id)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Playlist not found")

    playlist, owner_id = row
    if owner_id != identity.id:
        raise AuthorizationError("Forbidden - you can only access your own playlists")
    return playlist
