"""
Playlist schemas.

Entries are always returned ordered by their zero-based `order`.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ================================
# Requests
# ================================

class PlaylistCreate(BaseModel):
    """
    Create a playlist, optionally with initial stories.

    Example request:
        POST /api/playlists
        {"profile_id": 7, "name": "Bedtime", "story_ids": [4, 1, 9]}

    The stories get order 0, 1, 2 in the given sequence.
    """
    profile_id: int
    name: str = Field(..., min_length=1, max_length=100)
    story_ids: list[int] = Field(default_factory=list)


class PlaylistUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class PlaylistEntryCreate(BaseModel):
    """
    Add a story to a playlist.

    Without `position` the story is appended. A position outside
    [0, entry count] is clamped into that range.
    """
    story_id: int
    position: Optional[int] = Field(None, description="Zero-based target position")


# ================================
# Responses
# ================================

class PlaylistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    playlist_id: int
    story_id: int
    order: int


class PlaylistEntryDetail(PlaylistEntryResponse):
    """An entry with story fields, titled in the requested language."""
    title: Optional[str] = None
    description: Optional[str] = None
    photo_url: Optional[str] = None
    duration: Optional[int] = None


class PlaylistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    profile_id: int
    name: str
    created_at: datetime
    updated_at: datetime
    story_count: int = 0


class PlaylistWithEntries(PlaylistResponse):
    entries: list[PlaylistEntryResponse] = Field(default_factory=list)


class PlaylistDetail(PlaylistResponse):
    entries: list[PlaylistEntryDetail] = Field(default_factory=list)


class PlaylistDeleteResponse(BaseModel):
    message: str = "Playlist deleted successfully"
    id: int
    deleted_entries: int


class PlaylistEntryRemoveResponse(BaseModel):
    message: str = "Story removed from playlist successfully"
    playlist_id: int
    story_id: int
    removed_order: int
