"""Favorite schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class FavoriteCreate(BaseModel):
    profile_id: int
    story_id: int


class FavoriteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    profile_id: int
    story_id: int
    created_at: datetime


class FavoriteStory(FavoriteResponse):
    """A favorite with the story's photo and its translation in one language."""
    photo_url: Optional[str] = None
    duration: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
