"""
Database Models

This module contains all SQLAlchemy ORM models for the application.

Import models from this module to ensure they're registered with SQLAlchemy:

    from app.models import Profile, Playlist, PlaylistStory

This ensures that:
1. Alembic can detect all models for migrations
2. Relationships resolve by name
3. Base.metadata.create_all() sees every table
"""

from app.models.catalog import (
    Category,
    CategoryTranslation,
    Language,
    Story,
    StoryCategory,
    StoryPage,
    StoryTranslation,
)
from app.models.playlist import Playlist, PlaylistStory
from app.models.profile import Favorite, Profile, ProfileCategory

__all__ = [
    # Catalog
    "Language",
    "Story",
    "StoryTranslation",
    "StoryPage",
    "Category",
    "CategoryTranslation",
    "StoryCategory",
    # Profiles
    "Profile",
    "ProfileCategory",
    "Favorite",
    # Playlists
    "Playlist",
    "PlaylistStory",
]
