"""
Catalog schemas: languages, categories and stories.

Translated resources are flattened for a single language where the route
is language-scoped, e.g. a category in Spanish is
{"id": 3, "name": "Animales", "photo_url": "..."}.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ================================
# Languages
# ================================

class LanguageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    country_code: str


# ================================
# Categories
# ================================

class CategoryResponse(BaseModel):
    """A category with its name in one language (name is None when untranslated)."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    photo_url: Optional[str] = None
    name: Optional[str] = None
    language_id: Optional[int] = None


class CategoryCreatedResponse(BaseModel):
    """Returned by POST /categories."""
    id: int
    photo_url: Optional[str] = None
    translation_id: int
    language_id: int
    name: str


# ================================
# Stories
# ================================

class StorySummary(BaseModel):
    """Language-independent story fields."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    photo_url: Optional[str] = None
    duration: Optional[int] = Field(None, description="Narration length in seconds")
    created_at: datetime


class StoryTranslationSummary(BaseModel):
    """One available translation of a story."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    story_id: int
    language_id: int
    title: str
    description: Optional[str] = None
    language: LanguageResponse


class StoryPageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    page_number: int
    text_content: str


class StoryTranslationDetail(BaseModel):
    """
    A story in one language with a window of its pages.

    `pages` holds at most `limit` pages starting at `offset`, ordered by
    page number; `total_pages` is the page count of the whole translation.
    """
    id: int
    story_id: int
    language_id: int
    title: str
    description: Optional[str] = None
    photo_url: Optional[str] = None
    duration: Optional[int] = None
    total_pages: int
    offset: int
    limit: int
    pages: list[StoryPageResponse]


class StoryMinified(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    photo_url: Optional[str] = None
    duration: Optional[int] = None


class StoryInLanguage(BaseModel):
    """A story with its title in one language, used in category listings."""
    id: int
    photo_url: Optional[str] = None
    duration: Optional[int] = None
    title: Optional[str] = None
    description: Optional[str] = None
