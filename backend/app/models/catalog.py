"""
Catalog Models

The story catalog is shared by every account and is read-only through the
API (it is loaded by scripts/seed_catalog.py or by an admin tool).

Models Included:
----------------
1. Language - A language stories and categories are translated into
2. Story - A story (language-independent: cover photo, duration)
3. StoryTranslation - Title/description of a story in one language
4. StoryPage - One page of text of a translation
5. Category - A story category (language-independent: photo)
6. CategoryTranslation - Name of a category in one language
7. StoryCategory - Story ←→ Category association

Relationships:
--------------
- Story (1) ←→ (Many) StoryTranslation (1) ←→ (Many) StoryPage
- Category (1) ←→ (Many) CategoryTranslation
- Story (Many) ←→ (Many) Category via StoryCategory
"""

from typing import Optional

from sqlalchemy import ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import BaseModel, String50, String100, String255, String500


class Language(BaseModel):
    """A language, e.g. ("English", "GB")."""

    __tablename__ = "languages"

    name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Display name of the language"
    )

    country_code: Mapped[str] = mapped_column(
        String50,
        nullable=False,
        comment="Country code used for the flag shown next to the language"
    )


class Story(BaseModel):
    """
    A story.

    Everything language-specific (title, description, text) lives on
    StoryTranslation; a story is playable in every language it has a
    translation for.
    """

    __tablename__ = "stories"

    photo_url: Mapped[Optional[str]] = mapped_column(
        String500,
        nullable=True,
        comment="Public URL of the cover image"
    )

    duration: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
        comment="Narration length in seconds"
    )

    translations: Mapped[list["StoryTranslation"]] = relationship(
        "StoryTranslation",
        back_populates="story",
        cascade="all, delete-orphan",
    )

    story_categories: Mapped[list["StoryCategory"]] = relationship(
        "StoryCategory",
        back_populates="story",
        cascade="all, delete-orphan",
    )


class StoryTranslation(BaseModel):
    """A story's title, description and pages in one language."""

    __tablename__ = "story_translations"

    story_id: Mapped[int] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    language_id: Mapped[int] = mapped_column(
        ForeignKey("languages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title: Mapped[str] = mapped_column(String255, nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    story: Mapped["Story"] = relationship("Story", back_populates="translations")

    language: Mapped["Language"] = relationship("Language")

    pages: Mapped[list["StoryPage"]] = relationship(
        "StoryPage",
        back_populates="translation",
        cascade="all, delete-orphan",
        order_by="StoryPage.page_number",
    )

    __table_args__ = (
        UniqueConstraint('story_id', 'language_id', name='uq_story_translation_language'),
    )


class StoryPage(BaseModel):
    """One page of a translated story. Pages are numbered from 1."""

    __tablename__ = "story_pages"

    story_translation_id: Mapped[int] = mapped_column(
        ForeignKey("story_translations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    page_number: Mapped[int] = mapped_column(Integer, nullable=False)

    text_content: Mapped[str] = mapped_column(Text, nullable=False)

    translation: Mapped["StoryTranslation"] = relationship(
        "StoryTranslation",
        back_populates="pages",
    )

    __table_args__ = (
        UniqueConstraint('story_translation_id', 'page_number', name='uq_story_page_number'),
    )


class Category(BaseModel):
    """A story category. Its name is translated via CategoryTranslation."""

    __tablename__ = "categories"

    photo_url: Mapped[Optional[str]] = mapped_column(
        String500,
        nullable=True,
        comment="Public URL of the category image in object storage"
    )

    translations: Mapped[list["CategoryTranslation"]] = relationship(
        "CategoryTranslation",
        back_populates="category",
        cascade="all, delete-orphan",
    )


class CategoryTranslation(BaseModel):
    __tablename__ = "category_translations"

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    language_id: Mapped[int] = mapped_column(
        ForeignKey("languages.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name: Mapped[str] = mapped_column(String100, nullable=False)

    category: Mapped["Category"] = relationship("Category", back_populates="translations")

    __table_args__ = (
        UniqueConstraint('category_id', 'language_id', name='uq_category_translation_language'),
    )


class StoryCategory(BaseModel):
    """Association between a story and a category."""

    __tablename__ = "story_categories"

    story_id: Mapped[int] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    story: Mapped["Story"] = relationship("Story", back_populates="story_categories")

    category: Mapped["Category"] = relationship("Category")

    __table_args__ = (
        UniqueConstraint('story_id', 'category_id', name='uq_story_category'),
    )
