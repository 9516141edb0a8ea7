"""
Profile Models

Models Included:
----------------
1. Profile - A persona under one account (e.g. a child's profile)
2. ProfileCategory - Categories a profile is interested in
3. Favorite - A story a profile has marked as favorite

Ownership:
----------
Accounts live in the external auth provider. A profile stores the
account id in `user_id`; every profile-scoped resource (playlists,
favorites, category links) is authorized by walking back to it.

Deletion:
---------
Dependents are deleted explicitly and transactionally by
app.services.profile_deletion, not by ORM cascades, so the deletion
counts can be reported and the photo cleaned up afterwards.
"""

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, Date, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import BaseModel, String36, String100, String500

if TYPE_CHECKING:
    from app.models.catalog import Category, Story
    from app.models.playlist import Playlist


class Profile(BaseModel):
    """
    A user-facing persona under one account.

    Table: profiles
    ---------------
    - user_id: account id from the auth provider (token `sub`)
    - name: unique per account, case-insensitively
    - date_of_birth: optional; `age` is derived from it
    - gender: optional boolean flag as sent by the client
    - photo_url: public URL of the avatar in object storage
    """

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(
        String36,
        nullable=False,
        index=True,
        comment="Account id (UUID) issued by the auth provider"
    )

    name: Mapped[str] = mapped_column(
        String100,
        nullable=False,
        comment="Display name; unique per account (case-insensitive)"
    )

    date_of_birth: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
        default=None,
    )

    gender: Mapped[Optional[bool]] = mapped_column(
        Boolean,
        nullable=True,
        default=None,
    )

    photo_url: Mapped[Optional[str]] = mapped_column(
        String500,
        nullable=True,
        default=None,
        comment="Public URL of the avatar in object storage"
    )

    playlists: Mapped[list["Playlist"]] = relationship(
        "Playlist",
        back_populates="profile",
    )

    profile_categories: Mapped[list["ProfileCategory"]] = relationship(
        "ProfileCategory",
        back_populates="profile",
    )

    favorites: Mapped[list["Favorite"]] = relationship(
        "Favorite",
        back_populates="profile",
    )

    @property
    def age(self) -> Optional[int]:
        """Age in whole years, or None without a date of birth."""
        if self.date_of_birth is None:
            return None
        today = date.today()
        born = self.date_of_birth
        return today.year - born.year - ((today.month, today.day) < (born.month, born.day))


class ProfileCategory(BaseModel):
    """Link between a profile and a category it likes."""

    __tablename__ = "profile_categories"

    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category_id: Mapped[int] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    profile: Mapped["Profile"] = relationship("Profile", back_populates="profile_categories")

    category: Mapped["Category"] = relationship("Category")

    __table_args__ = (
        UniqueConstraint('profile_id', 'category_id', name='uq_profile_category'),
    )


class Favorite(BaseModel):
    """
    A favorite story of a profile.

    At most one row per (profile, story); a second attempt is a conflict.
    """

    __tablename__ = "favorites"

    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    story_id: Mapped[int] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    profile: Mapped["Profile"] = relationship("Profile", back_populates="favorites")

    story: Mapped["Story"] = relationship("Story")

    __table_args__ = (
        UniqueConstraint('profile_id', 'story_id', name='uq_favorite_profile_story'),
    )
