"""
Playlist Models

Models Included:
----------------
1. Playlist - A named, ordered list of stories belonging to a profile
2. PlaylistStory - One entry of a playlist (association object with `order`)

Ordering Invariant:
-------------------
For every playlist with n entries, the `order` values are exactly
{0, 1, ..., n-1}: zero-based, dense, no duplicates. Only
app.services.playlist_ordering writes `order`, always inside a transaction.

There is deliberately no unique constraint on (playlist_id, order):
the range shift updates many rows in one statement and would trip a
non-deferrable unique check half-way through.
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import BaseModel, String100

if TYPE_CHECKING:
    from app.models.catalog import Story
    from app.models.profile import Profile


class Playlist(BaseModel):
    """A named playlist owned by exactly one profile."""

    __tablename__ = "playlists"

    profile_id: Mapped[int] = mapped_column(
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="Owning profile"
    )

    name: Mapped[str] = mapped_column(String100, nullable=False)

    profile: Mapped["Profile"] = relationship("Profile", back_populates="playlists")

    entries: Mapped[list["PlaylistStory"]] = relationship(
        "PlaylistStory",
        back_populates="playlist",
        order_by="PlaylistStory.order",
    )


class PlaylistStory(BaseModel):
    """A story at a position of a playlist."""

    __tablename__ = "playlist_stories"

    playlist_id: Mapped[int] = mapped_column(
        ForeignKey("playlists.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    story_id: Mapped[int] = mapped_column(
        ForeignKey("stories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="Zero-based position within the playlist"
    )

    playlist: Mapped["Playlist"] = relationship("Playlist", back_populates="entries")

    story: Mapped["Story"] = relationship("Story")

    __table_args__ = (
        UniqueConstraint('playlist_id', 'story_id', name='uq_playlist_story'),
        Index('ix_playlist_stories_playlist_order', 'playlist_id', 'order'),
    )
