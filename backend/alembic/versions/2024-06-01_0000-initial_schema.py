"""initial_schema_catalog_profiles_playlists_favorites

Revision ID: 5a1c2e7d9b40
Revises:
Create Date: 2024-06-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '5a1c2e7d9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """
    Create the full schema.

    Catalog:   languages, stories, story_translations, story_pages,
               categories, category_translations, story_categories
    Profiles:  profiles, profile_categories, favorites
    Playlists: playlists, playlist_stories
    """

    # ================================
    # Catalog
    # ================================
    op.create_table(
        'languages',
        *_timestamps(),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('country_code', sa.String(length=50), nullable=False),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_languages')),
    )

    op.create_table(
        'stories',
        *_timestamps(),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.Column('duration', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_stories')),
    )

    op.create_table(
        'story_translations',
        *_timestamps(),
        sa.Column('story_id', sa.Integer(), nullable=False),
        sa.Column('language_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['story_id'], ['stories.id'], name=op.f('fk_story_translations_story_id_stories'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['language_id'], ['languages.id'], name=op.f('fk_story_translations_language_id_languages'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_story_translations')),
        sa.UniqueConstraint('story_id', 'language_id', name='uq_story_translation_language'),
    )
    op.create_index(op.f('ix_story_translations_story_id'), 'story_translations', ['story_id'])
    op.create_index(op.f('ix_story_translations_language_id'), 'story_translations', ['language_id'])

    op.create_table(
        'story_pages',
        *_timestamps(),
        sa.Column('story_translation_id', sa.Integer(), nullable=False),
        sa.Column('page_number', sa.Integer(), nullable=False),
        sa.Column('text_content', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['story_translation_id'], ['story_translations.id'], name=op.f('fk_story_pages_story_translation_id_story_translations'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_story_pages')),
        sa.UniqueConstraint('story_translation_id', 'page_number', name='uq_story_page_number'),
    )
    op.create_index(op.f('ix_story_pages_story_translation_id'), 'story_pages', ['story_translation_id'])

    op.create_table(
        'categories',
        *_timestamps(),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_categories')),
    )

    op.create_table(
        'category_translations',
        *_timestamps(),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.Column('language_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name=op.f('fk_category_translations_category_id_categories'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['language_id'], ['languages.id'], name=op.f('fk_category_translations_language_id_languages'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_category_translations')),
        sa.UniqueConstraint('category_id', 'language_id', name='uq_category_translation_language'),
    )
    op.create_index(op.f('ix_category_translations_category_id'), 'category_translations', ['category_id'])
    op.create_index(op.f('ix_category_translations_language_id'), 'category_translations', ['language_id'])

    op.create_table(
        'story_categories',
        *_timestamps(),
        sa.Column('story_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['story_id'], ['stories.id'], name=op.f('fk_story_categories_story_id_stories'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name=op.f('fk_story_categories_category_id_categories'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_story_categories')),
        sa.UniqueConstraint('story_id', 'category_id', name='uq_story_category'),
    )
    op.create_index(op.f('ix_story_categories_story_id'), 'story_categories', ['story_id'])
    op.create_index(op.f('ix_story_categories_category_id'), 'story_categories', ['category_id'])

    # ================================
    # Profiles
    # ================================
    op.create_table(
        'profiles',
        *_timestamps(),
        sa.Column('user_id', sa.String(length=36), nullable=False, comment='Account id (UUID) issued by the auth provider'),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('gender', sa.Boolean(), nullable=True),
        sa.Column('photo_url', sa.String(length=500), nullable=True),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_profiles')),
    )
    op.create_index(op.f('ix_profiles_user_id'), 'profiles', ['user_id'])

    op.create_table(
        'profile_categories',
        *_timestamps(),
        sa.Column('profile_id', sa.Integer(), nullable=False),
        sa.Column('category_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], name=op.f('fk_profile_categories_profile_id_profiles'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['categories.id'], name=op.f('fk_profile_categories_category_id_categories'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_profile_categories')),
        sa.UniqueConstraint('profile_id', 'category_id', name='uq_profile_category'),
    )
    op.create_index(op.f('ix_profile_categories_profile_id'), 'profile_categories', ['profile_id'])
    op.create_index(op.f('ix_profile_categories_category_id'), 'profile_categories', ['category_id'])

    op.create_table(
        'favorites',
        *_timestamps(),
        sa.Column('profile_id', sa.Integer(), nullable=False),
        sa.Column('story_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], name=op.f('fk_favorites_profile_id_profiles'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['story_id'], ['stories.id'], name=op.f('fk_favorites_story_id_stories'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_favorites')),
        sa.UniqueConstraint('profile_id', 'story_id', name='uq_favorite_profile_story'),
    )
    op.create_index(op.f('ix_favorites_profile_id'), 'favorites', ['profile_id'])
    op.create_index(op.f('ix_favorites_story_id'), 'favorites', ['story_id'])

    # ================================
    # Playlists
    # ================================
    op.create_table(
        'playlists',
        *_timestamps(),
        sa.Column('profile_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.ForeignKeyConstraint(['profile_id'], ['profiles.id'], name=op.f('fk_playlists_profile_id_profiles'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_playlists')),
    )
    op.create_index(op.f('ix_playlists_profile_id'), 'playlists', ['profile_id'])

    op.create_table(
        'playlist_stories',
        *_timestamps(),
        sa.Column('playlist_id', sa.Integer(), nullable=False),
        sa.Column('story_id', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False, comment='Zero-based position within the playlist'),
        sa.ForeignKeyConstraint(['playlist_id'], ['playlists.id'], name=op.f('fk_playlist_stories_playlist_id_playlists'), ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['story_id'], ['stories.id'], name=op.f('fk_playlist_stories_story_id_stories'), ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_playlist_stories')),
        sa.UniqueConstraint('playlist_id', 'story_id', name='uq_playlist_story'),
    )
    op.create_index(op.f('ix_playlist_stories_playlist_id'), 'playlist_stories', ['playlist_id'])
    op.create_index(op.f('ix_playlist_stories_story_id'), 'playlist_stories', ['story_id'])
    op.create_index('ix_playlist_stories_playlist_order', 'playlist_stories', ['playlist_id', 'order'])


def downgrade() -> None:
    """Drop every table in reverse dependency order."""
    op.drop_table('playlist_stories')
    op.drop_table('playlists')
    op.drop_table('favorites')
    op.drop_table('profile_categories')
    op.drop_table('profiles')
    op.drop_table('story_categories')
    op.drop_table('category_translations')
    op.drop_table('categories')
    op.drop_table('story_pages')
    op.drop_table('story_translations')
    op.drop_table('stories')
    op.drop_table('languages')
