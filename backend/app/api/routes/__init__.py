"""
API route modules.

Import all route modules here for easy access.
"""

from app.api.routes import auth, categories, favorites, languages, playlists, profiles, stories

__all__ = ["auth", "categories", "favorites", "languages", "playlists", "profiles", "stories"]
