"""
API routes initialization.

This module aggregates all API routers and provides a single router
to include in the main application (mounted under settings.API_PREFIX).
"""

from fastapi import APIRouter

from app.api.routes import auth, categories, favorites, languages, playlists, profiles, stories

# Create main API router
api_router = APIRouter()

# Authentication (proxied to the auth provider)
api_router.include_router(auth.router)

# Catalog
api_router.include_router(languages.router)
api_router.include_router(categories.router)
api_router.include_router(stories.router)

# Profile-scoped resources
api_router.include_router(profiles.router)
api_router.include_router(playlists.router)
api_router.include_router(favorites.router)
