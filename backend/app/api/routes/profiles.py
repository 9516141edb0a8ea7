"""
Profile API endpoints.

Profiles are created and updated with multipart forms because they carry
an avatar upload:

    POST /api/profiles
    name=Mia, date_of_birth=2018-04-02, gender=false, photo=<image file>

Deleting a profile removes its playlists, playlist entries, favorites and
category links in one transaction; the avatar is removed from object
storage afterwards, best-effort (see app.services.profile_deletion).
"""

import re
from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import CurrentIdentity
from app.core.exceptions import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    UnexpectedError,
    ValidationError,
)
from app.core.logging import get_logger
from app.db.deps import DBSession, DBTransaction
from app.models import Category, CategoryTranslation, Language, Profile, ProfileCategory
from app.schemas.catalog import CategoryResponse
from app.schemas.common import COMMON_ERROR_RESPONSES, ErrorResponse, MessageResponse
from app.schemas.profile import (
    DeletedCounts,
    ProfileCategoryCreate,
    ProfileCategoryResponse,
    ProfileDeleteResponse,
    ProfileDetailResponse,
    ProfileResponse,
)
from app.services.auth_provider import AuthProviderError, SupabaseAuthClient, get_optional_auth_client
from app.services.ownership import get_owned_profile
from app.services.profile_deletion import ProfileDeletionService, cleanup_stored_asset
from app.services.storage import StorageClient, get_storage_client, upload_image

logger = get_logger(__name__)

router = APIRouter(prefix="/profiles", tags=["Profiles"])

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
UUID_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

CONFLICT = {409: {"model": ErrorResponse, "description": "Profile with this name already exists"}}


# ========================================
# Helper Functions
# ========================================

def _parse_date_of_birth(value: Optional[str]) -> Optional[date]:
    """Parse a YYYY-MM-DD form value; empty means "not provided"."""
    if value is None or value == "":
        return None
    if not DATE_PATTERN.match(value):
        raise ValidationError("Invalid date format. Use YYYY-MM-DD")
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid date")
    if parsed > date.today():
        raise ValidationError("Date of birth cannot be in the future")
    return parsed


def _parse_gender(value: Optional[str]) -> Optional[bool]:
    if value is None or value == "":
        return None
    return value.strip().lower() in ("true", "1")


def _has_file(upload: Optional[UploadFile]) -> bool:
    return upload is not None and bool(upload.filename)


async def _ensure_name_available(
    db: AsyncSession,
    user_id: str,
    name: str,
    exclude_profile_id: Optional[int] = None,
) -> None:
    """Profile names are unique per account, case-insensitively."""
    query = select(Profile.id).where(
        Profile.user_id == user_id,
        func.lower(Profile.name) == name.lower(),
    )
    if exclude_profile_id is not None:
        query = query.where(Profile.id != exclude_profile_id)

    result = await db.execute(query)
    if result.first() is not None:
        raise ConflictError("Profile with this name already exists")


async def _linked_categories(
    db: AsyncSession,
    profile_id: int,
    language_id: Optional[int] = None,
) -> list[CategoryResponse]:
    if language_id is None:
        result = await db.execute(
            select(Category.id, Category.photo_url)
            .join(ProfileCategory, ProfileCategory.category_id == Category.id)
            .where(ProfileCategory.profile_id == profile_id)
            .order_by(Category.id)
        )
        return [CategoryResponse(id=row.id, photo_url=row.photo_url) for row in result]

    result = await db.execute(
        select(Category.id, Category.photo_url, CategoryTranslation.name)
        .join(ProfileCategory, ProfileCategory.category_id == Category.id)
        .outerjoin(
            CategoryTranslation,
            (CategoryTranslation.category_id == Category.id)
            & (CategoryTranslation.language_id == language_id),
        )
        .where(ProfileCategory.profile_id == profile_id)
        .order_by(Category.id)
    )
    return [
        CategoryResponse(id=row.id, photo_url=row.photo_url, name=row.name, language_id=language_id)
        for row in result
    ]


# ========================================
# Profiles
# ========================================

@router.post(
    "",
    response_model=ProfileResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a profile",
    responses={400: COMMON_ERROR_RESPONSES[400], 401: COMMON_ERROR_RESPONSES[401], **CONFLICT},
)
async def create_profile(
    db: DBSession,
    identity: CurrentIdentity,
    name: str = Form(...),
    date_of_birth: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    photo: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    name = name.strip()
    if not name:
        raise ValidationError("Name is required")
    dob = _parse_date_of_birth(date_of_birth)

    await _ensure_name_available(db, identity.id, name)

    photo_url = await upload_image(storage, photo, "avatar", identity.id)

    try:
        async with DBTransaction(db):
            profile = Profile(
                user_id=identity.id,
                name=name,
                date_of_birth=dob,
                gender=_parse_gender(gender),
                photo_url=photo_url,
            )
            db.add(profile)
            await db.flush()
    except Exception:
        await run_in_threadpool(cleanup_stored_asset, storage, photo_url)
        raise

    logger.info("profile_created", profile_id=profile.id, user_id=identity.id)
    return ProfileResponse.model_validate(profile)


@router.get(
    "/users/{user_id}",
    response_model=list[ProfileResponse],
    summary="List the caller's profiles",
    responses={**COMMON_ERROR_RESPONSES},
)
async def list_user_profiles(
    user_id: str,
    db: DBSession,
    identity: CurrentIdentity,
    auth_client: Optional[SupabaseAuthClient] = Depends(get_optional_auth_client),
):
    if not UUID_PATTERN.match(user_id):
        raise ValidationError("Invalid user ID format")

    if user_id.lower() != identity.id:
        raise AuthorizationError("Forbidden - you can only access your own profiles")

    if auth_client is not None and auth_client.can_lookup_users:
        try:
            account = await auth_client.get_user_by_id(user_id)
        except AuthProviderError as e:
            raise UnexpectedError("Failed to look up user") from e
        if account is None:
            raise NotFoundError("User not found")

    result = await db.execute(
        select(Profile).where(Profile.user_id == identity.id).order_by(Profile.id)
    )
    return [ProfileResponse.model_validate(profile) for profile in result.scalars()]


@router.get(
    "/{profile_id}",
    response_model=ProfileDetailResponse,
    summary="Get a profile with its categories",
    responses={**COMMON_ERROR_RESPONSES},
)
async def get_profile(profile_id: int, db: DBSession, identity: CurrentIdentity):
    profile = await get_owned_profile(db, profile_id, identity)
    categories = await _linked_categories(db, profile.id)
    return ProfileDetailResponse(
        **ProfileResponse.model_validate(profile).model_dump(),
        categories=categories,
    )


@router.put(
    "/{profile_id}",
    response_model=ProfileResponse,
    summary="Update a profile",
    responses={**COMMON_ERROR_RESPONSES, **CONFLICT},
)
async def update_profile(
    profile_id: int,
    db: DBSession,
    identity: CurrentIdentity,
    background_tasks: BackgroundTasks,
    name: Optional[str] = Form(None),
    date_of_birth: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    storage: StorageClient = Depends(get_storage_client),
):
    """
    Update any subset of name, date of birth, gender and photo.

    A replaced photo is deleted from storage after the update commits.
    """
    profile = await get_owned_profile(db, profile_id, identity)

    if name is not None:
        name = name.strip()
        if not name:
            raise ValidationError("Name cannot be empty")
        if name.lower() != profile.name.lower():
            await _ensure_name_available(db, identity.id, name, exclude_profile_id=profile.id)

    dob = _parse_date_of_birth(date_of_birth)
    new_gender = _parse_gender(gender)

    old_photo_url = profile.photo_url
    new_photo_url = None
    if _has_file(photo):
        new_photo_url = await upload_image(storage, photo, "avatar", identity.id)

    try:
        async with DBTransaction(db):
            if name:
                profile.name = name
            if dob is not None:
                profile.date_of_birth = dob
            if new_gender is not None:
                profile.gender = new_gender
            if new_photo_url is not None:
                profile.photo_url = new_photo_url
            await db.flush()
    except Exception:
        await run_in_threadpool(cleanup_stored_asset, storage, new_photo_url)
        raise

    if new_photo_url is not None and old_photo_url and old_photo_url != new_photo_url:
        background_tasks.add_task(cleanup_stored_asset, storage, old_photo_url)

    logger.info("profile_updated", profile_id=profile.id, photo_replaced=new_photo_url is not None)
    return ProfileResponse.model_validate(profile)


@router.delete(
    "/{profile_id}",
    response_model=ProfileDeleteResponse,
    summary="Delete a profile and everything that belongs to it",
    responses={**COMMON_ERROR_RESPONSES, 500: {"model": ErrorResponse, "description": "Deletion rolled back"}},
)
async def delete_profile(
    profile_id: int,
    db: DBSession,
    identity: CurrentIdentity,
    background_tasks: BackgroundTasks,
    storage: StorageClient = Depends(get_storage_client),
):
    """
    Delete a profile with its playlists, playlist entries, favorites and
    category links (all or nothing).

    `deleted.photo` is true whenever the profile had a photo; removing it
    from storage happens after the response and never changes it.
    """
    profile = await get_owned_profile(db, profile_id, identity)

    result = await ProfileDeletionService(db).delete_profile(profile)

    if result.had_photo:
        background_tasks.add_task(cleanup_stored_asset, storage, result.photo_url)

    return ProfileDeleteResponse(
        id=result.profile_id,
        deleted=DeletedCounts(
            playlist_stories=result.playlist_stories,
            playlists=result.playlists,
            favorites=result.favorites,
            profile_categories=result.profile_categories,
            photo=result.had_photo,
        ),
    )


# ========================================
# Profile Categories
# ========================================

@router.get(
    "/{profile_id}/categories",
    response_model=list[CategoryResponse],
    summary="Categories linked to a profile",
    responses={**COMMON_ERROR_RESPONSES},
)
async def list_profile_categories(profile_id: int, db: DBSession, identity: CurrentIdentity):
    profile = await get_owned_profile(db, profile_id, identity)
    return await _linked_categories(db, profile.id)


@router.get(
    "/{profile_id}/categories/languages/{language_id}",
    response_model=list[CategoryResponse],
    summary="Categories linked to a profile, named in a language",
    responses={**COMMON_ERROR_RESPONSES},
)
async def list_profile_categories_in_language(
    profile_id: int,
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    profile = await get_owned_profile(db, profile_id, identity)
    if await db.get(Language, language_id) is None:
        raise NotFoundError("Language not found")
    return await _linked_categories(db, profile.id, language_id)


@router.post(
    "/{profile_id}/categories",
    response_model=ProfileCategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Link a category to a profile",
    responses={**COMMON_ERROR_RESPONSES, 409: {"model": ErrorResponse, "description": "Already linked"}},
)
async def add_profile_category(
    profile_id: int,
    payload: ProfileCategoryCreate,
    db: DBSession,
    identity: CurrentIdentity,
):
    profile = await get_owned_profile(db, profile_id, identity)

    if await db.get(Category, payload.category_id) is None:
        raise NotFoundError("Category not found")

    existing = await db.execute(
        select(ProfileCategory.id).where(
            ProfileCategory.profile_id == profile.id,
            ProfileCategory.category_id == payload.category_id,
        )
    )
    if existing.first() is not None:
        raise ConflictError("Category already linked to this profile")

    async with DBTransaction(db):
        link = ProfileCategory(profile_id=profile.id, category_id=payload.category_id)
        db.add(link)
        await db.flush()

    return ProfileCategoryResponse.model_validate(link)


@router.delete(
    "/{profile_id}/categories/{category_id}",
    response_model=MessageResponse,
    summary="Unlink a category from a profile",
    responses={**COMMON_ERROR_RESPONSES},
)
async def remove_profile_category(
    profile_id: int,
    category_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    profile = await get_owned_profile(db, profile_id, identity)

    result = await db.execute(
        select(ProfileCategory).where(
            ProfileCategory.profile_id == profile.id,
            ProfileCategory.category_id == category_id,
        )
    )
    link = result.scalar_one_or_none()
    if link is None:
        raise NotFoundError("Category not linked to this profile")

    async with DBTransaction(db):
        await db.delete(link)

    return MessageResponse(message="Category removed from profile")
