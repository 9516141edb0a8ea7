"""
Category API endpoints.

A category is created with its first translation and a photo in a
single multipart request:

    POST /api/categories
    name=Animals, language_id=1, photo=<image file>
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import func, select

from app.core.auth import CurrentIdentity
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.deps import DBSession, DBTransaction
from app.models import Category, CategoryTranslation, Language
from app.schemas.catalog import CategoryCreatedResponse, CategoryResponse
from app.schemas.common import COMMON_ERROR_RESPONSES, ErrorResponse
from app.services.profile_deletion import cleanup_stored_asset
from app.services.storage import StorageClient, get_storage_client, upload_image

logger = get_logger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post(
    "",
    response_model=CategoryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category with a photo",
    responses={
        400: COMMON_ERROR_RESPONSES[400],
        401: COMMON_ERROR_RESPONSES[401],
        404: {"model": ErrorResponse, "description": "Language not found"},
        409: {"model": ErrorResponse, "description": "Category already exists in this language"},
    },
)
async def create_category(
    db: DBSession,
    identity: CurrentIdentity,
    name: str = Form(...),
    language_id: int = Form(...),
    photo: UploadFile = File(...),
    storage: StorageClient = Depends(get_storage_client),
):
    name = name.strip()
    if not name:
        raise ValidationError("Name is required")

    if await db.get(Language, language_id) is None:
        raise NotFoundError("Language not found")

    duplicate = await db.execute(
        select(CategoryTranslation.id).where(
            func.lower(CategoryTranslation.name) == name.lower(),
            CategoryTranslation.language_id == language_id,
        )
    )
    if duplicate.scalar_one_or_none() is not None:
        raise ConflictError("Category already exists")

    photo_url = await upload_image(storage, photo, "category", identity.id)

    try:
        async with DBTransaction(db):
            category = Category(photo_url=photo_url)
            db.add(category)
            await db.flush()

            translation = CategoryTranslation(
                category_id=category.id,
                language_id=language_id,
                name=name,
            )
            db.add(translation)
            await db.flush()
    except Exception:
        # Row never committed; the uploaded photo is orphaned
        cleanup_stored_asset(storage, photo_url)
        raise

    logger.info("category_created", category_id=category.id, language_id=language_id)
    return CategoryCreatedResponse(
        id=category.id,
        photo_url=category.photo_url,
        translation_id=translation.id,
        language_id=language_id,
        name=translation.name,
    )


@router.get(
    "/languages/{language_id}",
    response_model=list[CategoryResponse],
    summary="List categories with names in a language",
    responses={401: COMMON_ERROR_RESPONSES[401]},
)
async def list_categories_in_language(
    language_id: int,
    db: DBSession,
    identity: CurrentIdentity,
):
    result = await db.execute(
        select(Category.id, Category.photo_url, CategoryTranslation.name)
        .join(CategoryTranslation, CategoryTranslation.category_id == Category.id)
        .where(CategoryTranslation.language_id == language_id)
        .order_by(CategoryTranslation.name)
    )
    return [
        CategoryResponse(id=row.id, photo_url=row.photo_url, name=row.name, language_id=language_id)
        for row in result
    ]
