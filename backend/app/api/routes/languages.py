"""Language API endpoints."""

from fastapi import APIRouter
from sqlalchemy import select

from app.core.auth import CurrentIdentity
from app.db.deps import DBSession
from app.models import Language
from app.schemas.catalog import LanguageResponse
from app.schemas.common import COMMON_ERROR_RESPONSES

router = APIRouter(prefix="/languages", tags=["Languages"])


@router.get(
    "",
    response_model=list[LanguageResponse],
    summary="List available languages",
    responses={401: COMMON_ERROR_RESPONSES[401]},
)
async def list_languages(db: DBSession, identity: CurrentIdentity):
    result = await db.execute(select(Language).order_by(Language.id))
    return result.scalars().all()
