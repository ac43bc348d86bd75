"""Translation router for localized package and event content."""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..models.user import User
from ..schemas.content import Translation, UpsertTranslationRequest
from ..services.content_service import TranslationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/translations", tags=["translations"])

DB_DEPENDENCY = Depends(get_db)


@router.get("/{entity_type}/{entity_id}", response_model=dict[str, str])
async def get_translations(
    entity_type: str,
    entity_id: int,
    language: str = Query("en", min_length=2, max_length=10),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Map of field name to translated text; empty when nothing is translated."""
    translations = await TranslationService(db).get_translations(entity_type, entity_id, language)
    return JSONResponse(status_code=200, content=translations)


@router.post("", response_model=Translation, status_code=201)
async def upsert_translation(
    request: UpsertTranslationRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = Depends(require_admin)
) -> JSONResponse:
    translation = await TranslationService(db).upsert_translation(request)
    return JSONResponse(
        status_code=201,
        content=Translation.model_validate(translation).model_dump(mode="json", by_alias=True)
    )
