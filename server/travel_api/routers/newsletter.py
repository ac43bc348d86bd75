"""Newsletter subscription router."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.content import NewsletterRequest, NewsletterSubscription
from ..services.content_service import NewsletterService

router = APIRouter(prefix="/newsletter", tags=["newsletter"])

DB_DEPENDENCY = Depends(get_db)


def _subscription_body(subscription) -> dict:
    return NewsletterSubscription.model_validate(subscription).model_dump(mode="json", by_alias=True)


@router.post("/subscribe", response_model=NewsletterSubscription, status_code=201)
async def subscribe(request: NewsletterRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    subscription = await NewsletterService(db).subscribe(str(request.email))
    return JSONResponse(status_code=201, content=_subscription_body(subscription))


@router.post("/unsubscribe", response_model=NewsletterSubscription)
async def unsubscribe(request: NewsletterRequest, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    subscription = await NewsletterService(db).unsubscribe(str(request.email))
    return JSONResponse(status_code=200, content=_subscription_body(subscription))
