"""Review router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import ProblemDetailsException
from ..models.user import User
from ..schemas.review import CreateReviewRequest, Review, ReviewQuery
from ..services.review_service import ReviewService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["reviews"])

DB_DEPENDENCY = Depends(get_db)


@router.get("", response_model=list[Review])
async def list_reviews(
    query: Annotated[ReviewQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    reviews = await ReviewService(db).list_reviews(query)
    return JSONResponse(
        status_code=200,
        content=[Review.model_validate(r).model_dump(mode="json", by_alias=True) for r in reviews]
    )


@router.post("", response_model=Review, status_code=201)
async def create_review(
    request: CreateReviewRequest,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = Depends(get_current_user)
) -> JSONResponse:
    """Post a review; the package's rating and review count are refreshed."""
    try:
        review = await ReviewService(db).create_review(request, user)
        return JSONResponse(
            status_code=201,
            content=Review.model_validate(review).model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in review creation",
            extra={
                "package_id": request.package_id,
                "event_id": request.event_id,
                "user_id": user.id,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
