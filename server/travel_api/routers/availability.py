"""Availability router: slot capacity per package or event date."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..core.exceptions import ProblemDetailsException
from ..models.user import User
from ..schemas.availability import (
    Availability,
    AvailabilityQuery,
    CreateAvailabilityRequest,
    UpdateAvailabilityRequest,
)
from ..services.availability_service import AvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/availability", tags=["availability"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _availability_body(availability) -> dict:
    return Availability.model_validate(availability).model_dump(mode="json", by_alias=True)


@router.get("", response_model=list[Availability])
async def list_availability(
    query: Annotated[AvailabilityQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List slot rows for a package or event, ordered by date."""
    rows = await AvailabilityService(db).list_availability(query)
    return JSONResponse(status_code=200, content=[_availability_body(row) for row in rows])


@router.post("", response_model=Availability, status_code=201)
async def create_availability(
    request: CreateAvailabilityRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        availability = await AvailabilityService(db).create_availability(request)
        return JSONResponse(status_code=201, content=_availability_body(availability))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in availability creation",
            extra={
                "package_id": request.package_id,
                "event_id": request.event_id,
                "date": request.date.isoformat(),
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.put("/{availability_id}", response_model=Availability)
async def update_availability(
    availability_id: int,
    request: UpdateAvailabilityRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        availability = await AvailabilityService(db).update_availability(availability_id, request)
        return JSONResponse(status_code=200, content=_availability_body(availability))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in availability update",
            extra={"availability_id": availability_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
