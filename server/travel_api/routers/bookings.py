"""Booking router for booking operations."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import ProblemDetailsException
from ..models.user import User
from ..schemas.booking import Booking, BookingDraft, BookingValidationResponse
from ..services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bookings", tags=["bookings"])

# Define dependencies to avoid B008 linting errors
DB_DEPENDENCY = Depends(get_db)
AUTH_DEPENDENCY = Depends(get_current_user)


def booking_body(booking) -> dict:
    """Serialize a booking with its travelers for the wire."""
    return Booking.model_validate(booking).model_dump(mode="json", by_alias=True)


@router.post("/validate", response_model=BookingValidationResponse)
async def validate_booking(
    draft: BookingDraft,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY
) -> JSONResponse:
    """
    Validate a booking draft and return its server-computed total.

    Nothing is written.
    """
    try:
        response_data = await BookingService(db).validate_draft(draft, user)
        return JSONResponse(
            status_code=200,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking validation",
            extra={
                "package_id": draft.package_id,
                "event_id": draft.event_id,
                "user_id": user.id,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("", response_model=Booking, status_code=201)
async def create_booking(
    draft: BookingDraft,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY
) -> JSONResponse:
    """Create an unpaid booking, reserving slots when a travel date is given."""
    try:
        booking = await BookingService(db).create_booking(draft, user)
        return JSONResponse(status_code=201, content=booking_body(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking creation",
            extra={
                "package_id": draft.package_id,
                "event_id": draft.event_id,
                "user_id": user.id,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("", response_model=list[Booking])
async def list_my_bookings(
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY
) -> JSONResponse:
    bookings = await BookingService(db).list_user_bookings(user.id)
    return JSONResponse(status_code=200, content=[booking_body(b) for b in bookings])


@router.get("/{booking_id}", response_model=Booking)
async def get_booking(
    booking_id: int,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY
) -> JSONResponse:
    """Get one booking; only its owner or an admin may read it."""
    booking = await BookingService(db).get_booking_for_user(booking_id, user)

    logger.info(
        "Booking retrieved successfully",
        extra={"booking_id": booking_id, "user_id": user.id}
    )

    return JSONResponse(status_code=200, content=booking_body(booking))


@router.post("/{booking_id}/cancel", response_model=Booking)
async def cancel_booking(
    booking_id: int,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY
) -> JSONResponse:
    try:
        booking = await BookingService(db).cancel_booking(booking_id, user)
        return JSONResponse(status_code=200, content=booking_body(booking))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in booking cancellation",
            extra={"booking_id": booking_id, "user_id": user.id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
