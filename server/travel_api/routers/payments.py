"""Payment router: gateway orders and checkout verification."""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import get_current_user
from ..core.exceptions import ProblemDetailsException
from ..models.user import User
from ..schemas.booking import Booking
from ..schemas.payment import CreateOrderRequest, CreateOrderResponse, VerifyPaymentRequest, VerifyPaymentResponse
from ..services.booking_service import BookingService
from ..services.notification_service import (
    NotificationDispatcher,
    NotificationEvent,
    booking_payload,
    get_notification_dispatcher,
)
from ..services.payment_gateway import PaymentGateway, get_payment_gateway
from ..services.payment_service import PaymentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payments", tags=["payments"])

DB_DEPENDENCY = Depends(get_db)
AUTH_DEPENDENCY = Depends(get_current_user)
GATEWAY_DEPENDENCY = Depends(get_payment_gateway)


@router.post("/create-order", response_model=CreateOrderResponse)
async def create_order(
    request: CreateOrderRequest,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY,
    gateway: Optional[PaymentGateway] = GATEWAY_DEPENDENCY
) -> JSONResponse:
    """
    Open a gateway order for a booking draft.

    The amount charged is always the server-computed total.
    """
    try:
        response_data = await PaymentService(db, gateway).create_order(request, user)
        return JSONResponse(
            status_code=200,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in payment order creation",
            extra={
                "package_id": request.booking.package_id,
                "event_id": request.booking.event_id,
                "user_id": user.id,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/verify", response_model=VerifyPaymentResponse)
async def verify_payment(
    request: VerifyPaymentRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = DB_DEPENDENCY,
    user: User = AUTH_DEPENDENCY,
    gateway: Optional[PaymentGateway] = GATEWAY_DEPENDENCY,
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher)
) -> JSONResponse:
    """
    Verify a checkout callback and persist the paid booking.

    Replaying the same order/payment pair returns the booking recorded the
    first time. Confirmation emails go out after the response, only for a
    newly created booking.
    """
    try:
        booking, created = await PaymentService(db, gateway).verify_and_commit(request, user)

        if created:
            target_name = await BookingService(db).describe_target(booking.target)
            background_tasks.add_task(
                dispatcher.notify,
                NotificationEvent.BOOKING_CREATED,
                booking_payload(booking, target_name),
            )

        response_data = VerifyPaymentResponse(
            message="Payment verified successfully" if created else "Payment already verified",
            booking=Booking.model_validate(booking),
        )
        return JSONResponse(
            status_code=200,
            content=response_data.model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in payment verification",
            extra={
                "order_id": request.razorpay_order_id,
                "payment_id": request.razorpay_payment_id,
                "user_id": user.id,
                "error": str(e)
            },
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
