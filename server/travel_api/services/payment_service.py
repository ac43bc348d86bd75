"""Payment workflow: gateway orders and signed-callback verification."""

import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import (
    AmountMismatchError,
    InsufficientAvailabilityError,
    PaymentGatewayError,
    PaymentNotConfiguredError,
    PaymentSignatureError,
    ValidationError,
)
from ..core.observability import get_logger, metrics_collector
from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..models.payment import Payment, PaymentRecordStatus
from ..models.user import User
from ..schemas.payment import CreateOrderRequest, CreateOrderResponse, VerifyPaymentRequest
from .booking_service import BookingService
from .payment_gateway import PaymentGateway
from .pricing import quantize, to_minor_units

logger = logging.getLogger(__name__)
events = get_logger("payments")


class PaymentService:
    """Service for payment operations."""

    def __init__(self, db: AsyncSession, gateway: Optional[PaymentGateway]):
        self.db = db
        self.gateway = gateway
        self.booking_service = BookingService(db)

    def _require_gateway(self) -> PaymentGateway:
        if self.gateway is None:
            logger.error("Payment requested but the gateway is not configured")
            raise PaymentNotConfiguredError()
        return self.gateway

    async def create_order(self, request: CreateOrderRequest, user: User) -> CreateOrderResponse:
        """
        Open a gateway order for the server-computed booking total.

        Nothing is written locally; the booking is only persisted once the
        payment is verified.

        Raises:
            PaymentNotConfiguredError: If gateway credentials are missing
            ValidationError: If the requested currency is not the booking currency
            AmountMismatchError: If the client's amount differs from the total
            PaymentGatewayError: If the gateway call fails
        """
        gateway = self._require_gateway()
        prepared = await self.booking_service.prepare(request.booking, user)

        declared = request.amount if request.amount is not None else request.booking.total_amount
        if declared is not None and quantize(declared) != prepared.total_amount:
            raise AmountMismatchError(expected=prepared.total_amount, received=declared)

        currency = prepared.currency.upper()
        if request.currency is not None and request.currency.upper() != currency:
            raise ValidationError(
                detail=f"Bookings for this target are charged in {currency}",
                errors=[{"path": "currency", "message": f"Must be {currency}"}],
            )

        amount = to_minor_units(prepared.total_amount)
        # Razorpay caps receipts at 40 characters
        receipt = f"booking_{int(datetime.now(timezone.utc).timestamp())}_{uuid.uuid4().hex[:8]}"

        order = await gateway.create_order(
            amount=amount,
            currency=currency,
            receipt=receipt,
            notes={
                "user_id": user.id,
                "booking": request.booking.model_dump_json(by_alias=True, exclude_none=True),
            },
        )
        order_id = order.get("id")
        if not order_id:
            raise PaymentGatewayError(detail="Payment gateway returned no order id")

        metrics_collector.record_payment_order(currency)
        events.info(
            "payment_order_created",
            order_id=order_id,
            user_id=user.id,
            amount=amount,
            currency=currency,
            target_type=prepared.target.kind,
            target_id=prepared.target.id,
        )

        return CreateOrderResponse(
            order_id=order_id,
            amount=amount,
            currency=currency,
            total_amount=prepared.total_amount,
            key_id=gateway.key_id,
        )

    async def verify_and_commit(self, request: VerifyPaymentRequest, user: User) -> tuple[Booking, bool]:
        """
        Verify a signed checkout callback and persist the paid booking.

        Returns the booking and whether it was created by this call; a replay
        of an already-recorded payment returns the existing booking.

        Raises:
            PaymentNotConfiguredError: If gateway credentials are missing
            PaymentSignatureError: If the signature does not verify
            AmountMismatchError: If the declared or charged amount is wrong
            InsufficientAvailabilityError: If the slots are gone
        """
        gateway = self._require_gateway()
        order_id = request.razorpay_order_id
        payment_id = request.razorpay_payment_id

        if not gateway.verify_signature(order_id, payment_id, request.razorpay_signature):
            metrics_collector.record_payment_verification("invalid_signature")
            logger.warning(
                "Payment verification failed - invalid signature",
                extra={"order_id": order_id, "payment_id": payment_id, "user_id": user.id}
            )
            raise PaymentSignatureError()

        existing = await self.booking_service.find_by_gateway_ids(order_id, payment_id)
        if existing is not None:
            metrics_collector.record_payment_verification("replayed")
            logger.info(
                "Payment already verified - returning existing booking",
                extra={"order_id": order_id, "payment_id": payment_id, "booking_id": existing.id}
            )
            return existing, False

        prepared = await self.booking_service.prepare(request.booking, user)
        total = prepared.total_amount

        declared = request.booking.total_amount
        if declared is not None and quantize(declared) != total:
            metrics_collector.record_payment_verification("amount_mismatch")
            raise AmountMismatchError(expected=total, received=declared)

        order = await gateway.fetch_order(order_id)
        if str(order.get("currency", "")).upper() != prepared.currency.upper():
            metrics_collector.record_payment_verification("amount_mismatch")
            logger.warning(
                "Payment verification failed - gateway currency differs from booking currency",
                extra={"order_id": order_id, "charged_currency": order.get("currency"), "expected": prepared.currency}
            )
            raise AmountMismatchError(
                expected=total,
                received=total,
                detail=f"Order was charged in {order.get('currency')}, booking is priced in {prepared.currency}",
            )

        charged = order.get("amount")
        if charged != to_minor_units(total):
            metrics_collector.record_payment_verification("amount_mismatch")
            logger.warning(
                "Payment verification failed - gateway amount differs from booking total",
                extra={"order_id": order_id, "charged_minor": charged, "expected": str(total)}
            )
            raise AmountMismatchError(
                expected=total,
                received=Decimal(charged) / 100 if isinstance(charged, int) else Decimal("0"),
                detail="Charged amount does not match the booking total",
            )

        try:
            await self.booking_service.reserve_for(prepared)
            booking = self.booking_service.build_booking(
                prepared,
                user,
                status=BookingStatus.CONFIRMED,
                payment_status=PaymentStatus.PAID,
                order_id=order_id,
                payment_id=payment_id,
            )
            self.db.add(booking)
            await self.db.flush()

            self.db.add(
                Payment(
                    booking_id=booking.id,
                    razorpay_order_id=order_id,
                    razorpay_payment_id=payment_id,
                    razorpay_signature=request.razorpay_signature,
                    amount=total,
                    currency=prepared.currency,
                    status=PaymentRecordStatus.PAID.value,
                )
            )
            await self.db.commit()
        except InsufficientAvailabilityError:
            await self.db.rollback()
            metrics_collector.record_payment_verification("no_availability")
            logger.error(
                "Paid booking could not reserve slots",
                extra={"order_id": order_id, "payment_id": payment_id, "user_id": user.id}
            )
            raise
        except IntegrityError:
            await self.db.rollback()
            existing = await self.booking_service.find_by_gateway_ids(order_id, payment_id)
            if existing is None:
                raise
            metrics_collector.record_payment_verification("replayed")
            logger.info(
                "Concurrent verification already recorded this payment",
                extra={"order_id": order_id, "booking_id": existing.id}
            )
            return existing, False

        metrics_collector.record_payment_verification("verified")
        metrics_collector.record_booking_created(prepared.target.kind, booking.status)
        events.info(
            "payment_verified",
            booking_id=booking.id,
            order_id=order_id,
            payment_id=payment_id,
            user_id=user.id,
            amount=str(total),
            currency=prepared.currency,
        )
        return await self.booking_service.get_booking_by_id_or_raise(booking.id), True
