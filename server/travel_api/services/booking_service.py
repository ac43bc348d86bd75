"""Booking service for business logic operations."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from ..core.exceptions import (
    AuthorizationError,
    InsufficientAvailabilityError,
    NotFoundError,
    ValidationError,
)
from ..core.observability import metrics_collector
from ..models.booking import Booking, BookingStatus, PaymentStatus, Traveler
from ..models.target import BookingTarget, EventTarget, PackageTarget
from ..models.user import User
from ..schemas.booking import BookingDraft, BookingQuery, BookingValidationResponse, PriceBreakdown
from .availability_service import AvailabilityService
from .event_service import EventService
from .package_service import PackageService
from .pricing import PriceQuote, compute_total, flat_quote, resolve_price

logger = logging.getLogger(__name__)


def _violation(path: str, message: str) -> ValidationError:
    return ValidationError(detail=message, errors=[{"path": path, "message": message}])


@dataclass(frozen=True)
class PreparedBooking:
    """A validated draft with its server-side price and resolved contact."""

    draft: BookingDraft
    target: BookingTarget
    quote: PriceQuote
    total_amount: Decimal
    currency: str
    contact_name: str
    contact_email: str
    contact_phone: Optional[str]

    @property
    def slot_count(self) -> int:
        return self.draft.slot_count

    def breakdown(self) -> PriceBreakdown:
        return PriceBreakdown(
            price=self.quote.price,
            strike_through_price=self.quote.strike_through_price,
            children_price=self.quote.children_price,
            children_strike_through_price=self.quote.children_strike_through_price,
        )


class BookingService:
    """Service for booking-related operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.package_service = PackageService(db)
        self.event_service = EventService(db)
        self.availability_service = AvailabilityService(db)

    async def prepare(self, draft: BookingDraft, user: Optional[User] = None) -> PreparedBooking:
        """
        Validate a draft against the catalog and price it.

        No rows are written.

        Raises:
            ValidationError: If the target is unknown or inactive, contact details
                are missing, or the draft does not fit the target's rules
            InsufficientAvailabilityError: If the travel date lacks free slots
        """
        target = draft.target

        if isinstance(target, PackageTarget):
            package = await self.package_service.get_package_by_id(target.id)
            if package is None or not package.active:
                raise _violation("packageId", f"Package {target.id} is not available for booking")
            if draft.slot_count < package.min_passenger_count:
                raise _violation("adults", f"This package requires at least {package.min_passenger_count} travelers")
            if package.max_passenger_count is not None and draft.slot_count > package.max_passenger_count:
                raise _violation("adults", f"This package allows at most {package.max_passenger_count} travelers")
            quote = resolve_price(package, draft.hotel_category, draft.flight_included)
            currency = package.currency
        else:
            event = await self.event_service.get_event_by_id(target.id)
            if event is None or not event.active:
                raise _violation("eventId", f"Event {target.id} is not available for booking")
            if draft.travel_date is None:
                raise _violation("travelDate", "travelDate is required when booking an event")
            quote = await self._event_quote(target, draft)
            currency = "INR"

        contact_name = draft.contact_name or (user.full_name if user else None)
        contact_email = draft.contact_email or (user.email if user else None)
        contact_phone = draft.contact_phone or (user.phone if user else None)
        if not contact_name or not contact_email:
            missing = "contactName" if not contact_name else "contactEmail"
            raise _violation(missing, f"{missing} is required")

        if draft.travel_date is not None:
            available = await self.availability_service.check_availability(
                target, draft.travel_date, draft.slot_count
            )
            if not available:
                logger.warning(
                    "Booking draft rejected - insufficient availability",
                    extra={
                        "target_type": target.kind,
                        "target_id": target.id,
                        "travel_date": draft.travel_date.isoformat(),
                        "requested_slots": draft.slot_count
                    }
                )
                raise InsufficientAvailabilityError(
                    requested_slots=draft.slot_count,
                    travel_date=draft.travel_date.isoformat(),
                )

        return PreparedBooking(
            draft=draft,
            target=target,
            quote=quote,
            total_amount=compute_total(quote, draft.adults, draft.children),
            currency=currency,
            contact_name=contact_name,
            contact_email=str(contact_email),
            contact_phone=contact_phone,
        )

    async def describe_target(self, target: BookingTarget) -> str:
        """Display name of a booking's package or event."""
        if isinstance(target, PackageTarget):
            item = await self.package_service.get_package_by_id(target.id)
        else:
            item = await self.event_service.get_event_by_id(target.id)
        return item.name if item is not None else f"{target.kind} #{target.id}"

    async def _event_quote(self, target: EventTarget, draft: BookingDraft) -> PriceQuote:
        slot = await self.availability_service.get_slot(target, draft.travel_date)
        if slot is None or slot.price is None:
            raise _violation(
                "travelDate",
                f"Event {target.id} has no price for {draft.travel_date.isoformat()}"
            )
        return flat_quote(slot.price)

    async def validate_draft(self, draft: BookingDraft, user: Optional[User] = None) -> BookingValidationResponse:
        prepared = await self.prepare(draft, user)
        return BookingValidationResponse(
            valid=True,
            total_amount=prepared.total_amount,
            currency=prepared.currency,
            slots_required=prepared.slot_count,
            quote=prepared.breakdown(),
        )

    def build_booking(
        self,
        prepared: PreparedBooking,
        user: Optional[User],
        status: BookingStatus,
        payment_status: PaymentStatus,
        order_id: Optional[str] = None,
        payment_id: Optional[str] = None,
    ) -> Booking:
        """Construct (without adding) a booking and its travelers."""
        draft = prepared.draft
        booking = Booking(
            user_id=user.id if user else None,
            travel_date=draft.travel_date,
            adults=draft.adults,
            children=draft.children,
            hotel_category=draft.hotel_category.value,
            flight_included=draft.flight_included,
            special_requests=draft.special_requests,
            contact_name=prepared.contact_name,
            contact_email=prepared.contact_email,
            contact_phone=prepared.contact_phone,
            total_amount=prepared.total_amount,
            currency=prepared.currency,
            status=status.value,
            payment_status=payment_status.value,
            order_id=order_id,
            payment_id=payment_id,
            travelers=[
                Traveler(**{**traveler.model_dump(), "type": traveler.type.value})
                for traveler in draft.travelers
            ],
        )
        booking.target = prepared.target
        return booking

    async def reserve_for(self, prepared: PreparedBooking) -> None:
        """
        Reserve the draft's slots inside the caller's transaction.

        Undated drafts reserve nothing.

        Raises:
            InsufficientAvailabilityError: If the atomic reservation fails
        """
        travel_date = prepared.draft.travel_date
        if travel_date is None:
            return
        reserved = await self.availability_service.reserve_slots(
            prepared.target, travel_date, prepared.slot_count
        )
        if not reserved:
            raise InsufficientAvailabilityError(
                requested_slots=prepared.slot_count,
                travel_date=travel_date.isoformat(),
            )

    async def create_booking(self, draft: BookingDraft, user: User) -> Booking:
        """
        Create an unpaid booking, reserving slots in the same transaction.

        Raises:
            ValidationError: If the draft is invalid
            InsufficientAvailabilityError: If the slots cannot be reserved
        """
        prepared = await self.prepare(draft, user)

        try:
            await self.reserve_for(prepared)
            booking = self.build_booking(prepared, user, BookingStatus.PENDING, PaymentStatus.PENDING)
            self.db.add(booking)
            await self.db.commit()
        except (InsufficientAvailabilityError, IntegrityError):
            await self.db.rollback()
            raise

        metrics_collector.record_booking_created(prepared.target.kind, booking.status)
        logger.info(
            "Booking created successfully",
            extra={
                "booking_id": booking.id,
                "user_id": user.id,
                "target_type": prepared.target.kind,
                "target_id": prepared.target.id,
                "slots": prepared.slot_count,
                "total_amount": str(prepared.total_amount)
            }
        )
        return await self.get_booking_by_id_or_raise(booking.id)

    def _with_travelers(self):
        return select(Booking).options(selectinload(Booking.travelers)).execution_options(populate_existing=True)

    async def get_booking_by_id(self, booking_id: int) -> Optional[Booking]:
        result = await self.db.execute(self._with_travelers().where(Booking.id == booking_id))
        return result.scalar_one_or_none()

    async def get_booking_by_id_or_raise(self, booking_id: int) -> Booking:
        booking = await self.get_booking_by_id(booking_id)
        if not booking:
            logger.warning("Booking not found", extra={"booking_id": booking_id})
            raise NotFoundError(resource_type="booking", resource_id=str(booking_id))
        return booking

    async def get_booking_for_user(self, booking_id: int, user: User) -> Booking:
        """
        Get a booking the user owns; admins may read any booking.

        Raises:
            NotFoundError: If booking not found
            AuthorizationError: If the user neither owns it nor is an admin
        """
        booking = await self.get_booking_by_id_or_raise(booking_id)
        if booking.user_id != user.id and not user.is_admin:
            logger.warning(
                "Booking access denied",
                extra={"booking_id": booking_id, "user_id": user.id}
            )
            raise AuthorizationError(detail="You do not have access to this booking")
        return booking

    async def find_by_gateway_ids(self, order_id: str, payment_id: str) -> Optional[Booking]:
        """Booking already recorded for either gateway identifier."""
        stmt = self._with_travelers().where(
            or_(Booking.order_id == order_id, Booking.payment_id == payment_id)
        )
        result = await self.db.execute(stmt.limit(1))
        return result.scalar_one_or_none()

    async def list_user_bookings(self, user_id: str) -> list[Booking]:
        stmt = self._with_travelers().where(Booking.user_id == user_id).order_by(
            Booking.created_at.desc(), Booking.id.desc()
        )
        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def list_bookings(self, query: BookingQuery) -> list[Booking]:
        """List all bookings matching the admin query options, newest first."""
        conditions = []
        if query.status is not None:
            conditions.append(Booking.status == query.status.value)
        if query.payment_status is not None:
            conditions.append(Booking.payment_status == query.payment_status.value)
        if query.package_id is not None:
            conditions.append(Booking.package_id == query.package_id)
        if query.event_id is not None:
            conditions.append(Booking.event_id == query.event_id)
        if query.user_id is not None:
            conditions.append(Booking.user_id == query.user_id)

        stmt = self._with_travelers()
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(Booking.created_at.desc(), Booking.id.desc()).offset(query.offset).limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def cancel_booking(self, booking_id: int, user: User) -> Booking:
        """
        Cancel a booking. Cancelling twice is a no-op.

        Reserved slots stay booked.
        """
        booking = await self.get_booking_for_user(booking_id, user)
        if booking.status == BookingStatus.CANCELLED.value:
            return booking

        previous_status = booking.status
        booking.status = BookingStatus.CANCELLED.value
        await self.db.commit()

        metrics_collector.record_booking_cancelled()
        logger.info(
            "Booking cancelled",
            extra={
                "booking_id": booking_id,
                "previous_status": previous_status,
                "cancelled_by": user.id
            }
        )
        return await self.get_booking_by_id_or_raise(booking_id)
