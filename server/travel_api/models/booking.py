"""Booking and Traveler model definitions."""

from datetime import date
from decimal import Decimal
from enum import Enum

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..core.database import Base, TimestampMixin
from .target import EXACTLY_ONE_TARGET, TargetMixin


class BookingStatus(str, Enum):
    """Booking status enumeration."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Booking payment status enumeration."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class HotelCategory(str, Enum):
    """Hotel category pricing tiers."""
    THREE_STAR = "3_star"
    FOUR_FIVE_STAR = "4_5_star"


class TravelerType(str, Enum):
    """Traveler age band."""
    ADULT = "adult"
    CHILD = "child"


class Booking(TargetMixin, TimestampMixin, Base):
    """Booking of a tour package or an event for a group of travelers."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Target (exactly one of the two is set)
    package_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("tour_packages.id"),
        nullable=True,
        index=True
    )
    event_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("events.id"),
        nullable=True,
        index=True
    )

    # Trip details
    travel_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    adults: Mapped[int] = mapped_column(Integer, nullable=False)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    hotel_category: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=HotelCategory.THREE_STAR.value
    )
    flight_included: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Contact
    contact_name: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Money and state
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING.value,
        index=True
    )
    payment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
        index=True
    )

    # Gateway identifiers; unique so a verified payment maps to one booking
    order_id: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)
    payment_id: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)

    __table_args__ = (
        CheckConstraint(EXACTLY_ONE_TARGET, name="ck_booking_exactly_one_target"),
        CheckConstraint("adults >= 1", name="ck_booking_adults_positive"),
        CheckConstraint("children >= 0", name="ck_booking_children_non_negative"),
        CheckConstraint("total_amount >= 0", name="ck_booking_total_non_negative"),
    )

    travelers: Mapped[list["Traveler"]] = relationship(
        "Traveler",
        back_populates="booking",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Traveler.id",
    )

    @property
    def slot_count(self) -> int:
        return self.adults + self.children

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, package_id={self.package_id}, event_id={self.event_id}, "
            f"status={self.status}, payment_status={self.payment_status})>"
        )


class Traveler(Base):
    """Traveler attached to a booking."""

    __tablename__ = "travelers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    booking_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(20), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(100), nullable=True)
    passport_number: Mapped[str | None] = mapped_column(String(50), nullable=True)
    passport_expiry: Mapped[date | None] = mapped_column(Date, nullable=True)
    dietary_requirements: Mapped[str | None] = mapped_column(Text, nullable=True)
    medical_conditions: Mapped[str | None] = mapped_column(Text, nullable=True)
    emergency_contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    emergency_contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("type IN ('adult', 'child')", name="ck_traveler_type"),
    )

    booking: Mapped["Booking"] = relationship("Booking", back_populates="travelers")

    def __repr__(self) -> str:
        return f"<Traveler(id={self.id}, booking_id={self.booking_id}, type={self.type})>"
