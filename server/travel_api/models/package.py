"""Tour package model definition."""

from decimal import Decimal
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, TimestampMixin


class TourPackage(TimestampMixin, Base):
    """
    Tour package offered for sale.

    ``pricing_tiers`` is an optional nested map keyed by hotel category
    (``3_star``, ``4_5_star``) and then by ``with_flights`` /
    ``without_flights``; each bucket holds ``price`` and optional
    ``strikethrough_price``, ``children_price`` and
    ``children_strikethrough_price`` as decimal strings.
    """

    __tablename__ = "tour_packages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Descriptive fields
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    overview: Mapped[str | None] = mapped_column(Text, nullable=True)
    destination: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # Duration
    duration_type: Mapped[str] = mapped_column(String(32), nullable=False, default="days_and_nights")
    duration_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_nights: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Booking rules
    booking_type: Mapped[str] = mapped_column(String(32), nullable=False, default="private")
    min_passenger_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_passenger_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Pricing
    starting_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    strike_through_price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    pricing_tiers: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="INR")

    # Content
    terms_and_conditions: Mapped[str | None] = mapped_column(Text, nullable=True)
    inclusions: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    exclusions: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    custom_highlights: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    gallery_images: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    itinerary: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)

    # Denormalized review aggregate
    rating: Mapped[Decimal] = mapped_column(Numeric(2, 1), nullable=False, default=Decimal("0.0"))
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, index=True)

    __table_args__ = (
        CheckConstraint("starting_price >= 0", name="ck_package_starting_price_non_negative"),
        CheckConstraint("min_passenger_count >= 1", name="ck_package_min_passengers"),
        CheckConstraint("rating >= 0 AND rating <= 5", name="ck_package_rating_range"),
    )

    def __repr__(self) -> str:
        return f"<TourPackage(id={self.id}, name='{self.name}', destination='{self.destination}')>"
