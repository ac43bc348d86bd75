"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator, model_validator

from ..models.booking import BookingStatus, HotelCategory, PaymentStatus, TravelerType
from ..models.target import BookingTarget, target_from_ids
from .common import CamelModel, Pagination, normalize_slot_date

MAX_ADULTS = 20
MAX_CHILDREN = 20


class TravelerIn(CamelModel):
    """Traveler details submitted with a booking."""

    type: TravelerType = Field(..., description="adult or child")
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = Field(None, max_length=20)
    nationality: Optional[str] = Field(None, max_length=100)
    passport_number: Optional[str] = Field(None, max_length=50)
    passport_expiry: Optional[date] = None
    dietary_requirements: Optional[str] = None
    medical_conditions: Optional[str] = None
    emergency_contact_name: Optional[str] = Field(None, max_length=255)
    emergency_contact_phone: Optional[str] = Field(None, max_length=50)
    special_requests: Optional[str] = None


class Traveler(TravelerIn):
    """Traveler response schema."""

    id: int
    booking_id: int


class BookingDraft(CamelModel):
    """
    Booking as assembled by the client before payment.

    Exactly one of ``packageId`` / ``eventId`` must be given. Contact fields
    default to the signed-in user's profile when omitted.
    """

    package_id: Optional[int] = Field(None, ge=1, description="Tour package being booked")
    event_id: Optional[int] = Field(None, ge=1, description="Event being booked")
    travel_date: Optional[date] = Field(None, description="Travel day; required for events")
    adults: int = Field(..., ge=1, le=MAX_ADULTS, description="Number of adults")
    children: int = Field(0, ge=0, le=MAX_CHILDREN, description="Number of children")
    hotel_category: HotelCategory = Field(HotelCategory.THREE_STAR, description="Hotel tier")
    flight_included: bool = Field(False, description="Whether flights are included")
    contact_name: Optional[str] = Field(None, min_length=1, max_length=255)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = Field(None, max_length=50)
    special_requests: Optional[str] = Field(None, max_length=2000)
    total_amount: Optional[Decimal] = Field(None, ge=0, description="Total shown to the customer")
    travelers: List[TravelerIn] = Field(default_factory=list, description="Traveler details")

    @field_validator("travel_date", mode="before")
    @classmethod
    def accept_timestamps(cls, v):
        """Accept ISO timestamps as well as plain dates."""
        if isinstance(v, str) and "T" in v:
            return normalize_slot_date(datetime.fromisoformat(v.replace("Z", "+00:00")))
        if isinstance(v, datetime):
            return normalize_slot_date(v)
        return v

    @model_validator(mode="after")
    def check_target_and_travelers(self):
        if (self.package_id is None) == (self.event_id is None):
            raise ValueError("Exactly one of packageId or eventId is required")

        if self.travelers:
            adults = sum(1 for t in self.travelers if t.type == TravelerType.ADULT)
            children = len(self.travelers) - adults
            if adults != self.adults or children != self.children:
                raise ValueError(
                    f"Traveler details ({adults} adults, {children} children) do not match "
                    f"the booking ({self.adults} adults, {self.children} children)"
                )
        return self

    @property
    def target(self) -> BookingTarget:
        return target_from_ids(self.package_id, self.event_id)

    @property
    def slot_count(self) -> int:
        return self.adults + self.children


class PriceBreakdown(CamelModel):
    """Unit prices used to compute a booking total."""

    price: Decimal
    strike_through_price: Optional[Decimal] = None
    children_price: Decimal
    children_strike_through_price: Optional[Decimal] = None


class BookingValidationResponse(CamelModel):
    """Result of validating a booking draft."""

    valid: bool = True
    total_amount: Decimal = Field(..., description="Server-computed total")
    currency: str
    slots_required: int
    quote: PriceBreakdown


class Booking(CamelModel):
    """Booking response schema."""

    id: int
    user_id: Optional[str] = None
    package_id: Optional[int] = None
    event_id: Optional[int] = None
    travel_date: Optional[date] = None
    adults: int
    children: int
    hotel_category: str
    flight_included: bool
    contact_name: str
    contact_email: str
    contact_phone: Optional[str] = None
    special_requests: Optional[str] = None
    total_amount: Decimal
    currency: str
    status: BookingStatus
    payment_status: PaymentStatus
    order_id: Optional[str] = None
    payment_id: Optional[str] = None
    travelers: List[Traveler] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class BookingQuery(Pagination):
    """Filters accepted by the admin booking listing."""

    status: Optional[BookingStatus] = None
    payment_status: Optional[PaymentStatus] = None
    package_id: Optional[int] = Field(None, ge=1)
    event_id: Optional[int] = Field(None, ge=1)
    user_id: Optional[str] = None
