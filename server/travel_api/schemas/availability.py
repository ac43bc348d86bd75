"""Availability-related Pydantic schemas."""

import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from .common import CamelModel, Pagination


class CreateAvailabilityRequest(CamelModel):
    """Request schema for opening slots on a date."""

    package_id: Optional[int] = Field(None, ge=1, description="Tour package the slots belong to")
    event_id: Optional[int] = Field(None, ge=1, description="Event the slots belong to")
    date: datetime.date = Field(..., description="Calendar date of the slots")
    total_slots: int = Field(..., ge=0, description="Bookable capacity for the date")
    price: Optional[Decimal] = Field(None, ge=0, description="Adult price on this date")
    active: bool = Field(True, description="Whether the slots are bookable")

    @model_validator(mode="after")
    def check_target(self):
        if (self.package_id is None) == (self.event_id is None):
            raise ValueError("Exactly one of packageId or eventId is required")
        return self


class UpdateAvailabilityRequest(CamelModel):
    """Partial update of an availability row."""

    total_slots: Optional[int] = Field(None, ge=0)
    price: Optional[Decimal] = Field(None, ge=0)
    active: Optional[bool] = None


class Availability(CamelModel):
    """Availability response schema."""

    id: int
    package_id: Optional[int] = None
    event_id: Optional[int] = None
    date: datetime.date
    total_slots: int
    booked_slots: int
    remaining_slots: int
    price: Optional[Decimal] = None
    active: bool
    created_at: datetime.datetime
    updated_at: datetime.datetime


class AvailabilityQuery(Pagination):
    """Filters accepted by the availability listing."""

    package_id: Optional[int] = Field(None, ge=1)
    event_id: Optional[int] = Field(None, ge=1)
    from_date: Optional[datetime.date] = Field(None, description="Inclusive lower bound")
    to_date: Optional[datetime.date] = Field(None, description="Inclusive upper bound")
    active: Optional[bool] = Field(None, description="Active flag; all rows when omitted")
