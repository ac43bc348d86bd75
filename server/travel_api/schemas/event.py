"""Event Pydantic schemas."""

from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from .common import CamelModel, Pagination


class EventBase(CamelModel):
    name: str = Field(..., min_length=1, max_length=255, description="Event name")
    description: Optional[str] = Field(None, description="Event description")
    location: str = Field(..., min_length=1, max_length=255, description="Venue or city")
    start_date: date = Field(..., description="First day of the event")
    end_date: Optional[date] = Field(None, description="Last day of the event")
    image_url: Optional[str] = Field(None, max_length=1024, description="Cover image")
    website_url: Optional[str] = Field(None, max_length=1024, description="Official website")
    active: bool = Field(True, description="Visible and bookable")

    @model_validator(mode="after")
    def check_date_range(self):
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class CreateEventRequest(EventBase):
    """Request schema for creating an event."""


class UpdateEventRequest(CamelModel):
    """Partial update of an event."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    image_url: Optional[str] = Field(None, max_length=1024)
    website_url: Optional[str] = Field(None, max_length=1024)
    active: Optional[bool] = None


class Event(EventBase):
    """Event response schema."""

    id: int
    created_at: datetime
    updated_at: datetime


class EventQuery(Pagination):
    """Filters accepted by the event listing."""

    location: Optional[str] = Field(None, description="Case-insensitive location substring")
    active: Optional[bool] = Field(True, description="Active flag; defaults to active only")
    search: Optional[str] = Field(None, min_length=1, description="Matches name, location or description")
    from_date: Optional[date] = Field(None, description="Only events starting on or after this date")
