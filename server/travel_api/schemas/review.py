"""Review-related Pydantic schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import Field, model_validator

from .common import CamelModel, Pagination


class CreateReviewRequest(CamelModel):
    """Request schema for reviewing a package or an event."""

    package_id: Optional[int] = Field(None, ge=1)
    event_id: Optional[int] = Field(None, ge=1)
    booking_id: Optional[int] = Field(None, ge=1, description="Booking the review is based on")
    rating: int = Field(..., ge=1, le=5, description="Star rating")
    title: Optional[str] = Field(None, max_length=255)
    comment: Optional[str] = Field(None, max_length=5000)
    images: List[str] = Field(default_factory=list, description="Image URLs")

    @model_validator(mode="after")
    def check_target(self):
        if (self.package_id is None) == (self.event_id is None):
            raise ValueError("Exactly one of packageId or eventId is required")
        return self


class Review(CamelModel):
    """Review response schema."""

    id: int
    user_id: str
    package_id: Optional[int] = None
    event_id: Optional[int] = None
    booking_id: Optional[int] = None
    rating: int
    title: Optional[str] = None
    comment: Optional[str] = None
    images: List[str] = Field(default_factory=list)
    helpful: int
    verified: bool
    created_at: datetime


class ReviewQuery(Pagination):
    package_id: Optional[int] = Field(None, ge=1)
    event_id: Optional[int] = Field(None, ge=1)
