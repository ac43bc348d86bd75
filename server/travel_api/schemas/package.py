"""Tour package Pydantic schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models.booking import HotelCategory
from .common import CamelModel, Pagination

FLIGHT_KEYS = ("with_flights", "without_flights")


def _check_tier_keys(tiers):
    if tiers is None:
        return tiers
    categories = {category.value for category in HotelCategory}
    for category, buckets in tiers.items():
        if category not in categories:
            raise ValueError(f"Unknown hotel category '{category}'")
        for flight_key in buckets:
            if flight_key not in FLIGHT_KEYS:
                raise ValueError(f"Unknown flight option '{flight_key}'")
    return tiers


class PriceBucket(BaseModel):
    """One (hotel category, flight inclusion) pricing bucket."""

    price: Decimal = Field(..., ge=0, description="Adult price")
    strikethrough_price: Optional[Decimal] = Field(None, ge=0, description="Adult strikethrough price")
    children_price: Optional[Decimal] = Field(None, ge=0, description="Child price")
    children_strikethrough_price: Optional[Decimal] = Field(None, ge=0, description="Child strikethrough price")


class PackageBase(CamelModel):
    """Fields shared by package create and read schemas."""

    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    product_name: str = Field(..., min_length=1, max_length=255, description="Internal product name")
    description: Optional[str] = Field(None, description="Long description")
    overview: Optional[str] = Field(None, description="Short overview")
    destination: str = Field(..., min_length=1, max_length=255, description="Destination")
    duration_type: str = Field("days_and_nights", description="Duration unit")
    duration_days: int = Field(0, ge=0, description="Duration in days")
    duration_nights: int = Field(0, ge=0, description="Duration in nights")
    duration_hours: int = Field(0, ge=0, description="Duration in hours")
    duration_minutes: int = Field(0, ge=0, le=59, description="Duration in minutes")
    booking_type: str = Field("private", description="private or group")
    min_passenger_count: int = Field(1, ge=1, description="Minimum passengers per booking")
    max_passenger_count: Optional[int] = Field(None, ge=1, description="Maximum passengers per booking")
    starting_price: Decimal = Field(..., ge=0, description="Flat adult price")
    strike_through_price: Optional[Decimal] = Field(None, ge=0, description="Flat adult strikethrough price")
    pricing_tiers: Optional[Dict[str, Dict[str, PriceBucket]]] = Field(
        None,
        description="Hotel category -> flight inclusion -> price bucket"
    )
    currency: str = Field("INR", min_length=3, max_length=3, description="ISO 4217 currency code")
    terms_and_conditions: Optional[str] = Field(None, description="Terms and conditions")
    inclusions: List[Dict[str, Any]] = Field(default_factory=list, description="What is included")
    exclusions: List[Dict[str, Any]] = Field(default_factory=list, description="What is excluded")
    custom_highlights: List[str] = Field(default_factory=list, description="Marketing highlights")
    gallery_images: List[Dict[str, Any]] = Field(default_factory=list, description="Gallery images")
    itinerary: List[Dict[str, Any]] = Field(default_factory=list, description="Day-by-day itinerary")
    featured: bool = Field(False, description="Shown first in listings")
    active: bool = Field(True, description="Visible and bookable")

    @field_validator("pricing_tiers")
    @classmethod
    def validate_pricing_tiers(cls, v):
        """Only known hotel categories and flight keys are allowed."""
        return _check_tier_keys(v)


class CreatePackageRequest(PackageBase):
    """Request schema for creating a package."""


class UpdatePackageRequest(CamelModel):
    """Partial update of a package; omitted fields are left unchanged."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    product_name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    overview: Optional[str] = None
    destination: Optional[str] = Field(None, min_length=1, max_length=255)
    duration_type: Optional[str] = None
    duration_days: Optional[int] = Field(None, ge=0)
    duration_nights: Optional[int] = Field(None, ge=0)
    duration_hours: Optional[int] = Field(None, ge=0)
    duration_minutes: Optional[int] = Field(None, ge=0, le=59)
    booking_type: Optional[str] = None
    min_passenger_count: Optional[int] = Field(None, ge=1)
    max_passenger_count: Optional[int] = Field(None, ge=1)
    starting_price: Optional[Decimal] = Field(None, ge=0)
    strike_through_price: Optional[Decimal] = Field(None, ge=0)
    pricing_tiers: Optional[Dict[str, Dict[str, PriceBucket]]] = None
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    terms_and_conditions: Optional[str] = None
    inclusions: Optional[List[Dict[str, Any]]] = None
    exclusions: Optional[List[Dict[str, Any]]] = None
    custom_highlights: Optional[List[str]] = None
    gallery_images: Optional[List[Dict[str, Any]]] = None
    itinerary: Optional[List[Dict[str, Any]]] = None
    featured: Optional[bool] = None
    active: Optional[bool] = None

    @field_validator("pricing_tiers")
    @classmethod
    def validate_pricing_tiers(cls, v):
        return _check_tier_keys(v)


class Package(PackageBase):
    """Package response schema."""

    id: int = Field(..., description="Package ID")
    pricing_tiers: Optional[Dict[str, Any]] = Field(None, description="Raw pricing tiers")
    rating: Decimal = Field(..., description="Average review rating")
    review_count: int = Field(..., description="Number of reviews")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last update time")


class PackageQuery(Pagination):
    """Filters accepted by the package listing."""

    destination: Optional[str] = Field(None, description="Case-insensitive destination substring")
    featured: Optional[bool] = Field(None, description="Only featured (or non-featured) packages")
    active: Optional[bool] = Field(True, description="Active flag; defaults to active only")
    min_price: Optional[Decimal] = Field(None, ge=0, description="Minimum starting price")
    max_price: Optional[Decimal] = Field(None, ge=0, description="Maximum starting price")
    search: Optional[str] = Field(None, min_length=1, description="Matches name, destination or description")


class PriceQuoteResponse(CamelModel):
    """Resolved price quadruple for one tier."""

    package_id: int
    hotel_category: HotelCategory
    flight_included: bool
    currency: str
    price: Decimal
    strike_through_price: Optional[Decimal] = None
    children_price: Decimal
    children_strike_through_price: Optional[Decimal] = None
