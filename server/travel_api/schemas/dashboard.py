"""Admin dashboard schemas."""

from decimal import Decimal

from pydantic import Field

from .common import CamelModel


class DashboardStats(CamelModel):
    """Headline counts for the admin dashboard."""

    total_packages: int
    active_packages: int
    total_events: int
    total_bookings: int
    pending_bookings: int
    confirmed_bookings: int
    total_users: int
    total_contact_queries: int
    new_contact_queries: int
    urgent_contact_queries: int
    total_revenue: Decimal = Field(..., description="Sum of paid booking totals")
