"""Models module exporting all database models."""

from .availability import Availability
from .booking import Booking, BookingStatus, HotelCategory, PaymentStatus, Traveler, TravelerType
from .content import ContactQuery, ContactQueryStatus, Newsletter, Priority, Translation
from .crm import (
    Customer,
    CustomerInteraction,
    CustomerPreference,
    EmailCampaign,
    EmailTemplate,
    Lead,
    LeadActivity,
    Opportunity,
    Task,
    TaskStatus,
)
from .event import Event
from .package import TourPackage
from .payment import Payment, PaymentRecordStatus
from .review import Review
from .target import BookingTarget, EventTarget, PackageTarget
from .user import AuthToken, User, UserRole

__all__ = [
    # Accounts
    "User",
    "UserRole",
    "AuthToken",

    # Catalog
    "TourPackage",
    "Event",
    "Availability",
    "Review",

    # Booking entities
    "Booking",
    "BookingStatus",
    "PaymentStatus",
    "HotelCategory",
    "Traveler",
    "TravelerType",
    "Payment",
    "PaymentRecordStatus",
    "BookingTarget",
    "PackageTarget",
    "EventTarget",

    # Content
    "Translation",
    "Newsletter",
    "ContactQuery",
    "ContactQueryStatus",
    "Priority",

    # CRM
    "Customer",
    "CustomerInteraction",
    "CustomerPreference",
    "Lead",
    "LeadActivity",
    "Opportunity",
    "Task",
    "TaskStatus",
    "EmailTemplate",
    "EmailCampaign",
]
