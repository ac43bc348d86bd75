"""Service layer package."""

from .availability_service import AvailabilityService
from .booking_service import BookingService, PreparedBooking
from .content_service import ContactQueryService, NewsletterService, TranslationService
from .crm_service import (
    CustomerInteractionService,
    CustomerPreferenceService,
    CustomerService,
    EmailCampaignService,
    EmailTemplateService,
    LeadActivityService,
    LeadService,
    OpportunityService,
    TaskService,
)
from .dashboard_service import DashboardService
from .event_service import EventService
from .notification_service import NotificationDispatcher, NotificationEvent
from .package_service import PackageService
from .payment_service import PaymentService
from .review_service import ReviewService
from .user_service import UserService

__all__ = [
    "AvailabilityService",
    "BookingService",
    "PreparedBooking",
    "ContactQueryService",
    "NewsletterService",
    "TranslationService",
    "CustomerService",
    "CustomerInteractionService",
    "CustomerPreferenceService",
    "EmailCampaignService",
    "EmailTemplateService",
    "LeadActivityService",
    "LeadService",
    "OpportunityService",
    "TaskService",
    "DashboardService",
    "EventService",
    "NotificationDispatcher",
    "NotificationEvent",
    "PackageService",
    "PaymentService",
    "ReviewService",
    "UserService",
]
