"""FastAPI routers package."""

from .admin import router as admin_router
from .auth import router as auth_router
from .availability import router as availability_router
from .bookings import router as bookings_router
from .contact import router as contact_router
from .crm import router as crm_router
from .events import router as events_router
from .health import router as health_router
from .metrics import router as metrics_router
from .newsletter import router as newsletter_router
from .packages import router as packages_router
from .payments import router as payments_router
from .reviews import router as reviews_router
from .translations import router as translations_router

__all__ = [
    "admin_router",
    "auth_router",
    "availability_router",
    "bookings_router",
    "contact_router",
    "crm_router",
    "events_router",
    "health_router",
    "metrics_router",
    "newsletter_router",
    "packages_router",
    "payments_router",
    "reviews_router",
    "translations_router",
]
