"""Best-effort email notifications for bookings and contact queries."""

import asyncio
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from fastapi import Depends
from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.config import settings
from ..core.observability import get_logger, metrics_collector
from ..models.booking import Booking
from ..models.content import ContactQuery
from .mailer import EmailMessage, Mailer, get_mailer

logger = get_logger("notifications")

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"

template_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)


class NotificationEvent(str, Enum):
    BOOKING_CREATED = "BookingCreated"
    CONTACT_QUERY_CREATED = "ContactQueryCreated"


def booking_payload(booking: Booking, target_name: str) -> dict[str, Any]:
    """Plain values needed to render booking emails after the session is gone."""
    return {
        "booking_id": booking.id,
        "target_type": booking.target.kind,
        "target_name": target_name,
        "travel_date": booking.travel_date.isoformat() if booking.travel_date else None,
        "adults": booking.adults,
        "children": booking.children,
        "hotel_category": booking.hotel_category,
        "flight_included": booking.flight_included,
        "total_amount": f"{booking.total_amount:.2f}",
        "currency": booking.currency,
        "status": booking.status,
        "payment_status": booking.payment_status,
        "contact_name": booking.contact_name,
        "contact_email": booking.contact_email,
        "contact_phone": booking.contact_phone,
        "special_requests": booking.special_requests,
        "traveler_names": [f"{t.first_name} {t.last_name}" for t in booking.travelers],
    }


def contact_query_payload(query: ContactQuery) -> dict[str, Any]:
    return {
        "query_id": query.id,
        "name": query.name,
        "email": query.email,
        "phone": query.phone,
        "subject": query.subject,
        "message": query.message,
        "priority": query.priority,
    }


class NotificationDispatcher:
    """
    Sends the customer and operations emails for a domain event.

    Both emails go out concurrently. A failed send is logged and counted and
    never propagates: notifications must not fail the request that caused
    them, which has already committed by the time they run.
    """

    def __init__(
        self,
        mailer: Mailer,
        admin_email: Optional[str] = None,
        dashboard_url: Optional[str] = None,
        env: Environment = template_env,
    ):
        self.mailer = mailer
        self.admin_email = admin_email or settings.admin_email
        self.dashboard_url = dashboard_url or settings.admin_dashboard_url
        self.env = env

    def _render(self, template_name: str, **context) -> str:
        return self.env.get_template(template_name).render(dashboard_url=self.dashboard_url, **context)

    def _messages(self, event: NotificationEvent, payload: dict[str, Any]) -> dict[str, EmailMessage]:
        if event == NotificationEvent.BOOKING_CREATED:
            return {
                "customer": EmailMessage(
                    to=payload["contact_email"],
                    subject=f"Booking confirmed: {payload['target_name']} (#{payload['booking_id']})",
                    html=self._render("booking_confirmation.html", booking=payload),
                ),
                "admin": EmailMessage(
                    to=self.admin_email,
                    subject=f"New booking #{payload['booking_id']}: {payload['target_name']}",
                    html=self._render("booking_admin.html", booking=payload),
                ),
            }
        return {
            "customer": EmailMessage(
                to=payload["email"],
                subject=f"We received your message: {payload['subject']}",
                html=self._render("contact_confirmation.html", query=payload),
            ),
            "admin": EmailMessage(
                to=self.admin_email,
                subject=f"New contact query #{payload['query_id']}: {payload['subject']}",
                html=self._render("contact_admin.html", query=payload),
            ),
        }

    async def _send(self, event: NotificationEvent, recipient: str, message: EmailMessage) -> bool:
        try:
            sent = await self.mailer.send(message)
        except Exception as e:
            logger.error(
                "notification_failed",
                notification_event=event.value,
                recipient=recipient,
                to=message.to,
                error=str(e),
                exc_info=True,
            )
            metrics_collector.record_notification(event.value, recipient, False)
            return False

        metrics_collector.record_notification(event.value, recipient, bool(sent))
        logger.info(
            "notification_sent" if sent else "notification_skipped",
            notification_event=event.value,
            recipient=recipient,
            to=message.to,
        )
        return bool(sent)

    async def notify(self, event: NotificationEvent, payload: dict[str, Any]) -> dict[str, bool]:
        """Send both emails for ``event``; returns the outcome per recipient."""
        event = NotificationEvent(event)
        try:
            messages = self._messages(event, payload)
        except Exception as e:
            logger.error(
                "notification_render_failed",
                notification_event=event.value,
                error=str(e),
                exc_info=True,
            )
            return {"customer": False, "admin": False}

        recipients = list(messages)
        results = await asyncio.gather(
            *(self._send(event, recipient, messages[recipient]) for recipient in recipients)
        )
        return dict(zip(recipients, results))


def get_notification_dispatcher(mailer: Mailer = Depends(get_mailer)) -> NotificationDispatcher:
    """FastAPI dependency building a dispatcher around the configured mailer."""
    return NotificationDispatcher(mailer)
