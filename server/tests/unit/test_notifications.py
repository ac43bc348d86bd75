"""Unit tests for notification emails."""

from datetime import date
from decimal import Decimal

import pytest

from travel_api.models.booking import Booking, Traveler
from travel_api.models.content import ContactQuery
from travel_api.services.mailer import EmailMessage, SmtpMailer
from travel_api.services.notification_service import (
    NotificationDispatcher,
    NotificationEvent,
    booking_payload,
    contact_query_payload,
)


def make_booking() -> Booking:
    booking = Booking(
        id=42,
        package_id=3,
        travel_date=date(2025, 11, 20),
        adults=2,
        children=1,
        hotel_category="3_star",
        flight_included=True,
        contact_name="Asha Tester",
        contact_email="asha@example.com",
        contact_phone="+91 98765 43210",
        total_amount=Decimal("27000.00"),
        currency="INR",
        status="confirmed",
        payment_status="paid",
        travelers=[
            Traveler(type="adult", first_name="Asha", last_name="Tester"),
            Traveler(type="adult", first_name="Ravi", last_name="Tester"),
            Traveler(type="child", first_name="Mira", last_name="Tester"),
        ],
    )
    return booking


def make_contact_query() -> ContactQuery:
    return ContactQuery(
        id=9,
        name="Kabir",
        email="kabir@example.com",
        subject="Group discount",
        message="Do you offer discounts for 12 people?",
        priority="normal",
    )


def test_booking_payload_is_plain_data():
    payload = booking_payload(make_booking(), "Goa Beach Break")

    assert payload["booking_id"] == 42
    assert payload["target_type"] == "package"
    assert payload["target_name"] == "Goa Beach Break"
    assert payload["travel_date"] == "2025-11-20"
    assert payload["total_amount"] == "27000.00"
    assert payload["traveler_names"] == ["Asha Tester", "Ravi Tester", "Mira Tester"]


@pytest.mark.asyncio
async def test_booking_created_sends_customer_and_admin_email(mailer):
    dispatcher = NotificationDispatcher(mailer, admin_email="ops@example.com", dashboard_url="https://admin.test")

    outcome = await dispatcher.notify(
        NotificationEvent.BOOKING_CREATED,
        booking_payload(make_booking(), "Goa Beach Break"),
    )

    assert outcome == {"customer": True, "admin": True}
    recipients = sorted(message.to for message in mailer.sent)
    assert recipients == ["asha@example.com", "ops@example.com"]

    customer = next(m for m in mailer.sent if m.to == "asha@example.com")
    assert "Goa Beach Break" in customer.subject
    assert "#42" in customer.html
    assert "Mira Tester" in customer.html


@pytest.mark.asyncio
async def test_contact_query_created_sends_two_emails(mailer):
    dispatcher = NotificationDispatcher(mailer, admin_email="ops@example.com")

    outcome = await dispatcher.notify(
        NotificationEvent.CONTACT_QUERY_CREATED,
        contact_query_payload(make_contact_query()),
    )

    assert outcome == {"customer": True, "admin": True}
    admin = next(m for m in mailer.sent if m.to == "ops@example.com")
    assert "Group discount" in admin.subject


@pytest.mark.asyncio
async def test_mail_failure_never_raises(failing_mailer):
    dispatcher = NotificationDispatcher(failing_mailer, admin_email="ops@example.com")

    outcome = await dispatcher.notify(
        NotificationEvent.CONTACT_QUERY_CREATED,
        contact_query_payload(make_contact_query()),
    )

    assert outcome == {"customer": False, "admin": False}
    assert failing_mailer.attempts == 2


@pytest.mark.asyncio
async def test_render_failure_never_raises(mailer):
    dispatcher = NotificationDispatcher(mailer, admin_email="ops@example.com")

    outcome = await dispatcher.notify(NotificationEvent.BOOKING_CREATED, {"booking_id": 1})

    assert outcome == {"customer": False, "admin": False}


@pytest.mark.asyncio
async def test_template_output_is_escaped(mailer):
    dispatcher = NotificationDispatcher(mailer, admin_email="ops@example.com")
    query = make_contact_query()
    query.message = "<script>alert(1)</script>"

    await dispatcher.notify(NotificationEvent.CONTACT_QUERY_CREATED, contact_query_payload(query))

    assert all("<script>" not in message.html for message in mailer.sent)


@pytest.mark.asyncio
async def test_unconfigured_smtp_skips_sending():
    mailer = SmtpMailer(host="localhost", port=2525, user=None, password=None)

    sent = await mailer.send(EmailMessage(to="a@example.com", subject="Hi", html="<p>Hi</p>"))

    assert sent is False
