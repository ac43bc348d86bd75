"""API tests for the contact form, newsletter, translations and reviews."""

from decimal import Decimal

import pytest

from travel_api.models import Booking
from travel_api.services.mailer import get_mailer


CONTACT = {
    "name": "Meera Iyer",
    "email": "meera@example.com",
    "phone": "+91 90000 00000",
    "subject": "Group discount",
    "message": "Do you offer discounts for a group of twelve?",
}


@pytest.mark.asyncio
async def test_contact_query_is_saved_and_acknowledged(test_client, mailer):
    response = await test_client.post("/contact-queries", json=CONTACT)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "new"
    assert data["priority"] == "normal"
    assert data["resolvedAt"] is None

    assert len(mailer.sent) == 2
    customer = next(m for m in mailer.sent if m.to == "meera@example.com")
    assert "Group discount" in customer.subject


@pytest.mark.asyncio
async def test_contact_query_survives_mail_outage(test_app, test_client, failing_mailer, admin_headers):
    test_app.dependency_overrides[get_mailer] = lambda: failing_mailer

    response = await test_client.post("/contact-queries", json=CONTACT)

    assert response.status_code == 201
    assert failing_mailer.attempts == 2
    listed = await test_client.get("/admin/contact-queries", headers=admin_headers)
    assert [q["id"] for q in listed.json()] == [response.json()["id"]]


@pytest.mark.asyncio
async def test_contact_query_validates_email(test_client, mailer):
    response = await test_client.post("/contact-queries", json={**CONTACT, "email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "email"
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_newsletter_subscribe_cycle(test_client):
    first = await test_client.post("/newsletter/subscribe", json={"email": "Reader@Example.com"})
    assert first.status_code == 201
    assert first.json()["email"] == "reader@example.com"
    assert first.json()["subscribed"] is True

    again = await test_client.post("/newsletter/subscribe", json={"email": "reader@example.com"})
    assert again.json()["id"] == first.json()["id"]

    gone = await test_client.post("/newsletter/unsubscribe", json={"email": "reader@example.com"})
    assert gone.status_code == 200
    assert gone.json()["subscribed"] is False

    back = await test_client.post("/newsletter/subscribe", json={"email": "reader@example.com"})
    assert back.json()["subscribed"] is True


@pytest.mark.asyncio
async def test_unsubscribe_unknown_address(test_client):
    response = await test_client.post("/newsletter/unsubscribe", json={"email": "nobody@example.com"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_translations(test_client, admin_headers, user_headers, package):
    body = {
        "entityType": "package",
        "entityId": package.id,
        "language": "hi",
        "fieldName": "name",
        "content": "गोवा बीच ब्रेक",
    }

    assert (await test_client.post("/translations", json=body, headers=user_headers)).status_code == 403

    created = await test_client.post("/translations", json=body, headers=admin_headers)
    assert created.status_code == 201
    replaced = await test_client.post(
        "/translations", json={**body, "content": "गोवा समुद्र तट"}, headers=admin_headers
    )
    assert replaced.json()["id"] == created.json()["id"]

    hindi = await test_client.get(f"/translations/package/{package.id}", params={"language": "hi"})
    assert hindi.json() == {"name": "गोवा समुद्र तट"}

    english = await test_client.get(f"/translations/package/{package.id}")
    assert english.json() == {}


@pytest.mark.asyncio
async def test_reviews_update_package_rating(test_client, user_headers, admin_headers, package):
    first = await test_client.post(
        "/reviews",
        json={"packageId": package.id, "rating": 5, "title": "Loved it"},
        headers=user_headers,
    )
    assert first.status_code == 201
    assert first.json()["verified"] is False

    await test_client.post("/reviews", json={"packageId": package.id, "rating": 4}, headers=admin_headers)

    detail = await test_client.get(f"/packages/{package.id}")
    assert Decimal(detail.json()["rating"]) == Decimal("4.5")
    assert detail.json()["reviewCount"] == 2

    listed = await test_client.get("/reviews", params={"packageId": package.id})
    assert len(listed.json()) == 2


@pytest.mark.asyncio
async def test_review_citing_confirmed_booking_is_verified(test_client, test_session, user, user_headers, package):
    booking = Booking(
        user_id=user.id,
        package_id=package.id,
        adults=1,
        children=0,
        hotel_category="3_star",
        flight_included=False,
        contact_name="Asha Tester",
        contact_email=user.email,
        total_amount=Decimal("12500.00"),
        currency="INR",
        status="confirmed",
        payment_status="paid",
    )
    test_session.add(booking)
    await test_session.commit()

    response = await test_client.post(
        "/reviews",
        json={"packageId": package.id, "bookingId": booking.id, "rating": 4},
        headers=user_headers,
    )

    assert response.status_code == 201
    assert response.json()["verified"] is True


@pytest.mark.asyncio
async def test_review_rules(test_client, user_headers, admin_headers, package):
    unauthenticated = await test_client.post("/reviews", json={"packageId": package.id, "rating": 5})
    assert unauthenticated.status_code == 401

    out_of_range = await test_client.post("/reviews", json={"packageId": package.id, "rating": 6}, headers=user_headers)
    assert out_of_range.status_code == 400

    missing = await test_client.post("/reviews", json={"packageId": 9999, "rating": 3}, headers=user_headers)
    assert missing.status_code == 404

    foreign = await test_client.post(
        "/reviews", json={"packageId": package.id, "bookingId": 9999, "rating": 3}, headers=user_headers
    )
    assert foreign.status_code == 400
