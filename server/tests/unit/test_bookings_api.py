"""API tests for booking validation and creation."""

from datetime import timedelta
from decimal import Decimal

import pytest
from sqlalchemy import func, select

from travel_api.core.security import hash_password
from travel_api.models import Booking, Traveler, User
from travel_api.models.target import PackageTarget
from travel_api.services.availability_service import AvailabilityService


def package_draft(package, travel_date, **overrides) -> dict:
    draft = {"packageId": package.id, "travelDate": travel_date.isoformat(), "adults": 2}
    draft.update(overrides)
    return draft


async def booking_count(session) -> int:
    result = await session.execute(select(func.count()).select_from(Booking))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_validate_returns_server_total(test_client, test_session, user_headers, package, package_slot, travel_date):
    response = await test_client.post(
        "/bookings/validate",
        json=package_draft(package, travel_date),
        headers=user_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is True
    assert Decimal(data["totalAmount"]) == Decimal("25000.00")
    assert data["currency"] == "INR"
    assert data["slotsRequired"] == 2
    assert Decimal(data["quote"]["childrenPrice"]) == Decimal("8750.00")
    assert await booking_count(test_session) == 0


@pytest.mark.asyncio
async def test_validate_requires_authentication(test_client, package, package_slot, travel_date):
    response = await test_client.post("/bookings/validate", json=package_draft(package, travel_date))

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_validate_rejects_date_without_slots(test_client, user_headers, package, package_slot, travel_date):
    response = await test_client.post(
        "/bookings/validate",
        json=package_draft(package, travel_date + timedelta(days=1)),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INSUFFICIENT_AVAILABILITY"


@pytest.mark.asyncio
async def test_validate_rejects_more_travelers_than_slots(test_client, user_headers, package, package_slot, travel_date):
    response = await test_client.post(
        "/bookings/validate",
        json=package_draft(package, travel_date, adults=3, children=2),
        headers=user_headers,
    )

    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "INSUFFICIENT_AVAILABILITY"
    assert data["requested_slots"] == 5


@pytest.mark.asyncio
async def test_validate_enforces_passenger_limits(test_client, user_headers, package):
    response = await test_client.post(
        "/bookings/validate",
        json={"packageId": package.id, "adults": 11},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "adults"


@pytest.mark.asyncio
async def test_validate_rejects_two_targets(test_client, user_headers, package, event, travel_date):
    response = await test_client.post(
        "/bookings/validate",
        json=package_draft(package, travel_date, eventId=event.id),
        headers=user_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_validate_rejects_inactive_package(test_client, test_session, user_headers, package, package_slot, travel_date):
    package.active = False
    await test_session.commit()

    response = await test_client.post(
        "/bookings/validate",
        json=package_draft(package, travel_date),
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "packageId"


@pytest.mark.asyncio
async def test_validate_rejects_traveler_count_mismatch(test_client, user_headers, package, package_slot, travel_date):
    draft = package_draft(package, travel_date, travelers=[
        {"type": "adult", "firstName": "Asha", "lastName": "Tester"},
    ])

    response = await test_client.post("/bookings/validate", json=draft, headers=user_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_event_is_priced_from_its_dated_slot(test_client, user_headers, event, event_slot, travel_date):
    response = await test_client.post(
        "/bookings/validate",
        json={"eventId": event.id, "travelDate": travel_date.isoformat(), "adults": 2, "children": 1},
        headers=user_headers,
    )

    assert response.status_code == 200
    assert Decimal(response.json()["totalAmount"]) == Decimal("9450.00")


@pytest.mark.asyncio
async def test_event_requires_travel_date(test_client, user_headers, event, event_slot):
    response = await test_client.post(
        "/bookings/validate",
        json={"eventId": event.id, "adults": 1},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "travelDate"


@pytest.mark.asyncio
async def test_create_booking_reserves_slots(test_client, test_session, user, user_headers, package, package_slot, travel_date):
    draft = package_draft(package, travel_date, travelers=[
        {"type": "adult", "firstName": "Asha", "lastName": "Tester"},
        {"type": "adult", "firstName": "Ravi", "lastName": "Tester"},
    ])

    response = await test_client.post("/bookings", json=draft, headers=user_headers)

    assert response.status_code == 201
    booking = response.json()
    assert booking["status"] == "pending"
    assert booking["paymentStatus"] == "pending"
    assert booking["userId"] == user.id
    assert booking["contactName"] == "Asha Tester"
    assert booking["contactEmail"] == "asha@example.com"
    assert [t["firstName"] for t in booking["travelers"]] == ["Asha", "Ravi"]

    slot = await AvailabilityService(test_session).get_slot(PackageTarget(package.id), travel_date)
    assert slot.booked_slots == 2


@pytest.mark.asyncio
async def test_create_booking_stores_adult_and_child_travelers(test_client, test_session, user_headers, package, package_slot, travel_date):
    draft = package_draft(package, travel_date, adults=1, children=1, travelers=[
        {"type": "adult", "firstName": "Asha", "lastName": "Tester"},
        {"type": "child", "firstName": "Mira", "lastName": "Tester", "dateOfBirth": "2017-04-02"},
    ])

    response = await test_client.post("/bookings", json=draft, headers=user_headers)

    assert response.status_code == 201
    booking = response.json()
    assert Decimal(booking["totalAmount"]) == Decimal("21250.00")
    assert [(t["type"], t["firstName"]) for t in booking["travelers"]] == [("adult", "Asha"), ("child", "Mira")]

    rows = (await test_session.execute(select(Traveler).order_by(Traveler.id))).scalars().all()
    assert [(row.booking_id, row.type) for row in rows] == [(booking["id"], "adult"), (booking["id"], "child")]
    assert str(rows[1].date_of_birth) == "2017-04-02"


@pytest.mark.asyncio
async def test_create_booking_fails_when_full(test_client, test_session, user_headers, package, package_slot, travel_date):
    first = await test_client.post("/bookings", json=package_draft(package, travel_date, adults=3), headers=user_headers)
    assert first.status_code == 201

    second = await test_client.post("/bookings", json=package_draft(package, travel_date), headers=user_headers)

    assert second.status_code == 400
    assert second.json()["code"] == "INSUFFICIENT_AVAILABILITY"
    assert await booking_count(test_session) == 1


@pytest.mark.asyncio
async def test_booking_access_and_cancel(test_client, test_session, token_store, user_headers, admin_headers, package, package_slot, travel_date):
    created = await test_client.post("/bookings", json=package_draft(package, travel_date), headers=user_headers)
    booking_id = created.json()["id"]

    stranger = User(email="stranger@example.com", password_hash=hash_password("whatever-pass"))
    test_session.add(stranger)
    await test_session.commit()
    stranger_headers = {"Authorization": f"Bearer {await token_store.issue(stranger.id)}"}

    mine = await test_client.get("/bookings", headers=user_headers)
    assert [b["id"] for b in mine.json()] == [booking_id]

    assert (await test_client.get("/bookings", headers=stranger_headers)).json() == []
    assert (await test_client.get(f"/bookings/{booking_id}", headers=stranger_headers)).status_code == 403
    assert (await test_client.get(f"/bookings/{booking_id}", headers=admin_headers)).status_code == 200
    assert (await test_client.post(f"/bookings/{booking_id}/cancel", headers=stranger_headers)).status_code == 403

    cancelled = await test_client.post(f"/bookings/{booking_id}/cancel", headers=user_headers)
    assert cancelled.status_code == 200
    assert cancelled.json()["status"] == "cancelled"

    again = await test_client.post(f"/bookings/{booking_id}/cancel", headers=user_headers)
    assert again.json()["status"] == "cancelled"


@pytest.mark.asyncio
async def test_missing_booking(test_client, user_headers):
    response = await test_client.get("/bookings/12345", headers=user_headers)

    assert response.status_code == 404
