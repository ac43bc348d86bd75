"""API tests for tour packages and events."""

from datetime import timedelta
from decimal import Decimal

import pytest


@pytest.mark.asyncio
async def test_list_packages_is_public(test_client, package):
    response = await test_client.get("/packages")

    assert response.status_code == 200
    data = response.json()
    assert [p["id"] for p in data] == [package.id]
    assert data[0]["productName"] == "GOA-3N"
    assert Decimal(data[0]["startingPrice"]) == Decimal("12500.00")


@pytest.mark.asyncio
async def test_list_packages_filters(test_client, package):
    response = await test_client.get("/packages", params={"destination": "goa"})
    assert [p["id"] for p in response.json()] == [package.id]

    response = await test_client.get("/packages", params={"destination": "kerala"})
    assert response.json() == []

    response = await test_client.get("/packages", params={"maxPrice": "10000"})
    assert response.json() == []


@pytest.mark.asyncio
async def test_inactive_packages_are_hidden(test_client, test_session, package):
    package.active = False
    await test_session.commit()

    response = await test_client.get("/packages")

    assert response.json() == []


@pytest.mark.asyncio
async def test_get_missing_package(test_client):
    response = await test_client.get("/packages/999")

    assert response.status_code == 404
    data = response.json()
    assert data["status"] == 404
    assert "message" in data


@pytest.mark.asyncio
async def test_price_quote(test_client, package):
    response = await test_client.get(f"/packages/{package.id}/price", params={"hotelCategory": "4_5_star"})

    assert response.status_code == 200
    data = response.json()
    assert data["hotelCategory"] == "4_5_star"
    assert Decimal(data["price"]) == Decimal("12500.00")
    assert Decimal(data["childrenPrice"]) == Decimal("8750.00")
    assert Decimal(data["strikeThroughPrice"]) == Decimal("15000.00")


@pytest.mark.asyncio
async def test_admin_creates_package(test_client, admin_headers, sample_package_data):
    response = await test_client.post("/packages", json=sample_package_data, headers=admin_headers)

    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Ladakh Road Trip"
    assert created["customHighlights"] == ["Khardung La", "Pangong Tso"]

    quote = await test_client.get(
        f"/packages/{created['id']}/price",
        params={"hotelCategory": "3_star", "flightIncluded": "true"},
    )
    assert Decimal(quote.json()["price"]) == Decimal("41000.00")
    assert Decimal(quote.json()["childrenPrice"]) == Decimal("30000.00")


@pytest.mark.asyncio
async def test_package_writes_need_admin(test_client, user_headers, sample_package_data):
    response = await test_client.post("/packages", json=sample_package_data)
    assert response.status_code == 401

    response = await test_client.post("/packages", json=sample_package_data, headers=user_headers)
    assert response.status_code == 403
    assert response.json()["required_role"] == "admin"


@pytest.mark.asyncio
async def test_invalid_package_is_rejected(test_client, admin_headers, sample_package_data):
    sample_package_data["startingPrice"] = "-5"

    response = await test_client.post("/packages", json=sample_package_data, headers=admin_headers)

    assert response.status_code == 400
    data = response.json()
    assert data["status"] == 400
    assert any(error["path"] == "startingPrice" for error in data["errors"])


@pytest.mark.asyncio
async def test_admin_updates_and_deletes_package(test_client, admin_headers, package):
    response = await test_client.put(
        f"/packages/{package.id}",
        json={"featured": True, "startingPrice": "11000"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["featured"] is True
    assert Decimal(response.json()["startingPrice"]) == Decimal("11000.00")

    response = await test_client.delete(f"/packages/{package.id}", headers=admin_headers)
    assert response.status_code == 204

    response = await test_client.get(f"/packages/{package.id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_events_crud(test_client, admin_headers, travel_date):
    payload = {
        "name": "Rann Utsav",
        "location": "Dhordo, Kutch",
        "startDate": travel_date.isoformat(),
        "endDate": (travel_date + timedelta(days=3)).isoformat(),
    }

    response = await test_client.post("/events", json=payload, headers=admin_headers)
    assert response.status_code == 201
    event_id = response.json()["id"]

    response = await test_client.get("/events")
    assert [e["id"] for e in response.json()] == [event_id]

    response = await test_client.put(f"/events/{event_id}", json={"active": False}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["active"] is False

    response = await test_client.delete(f"/events/{event_id}", headers=admin_headers)
    assert response.status_code == 204


@pytest.mark.asyncio
async def test_event_end_before_start_is_rejected(test_client, admin_headers, travel_date):
    payload = {
        "name": "Backwards Fest",
        "location": "Nowhere",
        "startDate": travel_date.isoformat(),
        "endDate": (travel_date - timedelta(days=1)).isoformat(),
    }

    response = await test_client.post("/events", json=payload, headers=admin_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_availability_admin_and_public_listing(test_client, admin_headers, package, travel_date):
    package_id = package.id

    response = await test_client.post(
        "/availability",
        json={"packageId": package_id, "date": travel_date.isoformat(), "totalSlots": 12},
        headers=admin_headers,
    )
    assert response.status_code == 201
    slot = response.json()
    assert slot["bookedSlots"] == 0
    assert slot["remainingSlots"] == 12

    response = await test_client.post(
        "/availability",
        json={"packageId": package_id, "date": travel_date.isoformat(), "totalSlots": 5},
        headers=admin_headers,
    )
    assert response.status_code == 409

    response = await test_client.get("/availability", params={"packageId": package_id})
    assert [row["id"] for row in response.json()] == [slot["id"]]

    response = await test_client.put(
        f"/availability/{slot['id']}", json={"totalSlots": 20}, headers=admin_headers
    )
    assert response.json()["totalSlots"] == 20


@pytest.mark.asyncio
async def test_availability_needs_exactly_one_target(test_client, admin_headers, package, event, travel_date):
    response = await test_client.post(
        "/availability",
        json={
            "packageId": package.id,
            "eventId": event.id,
            "date": travel_date.isoformat(),
            "totalSlots": 5,
        },
        headers=admin_headers,
    )

    assert response.status_code == 400
