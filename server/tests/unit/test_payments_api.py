"""API tests for gateway orders and checkout verification."""

import hashlib
import hmac
from decimal import Decimal

import httpx
import pytest
from sqlalchemy import func, select

from travel_api.core.exceptions import PaymentGatewayError
from travel_api.models import Booking, Payment, Traveler
from travel_api.models.target import PackageTarget
from travel_api.services.availability_service import AvailabilityService
from travel_api.services.payment_gateway import RazorpayGateway, get_payment_gateway


async def count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


@pytest.fixture
def draft(package, package_slot, travel_date):
    return {"packageId": package.id, "travelDate": travel_date.isoformat(), "adults": 2}


async def open_order(client, headers, draft) -> str:
    response = await client.post("/payments/create-order", json={"booking": draft}, headers=headers)
    assert response.status_code == 200
    return response.json()["orderId"]


def callback(gateway, order_id, draft, payment_id="pay_0001", signature=None) -> dict:
    return {
        "razorpayOrderId": order_id,
        "razorpayPaymentId": payment_id,
        "razorpaySignature": signature or gateway.sign(order_id, payment_id),
        "booking": draft,
    }


@pytest.mark.asyncio
async def test_create_order_charges_server_total(test_client, test_session, gateway, user_headers, draft):
    response = await test_client.post("/payments/create-order", json={"booking": draft}, headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["amount"] == 2500000
    assert data["currency"] == "INR"
    assert Decimal(data["totalAmount"]) == Decimal("25000.00")
    assert data["keyId"] == "rzp_test_key"
    assert gateway.orders[data["orderId"]]["amount"] == 2500000
    receipt = gateway.orders[data["orderId"]]["receipt"]
    assert receipt.startswith("booking_")
    assert len(receipt) <= 40
    assert await count(test_session, Booking) == 0


@pytest.mark.asyncio
async def test_create_order_rejects_wrong_client_amount(test_client, gateway, user_headers, draft):
    response = await test_client.post(
        "/payments/create-order",
        json={"booking": draft, "amount": "100.00"},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert response.json()["code"] == "AMOUNT_MISMATCH"
    assert gateway.orders == {}


@pytest.mark.asyncio
async def test_create_order_requires_authentication(test_client, draft):
    response = await test_client.post("/payments/create-order", json={"booking": draft})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_unconfigured_gateway(test_app, test_client, user_headers, draft):
    test_app.dependency_overrides[get_payment_gateway] = lambda: None

    response = await test_client.post("/payments/create-order", json={"booking": draft}, headers=user_headers)

    assert response.status_code == 500
    assert response.json()["message"] == "Payment system not configured"


@pytest.mark.asyncio
async def test_verify_confirms_booking_and_notifies(
    test_client, test_session, gateway, mailer, user_headers, package, travel_date, draft
):
    order_id = await open_order(test_client, user_headers, draft)

    response = await test_client.post("/payments/verify", json=callback(gateway, order_id, draft), headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Payment verified successfully"
    booking = data["booking"]
    assert booking["status"] == "confirmed"
    assert booking["paymentStatus"] == "paid"
    assert booking["orderId"] == order_id
    assert booking["paymentId"] == "pay_0001"
    assert Decimal(booking["totalAmount"]) == Decimal("25000.00")

    payment = (await test_session.execute(select(Payment))).scalar_one()
    assert payment.booking_id == booking["id"]
    assert payment.amount == Decimal("25000.00")

    slot = await AvailabilityService(test_session).get_slot(PackageTarget(package.id), travel_date)
    assert slot.booked_slots == 2

    assert sorted(m.to for m in mailer.sent) == sorted(["asha@example.com", "info@traveon.in"])
    assert all("Goa Beach Break" in m.subject for m in mailer.sent)


@pytest.mark.asyncio
async def test_verify_replay_returns_existing_booking(
    test_client, test_session, gateway, mailer, user_headers, package, travel_date, draft
):
    order_id = await open_order(test_client, user_headers, draft)
    payload = callback(gateway, order_id, draft)

    first = await test_client.post("/payments/verify", json=payload, headers=user_headers)
    second = await test_client.post("/payments/verify", json=payload, headers=user_headers)

    assert second.status_code == 200
    assert second.json()["message"] == "Payment already verified"
    assert second.json()["booking"]["id"] == first.json()["booking"]["id"]
    assert await count(test_session, Booking) == 1
    assert await count(test_session, Payment) == 1
    assert len(mailer.sent) == 2

    slot = await AvailabilityService(test_session).get_slot(PackageTarget(package.id), travel_date)
    assert slot.booked_slots == 2


@pytest.mark.asyncio
async def test_verify_rejects_bad_signature(test_client, test_session, gateway, mailer, user_headers, draft):
    order_id = await open_order(test_client, user_headers, draft)
    payload = callback(gateway, order_id, draft, signature="0" * 64)

    response = await test_client.post("/payments/verify", json=payload, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SIGNATURE"
    assert await count(test_session, Booking) == 0
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_verify_rejects_draft_that_differs_from_order(test_client, test_session, gateway, user_headers, draft):
    order_id = await open_order(test_client, user_headers, draft)
    bigger = {**draft, "adults": 3}

    response = await test_client.post("/payments/verify", json=callback(gateway, order_id, bigger), headers=user_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "AMOUNT_MISMATCH"
    assert await count(test_session, Booking) == 0


@pytest.mark.asyncio
async def test_verify_fails_when_slots_are_gone(
    test_client, test_session, gateway, user_headers, package_slot, draft
):
    order_id = await open_order(test_client, user_headers, draft)
    package_slot.booked_slots = 3
    await test_session.commit()

    response = await test_client.post("/payments/verify", json=callback(gateway, order_id, draft), headers=user_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "INSUFFICIENT_AVAILABILITY"
    assert await count(test_session, Booking) == 0


@pytest.mark.asyncio
async def test_create_order_rejects_foreign_currency(test_client, gateway, user_headers, draft):
    response = await test_client.post(
        "/payments/create-order",
        json={"booking": draft, "currency": "IDR"},
        headers=user_headers,
    )

    assert response.status_code == 400
    assert [error["path"] for error in response.json()["errors"]] == ["currency"]
    assert gateway.orders == {}


@pytest.mark.asyncio
async def test_verify_rejects_order_charged_in_another_currency(test_client, test_session, gateway, mailer, user_headers, draft):
    order_id = await open_order(test_client, user_headers, draft)
    gateway.orders[order_id]["currency"] = "IDR"

    response = await test_client.post("/payments/verify", json=callback(gateway, order_id, draft), headers=user_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "AMOUNT_MISMATCH"
    assert await count(test_session, Booking) == 0
    assert mailer.sent == []


@pytest.mark.asyncio
async def test_verify_accepts_gateway_signature_vector(test_client, test_session, gateway, user_headers, draft):
    gateway.secret = "S"
    gateway.orders["order_1"] = {"id": "order_1", "amount": 2500000, "currency": "INR", "status": "paid"}
    signature = hmac.new(b"S", b"order_1|pay_1", hashlib.sha256).hexdigest()

    response = await test_client.post(
        "/payments/verify",
        json=callback(gateway, "order_1", draft, payment_id="pay_1", signature=signature),
        headers=user_headers,
    )

    assert response.status_code == 200
    assert response.json()["booking"]["orderId"] == "order_1"
    assert response.json()["booking"]["paymentId"] == "pay_1"

    tampered = callback(gateway, "order_1", draft, payment_id="pay_2", signature=signature)
    response = await test_client.post("/payments/verify", json=tampered, headers=user_headers)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_SIGNATURE"
    assert await count(test_session, Booking) == 1


@pytest.mark.asyncio
async def test_verify_stores_travelers(test_client, test_session, gateway, user_headers, draft):
    draft = {
        **draft,
        "adults": 1,
        "children": 1,
        "travelers": [
            {"type": "adult", "firstName": "Asha", "lastName": "Tester"},
            {"type": "child", "firstName": "Mira", "lastName": "Tester"},
        ],
    }
    order_id = await open_order(test_client, user_headers, draft)

    response = await test_client.post("/payments/verify", json=callback(gateway, order_id, draft), headers=user_headers)

    assert response.status_code == 200
    booking = response.json()["booking"]
    assert Decimal(booking["totalAmount"]) == Decimal("21250.00")
    assert [(t["type"], t["firstName"]) for t in booking["travelers"]] == [("adult", "Asha"), ("child", "Mira")]

    rows = (await test_session.execute(select(Traveler).order_by(Traveler.id))).scalars().all()
    assert [(row.booking_id, row.type) for row in rows] == [(booking["id"], "adult"), (booking["id"], "child")]


def _gateway_with(handler) -> RazorpayGateway:
    gateway = RazorpayGateway("rzp_test_key", "secret", "https://gateway.test/v1")
    gateway._client = lambda: httpx.AsyncClient(
        base_url=gateway.api_base,
        auth=(gateway.key_id, "secret"),
        transport=httpx.MockTransport(handler),
    )
    return gateway


@pytest.mark.asyncio
async def test_razorpay_gateway_creates_orders():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.content
        return httpx.Response(200, json={"id": "order_live_1", "amount": 150000, "currency": "INR"})

    order = await _gateway_with(handler).create_order(150000, "INR", "booking_1", {"user_id": "u1"})

    assert order["id"] == "order_live_1"
    assert seen["path"] == "/v1/orders"
    assert seen["auth"].startswith("Basic ")
    assert b'"amount":150000' in seen["body"].replace(b" ", b"")


@pytest.mark.asyncio
async def test_razorpay_gateway_wraps_errors():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": {"description": "Authentication failed"}})

    with pytest.raises(PaymentGatewayError) as exc_info:
        await _gateway_with(handler).fetch_order("order_missing")

    assert exc_info.value.status_code == 502
    assert exc_info.value.extensions["gateway_status"] == 401
