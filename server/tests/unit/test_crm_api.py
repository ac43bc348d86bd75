"""API tests for the admin dashboard, user management, contact triage and CRM."""

from decimal import Decimal

import pytest

from travel_api.models import Booking, ContactQuery


@pytest.mark.asyncio
async def test_admin_routes_require_admin(test_client, user_headers):
    for path in ("/admin/dashboard", "/admin/bookings", "/admin/users", "/admin/leads", "/admin/tasks"):
        response = await test_client.get(path, headers=user_headers)
        assert response.status_code == 403, path
        assert response.json()["required_role"] == "admin"

    assert (await test_client.get("/admin/customers")).status_code == 401


@pytest.mark.asyncio
async def test_dashboard_counts_and_revenue(test_client, test_session, admin_headers, user, package, event):
    for status, payment_status, amount in (
        ("confirmed", "paid", "25000.00"),
        ("pending", "pending", "12500.00"),
    ):
        test_session.add(Booking(
            user_id=user.id,
            package_id=package.id,
            adults=1,
            children=0,
            hotel_category="3_star",
            flight_included=False,
            contact_name="Asha Tester",
            contact_email=user.email,
            total_amount=Decimal(amount),
            currency="INR",
            status=status,
            payment_status=payment_status,
        ))
    test_session.add(ContactQuery(name="A", email="a@example.com", subject="Hi", message="Hello", priority="urgent"))
    await test_session.commit()

    response = await test_client.get("/admin/dashboard", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["totalPackages"] == 1
    assert stats["totalEvents"] == 1
    assert stats["totalBookings"] == 2
    assert stats["pendingBookings"] == 1
    assert stats["confirmedBookings"] == 1
    assert stats["totalUsers"] == 2
    assert stats["newContactQueries"] == 1
    assert stats["urgentContactQueries"] == 1
    assert Decimal(stats["totalRevenue"]) == Decimal("25000.00")


@pytest.mark.asyncio
async def test_admin_changes_user_role(test_client, admin_headers, user, user_headers):
    response = await test_client.put(f"/admin/users/{user.id}/role", json={"role": "admin"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    # Role changes apply to existing tokens straight away
    assert (await test_client.get("/admin/dashboard", headers=user_headers)).status_code == 200

    admins = await test_client.get("/admin/users", params={"role": "admin"}, headers=admin_headers)
    assert len(admins.json()) == 2

    missing = await test_client.put("/admin/users/nobody/role", json={"role": "user"}, headers=admin_headers)
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_contact_query_triage(test_client, admin, admin_headers):
    created = await test_client.post(
        "/contact-queries",
        json={"name": "Dev", "email": "dev@example.com", "subject": "Visa", "message": "Do I need one?"},
    )
    query_id = created.json()["id"]

    assigned = await test_client.put(
        f"/admin/contact-queries/{query_id}",
        json={"status": "in_progress", "priority": "high", "assignedTo": admin.id},
        headers=admin_headers,
    )
    assert assigned.json()["assignedTo"] == admin.id
    assert assigned.json()["resolvedAt"] is None

    resolved = await test_client.put(
        f"/admin/contact-queries/{query_id}", json={"status": "resolved"}, headers=admin_headers
    )
    assert resolved.json()["resolvedAt"] is not None

    high = await test_client.get("/admin/contact-queries", params={"priority": "high"}, headers=admin_headers)
    assert [q["id"] for q in high.json()] == [query_id]

    deleted = await test_client.delete(f"/admin/contact-queries/{query_id}", headers=admin_headers)
    assert deleted.status_code == 204
    gone = await test_client.get(f"/admin/contact-queries/{query_id}", headers=admin_headers)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_customer_crud(test_client, admin_headers):
    created = await test_client.post(
        "/admin/customers",
        json={"email": "corp@example.com", "firstName": "Priya", "company": "Acme Travel", "customerType": "corporate"},
        headers=admin_headers,
    )
    assert created.status_code == 201
    customer = created.json()
    assert customer["status"] == "active"
    assert Decimal(customer["totalSpent"]) == Decimal("0")

    found = await test_client.get("/admin/customers", params={"search": "acme"}, headers=admin_headers)
    assert [c["id"] for c in found.json()] == [customer["id"]]

    corporate = await test_client.get("/admin/customers", params={"customerType": "individual"}, headers=admin_headers)
    assert corporate.json() == []

    updated = await test_client.put(
        f"/admin/customers/{customer['id']}", json={"status": "vip", "tags": ["repeat"]}, headers=admin_headers
    )
    assert updated.json()["status"] == "vip"
    assert updated.json()["tags"] == ["repeat"]
    assert updated.json()["company"] == "Acme Travel"

    assert (await test_client.delete(f"/admin/customers/{customer['id']}", headers=admin_headers)).status_code == 204
    assert (await test_client.get(f"/admin/customers/{customer['id']}", headers=admin_headers)).status_code == 404


@pytest.mark.asyncio
async def test_customer_rejects_invalid_payload(test_client, admin_headers):
    response = await test_client.post("/admin/customers", json={"email": "nope"}, headers=admin_headers)

    assert response.status_code == 400
    paths = {error["path"] for error in response.json()["errors"]}
    assert {"email", "firstName"} <= paths


@pytest.mark.asyncio
async def test_lead_conversion(test_client, admin, admin_headers):
    lead = (await test_client.post(
        "/admin/leads",
        json={"name": "Rahul Menon", "email": "rahul@example.com", "destination": "Kerala", "groupSize": 4},
        headers=admin_headers,
    )).json()
    assert lead["status"] == "new"

    converted = await test_client.post(f"/admin/leads/{lead['id']}/convert", headers=admin_headers)

    assert converted.status_code == 201
    data = converted.json()
    assert data["lead"]["status"] == "won"
    assert data["lead"]["convertedCustomerId"] == data["customer"]["id"]
    assert data["customer"]["firstName"] == "Rahul"
    assert data["customer"]["lastName"] == "Menon"
    assert data["customer"]["assignedTo"] == admin.id

    activities = await test_client.get("/admin/lead-activities", params={"leadId": lead["id"]}, headers=admin_headers)
    assert [a["type"] for a in activities.json()] == ["status_change"]
    assert activities.json()[0]["performedBy"] == admin.id

    again = await test_client.post(f"/admin/leads/{lead['id']}/convert", headers=admin_headers)
    assert again.status_code == 409


@pytest.mark.asyncio
async def test_lead_without_email_cannot_convert(test_client, admin_headers):
    lead = (await test_client.post("/admin/leads", json={"name": "Walk-in"}, headers=admin_headers)).json()

    response = await test_client.post(f"/admin/leads/{lead['id']}/convert", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "email"


@pytest.mark.asyncio
async def test_opportunity_interaction_and_preferences(test_client, admin, admin_headers, package):
    customer = (await test_client.post(
        "/admin/customers", json={"email": "fam@example.com", "firstName": "Fam"}, headers=admin_headers
    )).json()

    opportunity = await test_client.post(
        "/admin/opportunities",
        json={"name": "Family trip", "customerId": customer["id"], "packageId": package.id, "probability": 40},
        headers=admin_headers,
    )
    assert opportunity.status_code == 201
    assert opportunity.json()["stage"] == "prospecting"

    too_likely = await test_client.post(
        "/admin/opportunities", json={"name": "Sure thing", "probability": 120}, headers=admin_headers
    )
    assert too_likely.status_code == 400

    interaction = await test_client.post(
        "/admin/customer-interactions",
        json={"customerId": customer["id"], "type": "call", "channel": "phone", "notes": "Asked about dates"},
        headers=admin_headers,
    )
    assert interaction.status_code == 201
    assert interaction.json()["performedBy"] == admin.id

    preference = await test_client.post(
        "/admin/customer-preferences",
        json={"customerId": customer["id"], "preferredDestinations": ["Goa", "Kerala"], "marketingOptIn": True},
        headers=admin_headers,
    )
    assert preference.status_code == 201
    opted_in = await test_client.get(
        "/admin/customer-preferences", params={"marketingOptIn": "true"}, headers=admin_headers
    )
    assert [p["preferredDestinations"] for p in opted_in.json()] == [["Goa", "Kerala"]]


@pytest.mark.asyncio
async def test_task_completion(test_client, admin_headers):
    task = (await test_client.post(
        "/admin/tasks", json={"title": "Call back Rahul", "priority": "high"}, headers=admin_headers
    )).json()
    assert task["status"] == "pending"
    assert task["completedAt"] is None

    completed = await test_client.post(f"/admin/tasks/{task['id']}/complete", headers=admin_headers)
    assert completed.status_code == 200
    assert completed.json()["status"] == "completed"
    first_stamp = completed.json()["completedAt"]
    assert first_stamp is not None

    again = await test_client.post(f"/admin/tasks/{task['id']}/complete", headers=admin_headers)
    assert again.json()["completedAt"] == first_stamp

    via_update = (await test_client.post("/admin/tasks", json={"title": "Send visa list"}, headers=admin_headers)).json()
    updated = await test_client.put(
        f"/admin/tasks/{via_update['id']}", json={"status": "completed"}, headers=admin_headers
    )
    assert updated.json()["completedAt"] is not None

    pending = await test_client.get("/admin/tasks", params={"status": "pending"}, headers=admin_headers)
    assert pending.json() == []


@pytest.mark.asyncio
async def test_email_template_preview(test_client, admin, admin_headers):
    template = (await test_client.post(
        "/admin/email-templates",
        json={
            "name": "Welcome",
            "subject": "Welcome, {{ name }}",
            "body": "<p>Your trip to {{ destination }} starts soon.</p>",
            "category": "booking",
            "variables": ["name", "destination"],
        },
        headers=admin_headers,
    )).json()
    assert template["createdBy"] == admin.id

    preview = await test_client.post(
        f"/admin/email-templates/{template['id']}/preview",
        json={"variables": {"name": "Asha", "destination": "<Goa>"}},
        headers=admin_headers,
    )

    assert preview.status_code == 200
    assert preview.json()["subject"] == "Welcome, Asha"
    assert preview.json()["body"] == "<p>Your trip to &lt;Goa&gt; starts soon.</p>"


@pytest.mark.asyncio
async def test_broken_template_preview(test_client, admin_headers):
    template = (await test_client.post(
        "/admin/email-templates",
        json={"name": "Broken", "subject": "Hi", "body": "{% if %}"},
        headers=admin_headers,
    )).json()

    response = await test_client.post(
        f"/admin/email-templates/{template['id']}/preview", json={"variables": {}}, headers=admin_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_email_campaign(test_client, admin_headers):
    template = (await test_client.post(
        "/admin/email-templates", json={"name": "Promo", "subject": "Deals", "body": "Hi"}, headers=admin_headers
    )).json()

    campaign = await test_client.post(
        "/admin/email-campaigns",
        json={"name": "Monsoon offers", "templateId": template["id"], "recipientsCount": 120},
        headers=admin_headers,
    )
    assert campaign.status_code == 201
    assert campaign.json()["status"] == "draft"

    sent = await test_client.put(
        f"/admin/email-campaigns/{campaign.json()['id']}",
        json={"status": "sent", "openedCount": 45},
        headers=admin_headers,
    )
    assert sent.json()["status"] == "sent"
    assert sent.json()["openedCount"] == 45
