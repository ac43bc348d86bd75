"""API tests for signup, login, bearer tokens and Google sign-in."""

from urllib.parse import parse_qs, urlparse

import pytest

from travel_api.core.security import create_oauth_state
from travel_api.services.oauth_service import GoogleProfile, get_google_client


class FakeGoogleClient:
    def __init__(self, profile: GoogleProfile):
        self.profile = profile
        self.codes = []

    def authorization_url(self, state: str) -> str:
        return f"https://accounts.google.test/auth?state={state}"

    async def fetch_profile(self, code: str) -> GoogleProfile:
        self.codes.append(code)
        return self.profile


@pytest.mark.asyncio
async def test_signup_returns_user_and_token(test_client, token_store):
    response = await test_client.post(
        "/auth/signup",
        json={"email": "New.Traveler@Example.com", "password": "long-enough-pw", "firstName": "Neha"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user"]["email"] == "new.traveler@example.com"
    assert data["user"]["role"] == "user"
    assert "passwordHash" not in data["user"]
    assert await token_store.validate(data["token"]) == data["user"]["id"]


@pytest.mark.asyncio
async def test_signup_rejects_short_password(test_client):
    response = await test_client.post("/auth/signup", json={"email": "x@example.com", "password": "short"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["path"] == "password"


@pytest.mark.asyncio
async def test_signup_rejects_duplicate_email(test_client, user):
    response = await test_client.post(
        "/auth/signup",
        json={"email": "ASHA@example.com", "password": "another-password"},
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_login_and_wrong_password(test_client, user):
    ok = await test_client.post("/auth/login", json={"email": user.email, "password": "correct-horse-battery"})
    assert ok.status_code == 200
    assert ok.json()["user"]["id"] == user.id

    bad = await test_client.post("/auth/login", json={"email": user.email, "password": "wrong-password"})
    assert bad.status_code == 401
    assert bad.json()["message"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_session_cookie_authenticates_after_login(test_client, user):
    await test_client.post("/auth/login", json={"email": user.email, "password": "correct-horse-battery"})

    response = await test_client.get("/auth/user")

    assert response.status_code == 200
    assert response.json()["email"] == user.email


@pytest.mark.asyncio
async def test_current_user_requires_authentication(test_client):
    response = await test_client.get("/auth/user")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_endpoint(test_client, user_headers, admin_headers):
    assert (await test_client.get("/auth/admin", headers=user_headers)).status_code == 403

    response = await test_client.get("/auth/admin", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"


@pytest.mark.asyncio
async def test_issue_and_verify_token(test_client, user, user_headers):
    issued = await test_client.get("/auth/token", headers=user_headers)
    assert issued.status_code == 200
    assert issued.json()["expiresIn"] == 24 * 3600

    headers = {"Authorization": f"Bearer {issued.json()['token']}"}
    verified = await test_client.get("/auth/verify-token", headers=headers)
    assert verified.status_code == 200
    assert verified.json()["valid"] is True
    assert verified.json()["user"]["id"] == user.id


@pytest.mark.asyncio
async def test_verify_token_rejects_unknown_token(test_client):
    response = await test_client.get("/auth/verify-token", headers={"Authorization": "Bearer not-a-token"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_every_token(test_client, token_store, user, user_headers):
    other_token = await token_store.issue(user.id)

    response = await test_client.post("/auth/logout", headers=user_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Logged out successfully"
    assert (await test_client.get("/auth/user", headers=user_headers)).status_code == 401
    assert await token_store.validate(other_token) is None


@pytest.mark.asyncio
async def test_logout_without_session_still_succeeds(test_client):
    response = await test_client.post("/auth/logout")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_google_callback_creates_user_and_redirects(test_app, test_client, token_store):
    google = FakeGoogleClient(GoogleProfile(
        subject="google-123",
        email="traveller@gmail.test",
        first_name="Kiran",
        last_name="Rao",
        picture=None,
        email_verified=True,
    ))
    test_app.dependency_overrides[get_google_client] = lambda: google

    response = await test_client.get(
        "/auth/google/callback",
        params={"code": "auth-code", "state": create_oauth_state("/bookings")},
    )

    assert response.status_code == 302
    location = urlparse(response.headers["location"])
    assert location.path == "/bookings"
    token = parse_qs(location.query)["token"][0]
    assert await token_store.validate(token) is not None
    assert google.codes == ["auth-code"]

    me = await test_client.get("/auth/user", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "traveller@gmail.test"
    assert me.json()["isEmailVerified"] is True


@pytest.mark.asyncio
async def test_google_callback_rejects_forged_state(test_app, test_client):
    test_app.dependency_overrides[get_google_client] = lambda: FakeGoogleClient(None)

    response = await test_client.get("/auth/google/callback", params={"code": "c", "state": "forged"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_google_login_redirects_to_consent(test_app, test_client):
    test_app.dependency_overrides[get_google_client] = lambda: FakeGoogleClient(None)

    response = await test_client.get("/auth/google", params={"next": "//evil.example"})

    assert response.status_code == 302
    assert response.headers["location"].startswith("https://accounts.google.test/auth?state=")
