"""Test configuration and fixtures."""

import os

# Point the application at SQLite before any settings are loaded
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from travel_api import models  # noqa: F401 - registers every table
from travel_api.core.database import Base, get_db
from travel_api.core.security import compute_payment_signature, hash_password, verify_payment_signature
from travel_api.core.tokens import InMemoryTokenStore, get_token_store
from travel_api.models import Availability, Event, TourPackage, User, UserRole
from travel_api.services.mailer import get_mailer
from travel_api.services.payment_gateway import get_payment_gateway

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

GATEWAY_SECRET = "test_gateway_secret"


class FakeGateway:
    """In-process stand-in for the payment provider's orders API."""

    key_id = "rzp_test_key"

    def __init__(self, secret: str = GATEWAY_SECRET):
        self.secret = secret
        self.orders: dict[str, dict] = {}

    async def create_order(self, amount, currency, receipt, notes):
        order = {
            "id": f"order_{len(self.orders) + 1:04d}",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "notes": notes,
            "status": "created",
        }
        self.orders[order["id"]] = order
        return order

    async def fetch_order(self, order_id):
        return self.orders[order_id]

    def verify_signature(self, order_id, payment_id, signature):
        return verify_payment_signature(self.secret, order_id, payment_id, signature)

    def sign(self, order_id: str, payment_id: str) -> str:
        return compute_payment_signature(self.secret, order_id, payment_id)


class RecordingMailer:
    """Collects outgoing messages instead of sending them."""

    def __init__(self):
        self.sent = []

    async def send(self, message):
        self.sent.append(message)
        return True


class FailingMailer:
    """Mailer whose relay is always down."""

    def __init__(self):
        self.attempts = 0

    async def send(self, message):
        self.attempts += 1
        raise ConnectionRefusedError("SMTP relay unreachable")


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_factory(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def test_session(session_factory):
    """Create a test database session."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def token_store():
    return InMemoryTokenStore(ttl=timedelta(hours=24))


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def failing_mailer():
    return FailingMailer()


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session, token_store, gateway, mailer):
    """Create the application with the database, token store, gateway and mailer swapped out."""
    from travel_api.main import create_app

    app = create_app()

    # Override database dependency
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_token_store] = lambda: token_store
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    app.dependency_overrides[get_mailer] = lambda: mailer

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


async def _create_user(session, email: str, role: UserRole, first_name: str) -> User:
    user = User(
        email=email,
        password_hash=hash_password("correct-horse-battery"),
        first_name=first_name,
        last_name="Tester",
        phone="+91 98765 43210",
        role=role.value,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest_asyncio.fixture
async def user(test_session):
    return await _create_user(test_session, "asha@example.com", UserRole.USER, "Asha")


@pytest_asyncio.fixture
async def admin(test_session):
    return await _create_user(test_session, "ops@example.com", UserRole.ADMIN, "Ops")


@pytest_asyncio.fixture
async def user_headers(user, token_store):
    token = await token_store.issue(user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_headers(admin, token_store):
    token = await token_store.issue(admin.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def travel_date():
    return date.today() + timedelta(days=45)


@pytest_asyncio.fixture
async def package(test_session):
    """Flat-priced package with no tier table."""
    package = TourPackage(
        name="Goa Beach Break",
        product_name="GOA-3N",
        destination="Goa",
        duration_days=4,
        duration_nights=3,
        starting_price=Decimal("12500.00"),
        strike_through_price=Decimal("15000.00"),
        max_passenger_count=10,
    )
    test_session.add(package)
    await test_session.commit()
    await test_session.refresh(package)
    return package


@pytest_asyncio.fixture
async def package_slot(test_session, package, travel_date):
    slot = Availability(package_id=package.id, date=travel_date, total_slots=4, booked_slots=0)
    test_session.add(slot)
    await test_session.commit()
    await test_session.refresh(slot)
    return slot


@pytest_asyncio.fixture
async def event(test_session, travel_date):
    event = Event(
        name="Sunburn Festival",
        location="Vagator, Goa",
        start_date=travel_date,
        end_date=travel_date + timedelta(days=2),
    )
    test_session.add(event)
    await test_session.commit()
    await test_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def event_slot(test_session, event, travel_date):
    slot = Availability(
        event_id=event.id,
        date=travel_date,
        total_slots=100,
        booked_slots=0,
        price=Decimal("3500.00"),
    )
    test_session.add(slot)
    await test_session.commit()
    await test_session.refresh(slot)
    return slot


@pytest.fixture
def sample_package_data():
    """Sample package payload for the admin API."""
    return {
        "name": "Ladakh Road Trip",
        "productName": "LEH-6N",
        "destination": "Ladakh",
        "durationDays": 7,
        "durationNights": 6,
        "startingPrice": "32000.00",
        "pricingTiers": {
            "3_star": {
                "without_flights": {"price": "32000.00"},
                "with_flights": {"price": "41000.00", "children_price": "30000.00"},
            }
        },
        "customHighlights": ["Khardung La", "Pangong Tso"],
    }
