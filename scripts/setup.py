#!/usr/bin/env python3
"""Setup script for the travel booking API."""

import asyncio
import logging
import os
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add the server directory to the Python path
server_dir = Path(__file__).parent.parent / "server"
sys.path.insert(0, str(server_dir))

from alembic import command
from alembic.config import Config
from sqlalchemy import func, select
from travel_api.core.database import async_session_factory, close_db
from travel_api.core.security import hash_password
from travel_api.models import Availability, Event, TourPackage, User, UserRole

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def setup_database():
    """Bring the schema up to the latest migration."""
    logger.info("Setting up database...")

    try:
        alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
        alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

        logger.info("Running database migrations...")
        command.upgrade(alembic_cfg, "head")
        logger.info("Database migrations completed")

    except Exception as e:
        logger.error(f"Database setup failed: {e}")
        raise


async def create_admin_user():
    """Create the bootstrap admin account from ADMIN_EMAIL / ADMIN_PASSWORD."""
    email = os.environ.get("ADMIN_EMAIL", "admin@example.com").lower()
    password = os.environ.get("ADMIN_PASSWORD", "change-me-admin")

    async with async_session_factory() as db:
        existing = await db.execute(select(User).where(User.email == email))
        if existing.scalar_one_or_none() is not None:
            logger.info(f"Admin user {email} already exists, skipping...")
            return

        db.add(User(
            email=email,
            password_hash=hash_password(password),
            first_name="Admin",
            role=UserRole.ADMIN.value,
            is_email_verified=True,
        ))
        await db.commit()
        logger.info(f"Admin user {email} created")


async def create_sample_data():
    """Create a sample package and event with a few weeks of availability."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        try:
            existing = await db.execute(select(func.count()).select_from(TourPackage))
            if existing.scalar_one() > 0:
                logger.info("Sample data already exists, skipping...")
                return

            package = TourPackage(
                name="Kerala Backwaters Escape",
                product_name="KER-BW-4N",
                description="Houseboat nights on the Alleppey backwaters with Munnar tea country",
                destination="Kerala",
                duration_days=5,
                duration_nights=4,
                min_passenger_count=1,
                max_passenger_count=8,
                starting_price=Decimal("18999.00"),
                strike_through_price=Decimal("22999.00"),
                pricing_tiers={
                    "3_star": {
                        "without_flights": {"price": "18999.00", "children_price": "12999.00"},
                        "with_flights": {"price": "27999.00", "children_price": "19999.00"},
                    },
                    "4_5_star": {
                        "without_flights": {"price": "25999.00", "children_price": "16999.00"},
                        "with_flights": {"price": "34999.00", "children_price": "23999.00"},
                    },
                },
                custom_highlights=["Private houseboat", "Tea estate walk"],
                featured=True,
            )
            event = Event(
                name="Hornbill Festival",
                description="Ten days of Naga culture, music and food",
                location="Kisama, Nagaland",
                start_date=date(2025, 12, 1),
                end_date=date(2025, 12, 10),
            )
            db.add_all([package, event])
            await db.flush()

            base_date = date.today() + timedelta(days=30)
            for i in range(5):
                db.add(Availability(
                    package_id=package.id,
                    date=base_date + timedelta(days=i * 7),
                    total_slots=20,
                ))
            db.add(Availability(
                event_id=event.id,
                date=event.start_date,
                total_slots=200,
                price=Decimal("1500.00"),
            ))

            await db.commit()
            logger.info("Sample data created successfully!")

        except Exception as e:
            await db.rollback()
            logger.error(f"Failed to create sample data: {e}")
            raise


async def seed():
    try:
        await create_admin_user()
        await create_sample_data()
    finally:
        await close_db()


def main():
    """Main setup function."""
    logger.info("Starting travel booking API setup...")

    # Alembic's env.py drives its own event loop
    setup_database()

    asyncio.run(seed())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: cd server && uvicorn travel_api.main:app --reload")


if __name__ == "__main__":
    main()
