"""Admin dashboard statistics."""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.booking import Booking, BookingStatus, PaymentStatus
from ..models.content import ContactQuery, ContactQueryStatus, Priority
from ..models.event import Event
from ..models.package import TourPackage
from ..models.user import User
from ..schemas.dashboard import DashboardStats


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _count(self, model, *conditions) -> int:
        stmt = select(func.count()).select_from(model)
        if conditions:
            stmt = stmt.where(*conditions)
        return (await self.db.execute(stmt)).scalar_one()

    async def get_stats(self) -> DashboardStats:
        revenue = (
            await self.db.execute(
                select(func.coalesce(func.sum(Booking.total_amount), 0)).where(
                    Booking.payment_status == PaymentStatus.PAID.value
                )
            )
        ).scalar_one()

        return DashboardStats(
            total_packages=await self._count(TourPackage),
            active_packages=await self._count(TourPackage, TourPackage.active.is_(True)),
            total_events=await self._count(Event),
            total_bookings=await self._count(Booking),
            pending_bookings=await self._count(Booking, Booking.status == BookingStatus.PENDING.value),
            confirmed_bookings=await self._count(Booking, Booking.status == BookingStatus.CONFIRMED.value),
            total_users=await self._count(User),
            total_contact_queries=await self._count(ContactQuery),
            new_contact_queries=await self._count(
                ContactQuery, ContactQuery.status == ContactQueryStatus.NEW.value
            ),
            urgent_contact_queries=await self._count(
                ContactQuery, ContactQuery.priority == Priority.URGENT.value
            ),
            total_revenue=Decimal(str(revenue)).quantize(Decimal("0.01")),
        )
