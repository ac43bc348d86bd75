"""Availability ledger model definition."""

import datetime
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Date, ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, TimestampMixin
from .target import EXACTLY_ONE_TARGET, TargetMixin


class Availability(TargetMixin, TimestampMixin, Base):
    """Bookable slot capacity for one package or event on one calendar date."""

    __tablename__ = "availability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    package_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("tour_packages.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    event_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("events.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False, index=True)
    total_slots: Mapped[int] = mapped_column(Integer, nullable=False)
    booked_slots: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(EXACTLY_ONE_TARGET, name="ck_availability_exactly_one_target"),
        CheckConstraint("total_slots >= 0", name="ck_availability_total_non_negative"),
        CheckConstraint("booked_slots >= 0", name="ck_availability_booked_non_negative"),
        CheckConstraint("booked_slots <= total_slots", name="ck_availability_no_overbooking"),
        UniqueConstraint("package_id", "date", name="uq_availability_package_date"),
        UniqueConstraint("event_id", "date", name="uq_availability_event_date"),
    )

    @property
    def remaining_slots(self) -> int:
        return self.total_slots - self.booked_slots

    def __repr__(self) -> str:
        return (
            f"<Availability(id={self.id}, package_id={self.package_id}, event_id={self.event_id}, "
            f"date={self.date}, booked={self.booked_slots}/{self.total_slots})>"
        )
