"""Availability ledger: slot checks, atomic reservations and admin maintenance."""

import logging
from datetime import date, datetime
from typing import Optional

from sqlalchemy import and_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..core.observability import metrics_collector
from ..models.availability import Availability
from ..models.target import BookingTarget, target_from_ids
from ..schemas.availability import AvailabilityQuery, CreateAvailabilityRequest, UpdateAvailabilityRequest
from ..schemas.common import normalize_slot_date

logger = logging.getLogger(__name__)


class AvailabilityService:
    """Service for slot availability operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_slot(self, target: BookingTarget, day: date | datetime) -> Optional[Availability]:
        """Active availability row for ``target`` on ``day``, if any."""
        stmt = (
            select(Availability)
            .where(
                Availability.matches_target(target),
                Availability.date == normalize_slot_date(day),
                Availability.active.is_(True),
            )
            # reserve_slots updates rows behind the identity map
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def check_availability(self, target: BookingTarget, day: date | datetime, requested: int) -> bool:
        """
        Return True if ``requested`` slots are free for ``target`` on ``day``.

        A date without an availability row is not bookable.
        """
        slot = await self.get_slot(target, day)
        if slot is None:
            return False
        return slot.total_slots - slot.booked_slots >= requested

    async def reserve_slots(self, target: BookingTarget, day: date | datetime, requested: int) -> bool:
        """
        Atomically book ``requested`` slots.

        The capacity check and the increment are one conditional UPDATE, so
        two concurrent reservations can never push ``booked_slots`` past
        ``total_slots``. Returns False when nothing was reserved. The caller
        owns the transaction and must commit or roll back.
        """
        slot_date = normalize_slot_date(day)
        stmt = (
            update(Availability)
            .where(
                and_(
                    Availability.matches_target(target),
                    Availability.date == slot_date,
                    Availability.active.is_(True),
                    Availability.booked_slots + requested <= Availability.total_slots,
                )
            )
            .values(booked_slots=Availability.booked_slots + requested)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        reserved = result.rowcount == 1

        metrics_collector.record_slot_reservation(reserved)
        log = logger.info if reserved else logger.warning
        log(
            "Slot reservation " + ("succeeded" if reserved else "rejected"),
            extra={
                "target_type": target.kind,
                "target_id": target.id,
                "date": slot_date.isoformat(),
                "requested_slots": requested
            }
        )
        return reserved

    async def get_availability_by_id(self, availability_id: int) -> Optional[Availability]:
        return await self.db.get(Availability, availability_id, populate_existing=True)

    async def get_availability_by_id_or_raise(self, availability_id: int) -> Availability:
        availability = await self.get_availability_by_id(availability_id)
        if not availability:
            raise NotFoundError(resource_type="availability", resource_id=str(availability_id))
        return availability

    async def list_availability(self, query: AvailabilityQuery) -> list[Availability]:
        """List availability rows matching the query options, by date."""
        conditions = []
        if query.package_id is not None:
            conditions.append(Availability.package_id == query.package_id)
        if query.event_id is not None:
            conditions.append(Availability.event_id == query.event_id)
        if query.from_date is not None:
            conditions.append(Availability.date >= query.from_date)
        if query.to_date is not None:
            conditions.append(Availability.date <= query.to_date)
        if query.active is not None:
            conditions.append(Availability.active.is_(query.active))

        stmt = select(Availability)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(Availability.date, Availability.id).offset(query.offset).limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def create_availability(self, request: CreateAvailabilityRequest) -> Availability:
        """
        Open slots for a package or event on a date.

        Raises:
            ConflictError: If the target already has a row for that date
        """
        availability = Availability(
            date=request.date,
            total_slots=request.total_slots,
            booked_slots=0,
            price=request.price,
            active=request.active,
        )
        availability.target = target_from_ids(request.package_id, request.event_id)
        self.db.add(availability)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                detail=f"Availability for {request.date.isoformat()} already exists",
                conflicting_resource={
                    "package_id": request.package_id,
                    "event_id": request.event_id,
                    "date": request.date.isoformat()
                }
            )
        await self.db.refresh(availability)

        logger.info(
            "Availability created",
            extra={
                "availability_id": availability.id,
                "package_id": availability.package_id,
                "event_id": availability.event_id,
                "date": availability.date.isoformat(),
                "total_slots": availability.total_slots
            }
        )
        return availability

    async def update_availability(self, availability_id: int, request: UpdateAvailabilityRequest) -> Availability:
        """
        Update capacity, price or the active flag.

        Raises:
            NotFoundError: If the row does not exist
            ConflictError: If the new capacity is below the slots already booked
        """
        availability = await self.get_availability_by_id_or_raise(availability_id)
        changes = request.model_dump(exclude_unset=True)

        total_slots = changes.get("total_slots")
        if total_slots is not None and total_slots < availability.booked_slots:
            raise ConflictError(
                detail=f"Cannot reduce capacity below {availability.booked_slots} booked slots",
                conflicting_resource={
                    "availability_id": availability_id,
                    "booked_slots": availability.booked_slots,
                    "requested_total_slots": total_slots
                }
            )

        for field, value in changes.items():
            setattr(availability, field, value)

        await self.db.commit()
        await self.db.refresh(availability)

        logger.info(
            "Availability updated",
            extra={"availability_id": availability_id, "changes": list(changes)}
        )
        return availability
