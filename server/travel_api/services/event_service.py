"""Event service for catalog operations."""

import logging
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.event import Event
from ..schemas.event import CreateEventRequest, EventQuery, UpdateEventRequest

logger = logging.getLogger(__name__)


class EventService:
    """Service for event operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_event_by_id(self, event_id: int) -> Optional[Event]:
        return await self.db.get(Event, event_id)

    async def get_event_by_id_or_raise(self, event_id: int) -> Event:
        event = await self.get_event_by_id(event_id)
        if not event:
            logger.warning("Event not found", extra={"event_id": event_id})
            raise NotFoundError(resource_type="event", resource_id=str(event_id))
        return event

    async def list_events(self, query: EventQuery) -> list[Event]:
        """List events matching the query options, soonest first."""
        conditions = []

        if query.active is not None:
            conditions.append(Event.active.is_(query.active))
        if query.location:
            conditions.append(Event.location.ilike(f"%{query.location}%"))
        if query.from_date is not None:
            conditions.append(Event.start_date >= query.from_date)
        if query.search:
            pattern = f"%{query.search}%"
            conditions.append(
                or_(
                    Event.name.ilike(pattern),
                    Event.location.ilike(pattern),
                    Event.description.ilike(pattern),
                )
            )

        stmt = select(Event)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(Event.start_date, Event.id).offset(query.offset).limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def create_event(self, request: CreateEventRequest) -> Event:
        event = Event(**request.model_dump())
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)

        logger.info(
            "Event created successfully",
            extra={
                "event_id": event.id,
                "name": event.name,
                "start_date": event.start_date.isoformat()
            }
        )
        return event

    async def update_event(self, event_id: int, request: UpdateEventRequest) -> Event:
        """
        Apply a partial update to an event.

        Raises:
            NotFoundError: If event not found
            ValidationError: If the resulting date range is inverted
        """
        event = await self.get_event_by_id_or_raise(event_id)
        changes = request.model_dump(exclude_unset=True)

        start_date = changes.get("start_date", event.start_date)
        end_date = changes.get("end_date", event.end_date)
        if start_date is None:
            raise ValidationError(
                detail="startDate cannot be cleared",
                errors=[{"path": "startDate", "message": "startDate is required"}]
            )
        if end_date is not None and end_date < start_date:
            raise ValidationError(
                detail="endDate must not be before startDate",
                errors=[{"path": "endDate", "message": "endDate must not be before startDate"}]
            )

        for field, value in changes.items():
            setattr(event, field, value)

        await self.db.commit()
        await self.db.refresh(event)

        logger.info("Event updated successfully", extra={"event_id": event_id, "changes": list(changes)})
        return event

    async def delete_event(self, event_id: int) -> None:
        """
        Delete an event.

        Raises:
            NotFoundError: If event not found
            ConflictError: If bookings still reference the event
        """
        event = await self.get_event_by_id_or_raise(event_id)
        await self.db.delete(event)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(
                detail=f"Event {event_id} has bookings and cannot be deleted; deactivate it instead",
                conflicting_resource={"event_id": event_id}
            )

        logger.info("Event deleted", extra={"event_id": event_id})
