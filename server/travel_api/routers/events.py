"""Event router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..core.exceptions import ProblemDetailsException
from ..models.user import User
from ..schemas.event import CreateEventRequest, Event, EventQuery, UpdateEventRequest
from ..services.event_service import EventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _event_body(event) -> dict:
    return Event.model_validate(event).model_dump(mode="json", by_alias=True)


@router.get("", response_model=list[Event])
async def list_events(
    query: Annotated[EventQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    events = await EventService(db).list_events(query)
    return JSONResponse(status_code=200, content=[_event_body(e) for e in events])


@router.get("/{event_id}", response_model=Event)
async def get_event(event_id: int, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    event = await EventService(db).get_event_by_id_or_raise(event_id)
    return JSONResponse(status_code=200, content=_event_body(event))


@router.post("", response_model=Event, status_code=201)
async def create_event(
    request: CreateEventRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        event = await EventService(db).create_event(request)

        logger.info(
            "Event created successfully",
            extra={"event_id": event.id, "name": event.name, "actor": admin.id}
        )

        return JSONResponse(status_code=201, content=_event_body(event))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in event creation",
            extra={"name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.put("/{event_id}", response_model=Event)
async def update_event(
    event_id: int,
    request: UpdateEventRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        event = await EventService(db).update_event(event_id, request)
        return JSONResponse(status_code=200, content=_event_body(event))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in event update",
            extra={"event_id": event_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: int,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> Response:
    await EventService(db).delete_event(event_id)
    return Response(status_code=204)
