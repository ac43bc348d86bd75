"""Public contact form router."""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import ProblemDetailsException
from ..schemas.content import ContactQuery, CreateContactQueryRequest
from ..services.content_service import ContactQueryService
from ..services.notification_service import (
    NotificationDispatcher,
    NotificationEvent,
    contact_query_payload,
    get_notification_dispatcher,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contact-queries", tags=["contact"])


@router.post("", response_model=ContactQuery, status_code=201)
async def create_contact_query(
    request: CreateContactQueryRequest,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher)
) -> JSONResponse:
    """
    Record a contact form submission.

    The acknowledgement and operations emails are sent after the response;
    a mail failure never affects the 201.
    """
    try:
        query = await ContactQueryService(db).create_query(request)

        background_tasks.add_task(
            dispatcher.notify,
            NotificationEvent.CONTACT_QUERY_CREATED,
            contact_query_payload(query),
        )

        return JSONResponse(
            status_code=201,
            content=ContactQuery.model_validate(query).model_dump(mode="json", by_alias=True)
        )

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in contact query creation",
            extra={"subject": request.subject, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e
