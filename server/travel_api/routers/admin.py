"""Admin router: dashboard, bookings, users and contact query triage."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..core.exceptions import ProblemDetailsException
from ..models.user import User as UserModel
from ..schemas.booking import Booking, BookingQuery
from ..schemas.content import ContactQuery, ContactQueryFilter, UpdateContactQueryRequest
from ..schemas.dashboard import DashboardStats
from ..schemas.user import UpdateRoleRequest, User, UserQuery
from ..services.booking_service import BookingService
from ..services.content_service import ContactQueryService
from ..services.dashboard_service import DashboardService
from ..services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])

DB_DEPENDENCY = Depends(get_db)


def _dump(schema, obj) -> dict:
    return schema.model_validate(obj).model_dump(mode="json", by_alias=True)


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    """Headline counts and paid revenue for the admin dashboard."""
    try:
        stats = await DashboardService(db).get_stats()
        return JSONResponse(status_code=200, content=stats.model_dump(mode="json", by_alias=True))

    except Exception as e:
        logger.error(
            "Unexpected error building dashboard stats",
            extra={"error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/bookings", response_model=list[Booking])
async def list_bookings(
    query: Annotated[BookingQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    bookings = await BookingService(db).list_bookings(query)
    return JSONResponse(status_code=200, content=[_dump(Booking, b) for b in bookings])


@router.get("/users", response_model=list[User])
async def list_users(
    query: Annotated[UserQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    users = await UserService(db).list_users(query)
    return JSONResponse(status_code=200, content=[_dump(User, u) for u in users])


@router.put("/users/{user_id}/role", response_model=User)
async def update_user_role(
    user_id: str,
    request: UpdateRoleRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: UserModel = Depends(require_admin)
) -> JSONResponse:
    try:
        user = await UserService(db).update_role(user_id, request.role, admin)
        return JSONResponse(status_code=200, content=_dump(User, user))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error changing user role",
            extra={"user_id": user_id, "role": request.role.value, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/contact-queries", response_model=list[ContactQuery])
async def list_contact_queries(
    filters: Annotated[ContactQueryFilter, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    queries = await ContactQueryService(db).list_queries(filters)
    return JSONResponse(status_code=200, content=[_dump(ContactQuery, q) for q in queries])


@router.get("/contact-queries/{query_id}", response_model=ContactQuery)
async def get_contact_query(query_id: int, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    query = await ContactQueryService(db).get_query_by_id_or_raise(query_id)
    return JSONResponse(status_code=200, content=_dump(ContactQuery, query))


@router.put("/contact-queries/{query_id}", response_model=ContactQuery)
async def update_contact_query(
    query_id: int,
    request: UpdateContactQueryRequest,
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Change status, priority or assignee; resolving stamps ``resolvedAt``."""
    try:
        query = await ContactQueryService(db).update_query(query_id, request)
        return JSONResponse(status_code=200, content=_dump(ContactQuery, query))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error updating contact query",
            extra={"query_id": query_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.delete("/contact-queries/{query_id}", status_code=204)
async def delete_contact_query(query_id: int, db: AsyncSession = DB_DEPENDENCY) -> Response:
    await ContactQueryService(db).delete_query(query_id)
    return Response(status_code=204)
