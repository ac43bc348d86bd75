"""Tour package router."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.dependencies import require_admin
from ..core.exceptions import ProblemDetailsException
from ..models.booking import HotelCategory
from ..models.user import User
from ..schemas.package import (
    CreatePackageRequest,
    Package,
    PackageQuery,
    PriceQuoteResponse,
    UpdatePackageRequest,
)
from ..services.package_service import PackageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/packages", tags=["packages"])

DB_DEPENDENCY = Depends(get_db)
ADMIN_DEPENDENCY = Depends(require_admin)


def _package_body(package) -> dict:
    return Package.model_validate(package).model_dump(mode="json", by_alias=True)


@router.get("", response_model=list[Package])
async def list_packages(
    query: Annotated[PackageQuery, Query()],
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """List packages, featured first, then newest."""
    try:
        packages = await PackageService(db).list_packages(query)
        return JSONResponse(status_code=200, content=[_package_body(p) for p in packages])

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error listing packages",
            extra={"query": query.model_dump(mode="json"), "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/{package_id}", response_model=Package)
async def get_package(package_id: int, db: AsyncSession = DB_DEPENDENCY) -> JSONResponse:
    package = await PackageService(db).get_package_by_id_or_raise(package_id)
    return JSONResponse(status_code=200, content=_package_body(package))


@router.get("/{package_id}/price", response_model=PriceQuoteResponse)
async def get_package_price(
    package_id: int,
    hotel_category: HotelCategory = Query(HotelCategory.THREE_STAR, alias="hotelCategory"),
    flight_included: bool = Query(False, alias="flightIncluded"),
    db: AsyncSession = DB_DEPENDENCY
) -> JSONResponse:
    """Resolve the per-person prices of one hotel/flight tier."""
    package, quote = await PackageService(db).get_price_quote(package_id, hotel_category, flight_included)

    response_data = PriceQuoteResponse(
        package_id=package.id,
        hotel_category=hotel_category,
        flight_included=flight_included,
        currency=package.currency,
        price=quote.price,
        strike_through_price=quote.strike_through_price,
        children_price=quote.children_price,
        children_strike_through_price=quote.children_strike_through_price,
    )
    return JSONResponse(status_code=200, content=response_data.model_dump(mode="json", by_alias=True))


@router.post("", response_model=Package, status_code=201)
async def create_package(
    request: CreatePackageRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        package = await PackageService(db).create_package(request)

        logger.info(
            "Package created successfully",
            extra={"package_id": package.id, "name": package.name, "actor": admin.id}
        )

        return JSONResponse(status_code=201, content=_package_body(package))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in package creation",
            extra={"name": request.name, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.put("/{package_id}", response_model=Package)
async def update_package(
    package_id: int,
    request: UpdatePackageRequest,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> JSONResponse:
    try:
        package = await PackageService(db).update_package(package_id, request)
        return JSONResponse(status_code=200, content=_package_body(package))

    except ProblemDetailsException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in package update",
            extra={"package_id": package_id, "error": str(e)},
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.delete("/{package_id}", status_code=204)
async def delete_package(
    package_id: int,
    db: AsyncSession = DB_DEPENDENCY,
    admin: User = ADMIN_DEPENDENCY
) -> Response:
    await PackageService(db).delete_package(package_id)
    return Response(status_code=204)
