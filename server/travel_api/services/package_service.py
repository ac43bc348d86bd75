"""Tour package service for catalog operations."""

import logging
from typing import Optional

from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ConflictError, NotFoundError
from ..models.booking import HotelCategory
from ..models.package import TourPackage
from ..schemas.package import CreatePackageRequest, PackageQuery, UpdatePackageRequest
from .pricing import PriceQuote, resolve_price

logger = logging.getLogger(__name__)


class PackageService:
    """Service for tour package operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_package_by_id(self, package_id: int) -> Optional[TourPackage]:
        """
        Get package by ID.

        Args:
            package_id: Package ID to search for

        Returns:
            Package if found, None otherwise
        """
        return await self.db.get(TourPackage, package_id)

    async def get_package_by_id_or_raise(self, package_id: int) -> TourPackage:
        """
        Get package by ID or raise NotFoundError.

        Raises:
            NotFoundError: If package not found
        """
        package = await self.get_package_by_id(package_id)
        if not package:
            logger.warning(
                "Package not found",
                extra={"package_id": package_id}
            )
            raise NotFoundError(
                resource_type="package",
                resource_id=str(package_id)
            )
        return package

    async def list_packages(self, query: PackageQuery) -> list[TourPackage]:
        """
        List packages matching the query options.

        Featured packages come first, then the most recently created.
        """
        conditions = []

        if query.active is not None:
            conditions.append(TourPackage.active.is_(query.active))
        if query.featured is not None:
            conditions.append(TourPackage.featured.is_(query.featured))
        if query.destination:
            conditions.append(TourPackage.destination.ilike(f"%{query.destination}%"))
        if query.min_price is not None:
            conditions.append(TourPackage.starting_price >= query.min_price)
        if query.max_price is not None:
            conditions.append(TourPackage.starting_price <= query.max_price)
        if query.search:
            pattern = f"%{query.search}%"
            conditions.append(
                or_(
                    TourPackage.name.ilike(pattern),
                    TourPackage.destination.ilike(pattern),
                    TourPackage.description.ilike(pattern),
                )
            )

        stmt = select(TourPackage)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = (
            stmt.order_by(TourPackage.featured.desc(), TourPackage.created_at.desc(), TourPackage.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )

        result = await self.db.execute(stmt)
        packages = list(result.scalars())

        logger.info(
            "Package search completed",
            extra={
                "total_found": len(packages),
                "destination": query.destination,
                "search": query.search
            }
        )
        return packages

    async def create_package(self, request: CreatePackageRequest) -> TourPackage:
        """Create a new tour package."""
        package = TourPackage(**request.model_dump(mode="json", exclude={"starting_price", "strike_through_price"}))
        package.starting_price = request.starting_price
        package.strike_through_price = request.strike_through_price

        self.db.add(package)
        await self.db.commit()
        await self.db.refresh(package)

        logger.info(
            "Package created successfully",
            extra={
                "package_id": package.id,
                "name": package.name,
                "destination": package.destination
            }
        )
        return package

    async def update_package(self, package_id: int, request: UpdatePackageRequest) -> TourPackage:
        """
        Apply a partial update to a package.

        Raises:
            NotFoundError: If package not found
        """
        package = await self.get_package_by_id_or_raise(package_id)
        changes = request.model_dump(exclude_unset=True)

        # JSON columns get plain JSON-compatible values
        if "pricing_tiers" in changes:
            changes["pricing_tiers"] = request.model_dump(mode="json", include={"pricing_tiers"})["pricing_tiers"]

        for field, value in changes.items():
            setattr(package, field, value)

        await self.db.commit()
        await self.db.refresh(package)

        logger.info(
            "Package updated successfully",
            extra={"package_id": package_id, "changes": list(changes)}
        )
        return package

    async def delete_package(self, package_id: int) -> None:
        """
        Delete a package.

        Raises:
            NotFoundError: If package not found
            ConflictError: If bookings still reference the package
        """
        package = await self.get_package_by_id_or_raise(package_id)
        await self.db.delete(package)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                "Package deletion blocked by existing references",
                extra={"package_id": package_id}
            )
            raise ConflictError(
                detail=f"Package {package_id} has bookings and cannot be deleted; deactivate it instead",
                conflicting_resource={"package_id": package_id}
            )

        logger.info("Package deleted", extra={"package_id": package_id})

    async def get_price_quote(
        self,
        package_id: int,
        hotel_category: HotelCategory,
        flight_included: bool,
    ) -> tuple[TourPackage, PriceQuote]:
        """Resolve the unit prices of a package for one tier."""
        package = await self.get_package_by_id_or_raise(package_id)
        return package, resolve_price(package, hotel_category, flight_included)
