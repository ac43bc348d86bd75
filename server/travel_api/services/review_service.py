"""Review service: customer reviews and the package rating aggregate."""

import logging
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import ValidationError
from ..models.booking import Booking, BookingStatus
from ..models.package import TourPackage
from ..models.review import Review
from ..models.target import PackageTarget, target_from_ids
from ..models.user import User
from ..schemas.review import CreateReviewRequest, ReviewQuery
from .event_service import EventService
from .package_service import PackageService

logger = logging.getLogger(__name__)


class ReviewService:
    """Service for review operations."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.package_service = PackageService(db)
        self.event_service = EventService(db)

    async def list_reviews(self, query: ReviewQuery) -> list[Review]:
        conditions = []
        if query.package_id is not None:
            conditions.append(Review.package_id == query.package_id)
        if query.event_id is not None:
            conditions.append(Review.event_id == query.event_id)

        stmt = select(Review)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(Review.created_at.desc(), Review.id.desc()).offset(query.offset).limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def create_review(self, request: CreateReviewRequest, user: User) -> Review:
        """
        Record a review and refresh the package's rating and review count.

        A review that cites one of the user's confirmed bookings for the same
        target is marked verified.

        Raises:
            NotFoundError: If the package or event does not exist
            ValidationError: If the cited booking is not the user's
        """
        target = target_from_ids(request.package_id, request.event_id)
        if isinstance(target, PackageTarget):
            await self.package_service.get_package_by_id_or_raise(target.id)
        else:
            await self.event_service.get_event_by_id_or_raise(target.id)

        verified = False
        if request.booking_id is not None:
            booking = await self.db.get(Booking, request.booking_id)
            if booking is None or booking.user_id != user.id:
                raise ValidationError(
                    detail="The referenced booking does not belong to you",
                    errors=[{"path": "bookingId", "message": "Unknown booking"}]
                )
            verified = booking.target == target and booking.status == BookingStatus.CONFIRMED.value

        review = Review(
            user_id=user.id,
            booking_id=request.booking_id,
            rating=request.rating,
            title=request.title,
            comment=request.comment,
            images=request.images,
            verified=verified,
        )
        review.target = target
        self.db.add(review)
        await self.db.flush()

        if isinstance(target, PackageTarget):
            await self._refresh_package_rating(target.id)

        await self.db.commit()
        await self.db.refresh(review)

        logger.info(
            "Review created",
            extra={
                "review_id": review.id,
                "user_id": user.id,
                "target_type": target.kind,
                "target_id": target.id,
                "rating": review.rating
            }
        )
        return review

    async def _refresh_package_rating(self, package_id: int) -> None:
        """Set the package rating to the mean review rating, one decimal place."""
        stmt = select(func.avg(Review.rating), func.count(Review.id)).where(Review.package_id == package_id)
        average, count = (await self.db.execute(stmt)).one()

        package = await self.db.get(TourPackage, package_id)
        package.review_count = count
        package.rating = (
            Decimal(str(average)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP) if count else Decimal("0.0")
        )
