"""Translations, newsletter subscriptions and contact queries."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.exceptions import NotFoundError
from ..models.content import ContactQuery, ContactQueryStatus, Newsletter, Translation
from ..schemas.content import (
    ContactQueryFilter,
    CreateContactQueryRequest,
    UpdateContactQueryRequest,
    UpsertTranslationRequest,
)

logger = logging.getLogger(__name__)


class TranslationService:
    """Service for localized content."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_translations(self, entity_type: str, entity_id: int, language: str) -> dict[str, str]:
        """Map of field name to translated content for one entity and language."""
        stmt = select(Translation).where(
            Translation.entity_type == entity_type,
            Translation.entity_id == entity_id,
            Translation.language == language,
        )
        result = await self.db.execute(stmt)
        return {row.field_name: row.content for row in result.scalars()}

    async def upsert_translation(self, request: UpsertTranslationRequest) -> Translation:
        """Create the translation or replace its content if it already exists."""
        stmt = select(Translation).where(
            Translation.entity_type == request.entity_type,
            Translation.entity_id == request.entity_id,
            Translation.language == request.language,
            Translation.field_name == request.field_name,
        )
        translation = (await self.db.execute(stmt)).scalar_one_or_none()

        if translation is None:
            translation = Translation(**request.model_dump())
            self.db.add(translation)
        else:
            translation.content = request.content

        await self.db.commit()
        await self.db.refresh(translation)

        logger.info(
            "Translation saved",
            extra={
                "entity_type": request.entity_type,
                "entity_id": request.entity_id,
                "language": request.language,
                "field_name": request.field_name
            }
        )
        return translation


class NewsletterService:
    """Service for newsletter subscriptions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_subscription(self, email: str) -> Optional[Newsletter]:
        result = await self.db.execute(select(Newsletter).where(Newsletter.email == email.lower()))
        return result.scalar_one_or_none()

    async def subscribe(self, email: str) -> Newsletter:
        """Subscribe ``email``; re-subscribes a previously unsubscribed address."""
        subscription = await self.get_subscription(email)
        if subscription is None:
            subscription = Newsletter(email=email.lower(), subscribed=True)
            self.db.add(subscription)
        else:
            subscription.subscribed = True

        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent subscribe of the same address
            await self.db.rollback()
            subscription = await self.get_subscription(email)
            subscription.subscribed = True
            await self.db.commit()

        await self.db.refresh(subscription)
        logger.info("Newsletter subscription saved", extra={"subscription_id": subscription.id})
        return subscription

    async def unsubscribe(self, email: str) -> Newsletter:
        """
        Raises:
            NotFoundError: If the address never subscribed
        """
        subscription = await self.get_subscription(email)
        if subscription is None:
            raise NotFoundError(resource_type="newsletter subscription", detail="Email is not subscribed")

        subscription.subscribed = False
        await self.db.commit()
        await self.db.refresh(subscription)
        logger.info("Newsletter unsubscribed", extra={"subscription_id": subscription.id})
        return subscription


class ContactQueryService:
    """Service for contact form submissions and their triage."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_query(self, request: CreateContactQueryRequest) -> ContactQuery:
        query = ContactQuery(
            name=request.name,
            email=str(request.email),
            phone=request.phone,
            subject=request.subject,
            message=request.message,
        )
        self.db.add(query)
        await self.db.commit()
        await self.db.refresh(query)

        logger.info(
            "Contact query received",
            extra={"query_id": query.id, "subject": query.subject}
        )
        return query

    async def get_query_by_id_or_raise(self, query_id: int) -> ContactQuery:
        query = await self.db.get(ContactQuery, query_id)
        if not query:
            raise NotFoundError(resource_type="contact query", resource_id=str(query_id))
        return query

    async def list_queries(self, filters: ContactQueryFilter) -> list[ContactQuery]:
        conditions = []
        if filters.status is not None:
            conditions.append(ContactQuery.status == filters.status.value)
        if filters.priority is not None:
            conditions.append(ContactQuery.priority == filters.priority.value)
        if filters.assigned_to is not None:
            conditions.append(ContactQuery.assigned_to == filters.assigned_to)

        stmt = select(ContactQuery)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(ContactQuery.created_at.desc(), ContactQuery.id.desc())
        stmt = stmt.offset(filters.offset).limit(filters.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def update_query(self, query_id: int, request: UpdateContactQueryRequest) -> ContactQuery:
        """Triage a query; moving it to resolved or closed stamps ``resolved_at``."""
        query = await self.get_query_by_id_or_raise(query_id)
        changes = request.model_dump(exclude_unset=True)

        for field, value in changes.items():
            setattr(query, field, value.value if hasattr(value, "value") else value)

        if "status" in changes:
            closed = query.status in (ContactQueryStatus.RESOLVED.value, ContactQueryStatus.CLOSED.value)
            query.resolved_at = (query.resolved_at or datetime.now(timezone.utc)) if closed else None

        await self.db.commit()
        await self.db.refresh(query)

        logger.info(
            "Contact query updated",
            extra={"query_id": query_id, "changes": list(changes)}
        )
        return query

    async def delete_query(self, query_id: int) -> None:
        query = await self.get_query_by_id_or_raise(query_id)
        await self.db.delete(query)
        await self.db.commit()
        logger.info("Contact query deleted", extra={"query_id": query_id})
