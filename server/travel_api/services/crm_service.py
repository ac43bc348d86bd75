"""CRM services: generic CRUD over CRM tables plus lead, task and template workflows."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from jinja2 import TemplateError
from jinja2.sandbox import SandboxedEnvironment
from pydantic import BaseModel
from sqlalchemy import and_, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import Base
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.crm import (
    Customer,
    CustomerInteraction,
    CustomerPreference,
    CustomerType,
    EmailCampaign,
    EmailTemplate,
    Lead,
    LeadActivity,
    LeadStatus,
    Opportunity,
    Task,
    TaskStatus,
)
from ..models.user import User
from ..schemas.common import Pagination

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

PAGING_FIELDS = {"limit", "offset"}
ACTOR_COLUMNS = ("created_by", "performed_by")

template_sandbox = SandboxedEnvironment(autoescape=True)


def _plain(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class CrudService(Generic[ModelT]):
    """
    Create/read/update/delete for one CRM table.

    List filters come from the entity's query-options model: every set field
    named in ``equality_filters`` becomes ``column == value``; subclasses add
    anything else in ``extra_conditions``.
    """

    model: type[ModelT]
    resource_type: str = "resource"
    equality_filters: tuple[str, ...] = ()

    def __init__(self, db: AsyncSession):
        self.db = db

    def extra_conditions(self, query: Pagination) -> list:
        return []

    async def get_by_id(self, item_id: int) -> Optional[ModelT]:
        return await self.db.get(self.model, item_id, populate_existing=True)

    async def get_by_id_or_raise(self, item_id: int) -> ModelT:
        item = await self.get_by_id(item_id)
        if item is None:
            raise NotFoundError(resource_type=self.resource_type, resource_id=str(item_id))
        return item

    async def list_items(self, query: Pagination) -> list[ModelT]:
        values = query.model_dump(exclude_none=True, exclude=PAGING_FIELDS)
        conditions = [
            getattr(self.model, field) == _plain(value)
            for field, value in values.items()
            if field in self.equality_filters
        ]
        conditions.extend(self.extra_conditions(query))

        stmt = select(self.model)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(self.model.created_at.desc(), self.model.id.desc())
        stmt = stmt.offset(query.offset).limit(query.limit)

        result = await self.db.execute(stmt)
        return list(result.scalars())

    async def _commit(self, item: ModelT) -> ModelT:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                "CRM write rejected by constraint",
                extra={"resource_type": self.resource_type, "error": str(e.orig)}
            )
            raise ConflictError(detail=f"The {self.resource_type} conflicts with an existing record")
        await self.db.refresh(item)
        return item

    async def create(self, request: BaseModel, actor: Optional[User] = None) -> ModelT:
        data = {field: _plain(value) for field, value in request.model_dump().items()}
        for column in ACTOR_COLUMNS:
            if actor is not None and hasattr(self.model, column):
                data.setdefault(column, actor.id)

        item = self.model(**data)
        self.db.add(item)
        item = await self._commit(item)

        logger.info(
            "CRM record created",
            extra={"resource_type": self.resource_type, "id": item.id, "actor": actor.id if actor else None}
        )
        return item

    async def update(self, item_id: int, request: BaseModel) -> ModelT:
        item = await self.get_by_id_or_raise(item_id)
        changes = request.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(item, field, _plain(value))
        item = await self._commit(item)

        logger.info(
            "CRM record updated",
            extra={"resource_type": self.resource_type, "id": item_id, "changes": list(changes)}
        )
        return item

    async def delete(self, item_id: int) -> None:
        item = await self.get_by_id_or_raise(item_id)
        await self.db.delete(item)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictError(detail=f"The {self.resource_type} is still referenced by other records")
        logger.info("CRM record deleted", extra={"resource_type": self.resource_type, "id": item_id})


class CustomerService(CrudService[Customer]):
    model = Customer
    resource_type = "customer"
    equality_filters = ("status", "customer_type", "assigned_to")

    def extra_conditions(self, query) -> list:
        if not query.search:
            return []
        pattern = f"%{query.search}%"
        return [
            or_(
                Customer.first_name.ilike(pattern),
                Customer.last_name.ilike(pattern),
                Customer.email.ilike(pattern),
                Customer.company.ilike(pattern),
            )
        ]


class LeadService(CrudService[Lead]):
    model = Lead
    resource_type = "lead"
    equality_filters = ("status", "source", "priority", "assigned_to")

    def extra_conditions(self, query) -> list:
        if not query.search:
            return []
        pattern = f"%{query.search}%"
        return [or_(Lead.name.ilike(pattern), Lead.email.ilike(pattern), Lead.destination.ilike(pattern))]

    async def convert(self, lead_id: int, actor: User) -> tuple[Lead, Customer]:
        """
        Turn a lead into a customer and mark the lead won.

        Raises:
            NotFoundError: If the lead does not exist
            ConflictError: If the lead was already converted
            ValidationError: If the lead has no email address
        """
        lead = await self.get_by_id_or_raise(lead_id)
        if lead.converted_customer_id is not None:
            raise ConflictError(
                detail=f"Lead {lead_id} was already converted",
                conflicting_resource={"customer_id": lead.converted_customer_id}
            )
        if not lead.email:
            raise ValidationError(
                detail="A lead needs an email address to become a customer",
                errors=[{"path": "email", "message": "Email is required"}]
            )

        first_name, _, last_name = lead.name.partition(" ")
        customer = Customer(
            email=lead.email,
            first_name=first_name,
            last_name=last_name or None,
            phone=lead.phone,
            customer_type=CustomerType.INDIVIDUAL.value,
            notes=lead.notes,
            assigned_to=lead.assigned_to or actor.id,
            tags=[],
        )
        self.db.add(customer)
        await self.db.flush()

        lead.converted_customer_id = customer.id
        lead.status = LeadStatus.WON.value
        self.db.add(
            LeadActivity(
                lead_id=lead.id,
                type="status_change",
                description=f"Converted to customer #{customer.id}",
                performed_by=actor.id,
            )
        )
        await self.db.commit()
        await self.db.refresh(lead)
        await self.db.refresh(customer)

        logger.info(
            "Lead converted",
            extra={"lead_id": lead_id, "customer_id": customer.id, "actor": actor.id}
        )
        return lead, customer


class LeadActivityService(CrudService[LeadActivity]):
    model = LeadActivity
    resource_type = "lead activity"
    equality_filters = ("lead_id", "type")


class OpportunityService(CrudService[Opportunity]):
    model = Opportunity
    resource_type = "opportunity"
    equality_filters = ("stage", "customer_id", "lead_id", "assigned_to")


class CustomerInteractionService(CrudService[CustomerInteraction]):
    model = CustomerInteraction
    resource_type = "customer interaction"
    equality_filters = ("customer_id", "type")


class CustomerPreferenceService(CrudService[CustomerPreference]):
    model = CustomerPreference
    resource_type = "customer preference"
    equality_filters = ("customer_id", "marketing_opt_in")


class EmailTemplateService(CrudService[EmailTemplate]):
    model = EmailTemplate
    resource_type = "email template"
    equality_filters = ("category", "active")

    async def preview(self, template_id: int, variables: dict[str, Any]) -> tuple[str, str]:
        """
        Render a stored template's subject and body with ``variables``.

        Templates are admin-authored, so they render in a sandbox.

        Raises:
            ValidationError: If the template does not compile or render
        """
        template = await self.get_by_id_or_raise(template_id)
        try:
            subject = template_sandbox.from_string(template.subject).render(**variables)
            body = template_sandbox.from_string(template.body).render(**variables)
        except TemplateError as e:
            raise ValidationError(
                detail=f"Template could not be rendered: {e}",
                errors=[{"path": "body", "message": str(e)}]
            )
        return subject, body


class EmailCampaignService(CrudService[EmailCampaign]):
    model = EmailCampaign
    resource_type = "email campaign"
    equality_filters = ("status", "template_id")


class TaskService(CrudService[Task]):
    model = Task
    resource_type = "task"
    equality_filters = ("status", "priority", "type", "assigned_to", "related_to", "related_id")

    def extra_conditions(self, query) -> list:
        if query.due_before is None:
            return []
        return [Task.due_date <= query.due_before]

    async def update(self, item_id: int, request: BaseModel) -> Task:
        task = await super().update(item_id, request)
        if task.status == TaskStatus.COMPLETED.value and task.completed_at is None:
            return await self.complete(item_id)
        return task

    async def complete(self, task_id: int) -> Task:
        """Mark a task completed; completing twice keeps the first timestamp."""
        task = await self.get_by_id_or_raise(task_id)
        task.status = TaskStatus.COMPLETED.value
        task.completed_at = task.completed_at or datetime.now(timezone.utc)
        task = await self._commit(task)

        logger.info("Task completed", extra={"task_id": task_id})
        return task
