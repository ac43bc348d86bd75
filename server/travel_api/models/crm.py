"""CRM model definitions: customers, leads, opportunities, tasks and email campaigns."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, TimestampMixin
from .content import Priority


class CustomerStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    VIP = "vip"
    BLOCKED = "blocked"


class CustomerType(str, Enum):
    INDIVIDUAL = "individual"
    CORPORATE = "corporate"
    AGENT = "agent"


class LeadSource(str, Enum):
    WEBSITE = "website"
    REFERRAL = "referral"
    SOCIAL = "social"
    EMAIL = "email"
    PHONE = "phone"
    WALK_IN = "walk_in"
    OTHER = "other"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    WON = "won"
    LOST = "lost"


class ActivityType(str, Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"
    STATUS_CHANGE = "status_change"


class OpportunityStage(str, Enum):
    PROSPECTING = "prospecting"
    QUALIFICATION = "qualification"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED_WON = "closed_won"
    CLOSED_LOST = "closed_lost"


class TemplateCategory(str, Enum):
    BOOKING = "booking"
    MARKETING = "marketing"
    FOLLOW_UP = "follow_up"
    GENERAL = "general"


class CampaignStatus(str, Enum):
    DRAFT = "draft"
    SCHEDULED = "scheduled"
    SENT = "sent"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class TaskType(str, Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    FOLLOW_UP = "follow_up"
    OTHER = "other"


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RelatedEntity(str, Enum):
    LEAD = "lead"
    CUSTOMER = "customer"
    OPPORTUNITY = "opportunity"
    BOOKING = "booking"


def _assignee():
    return mapped_column(String(255), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)


class Customer(TimestampMixin, Base):
    """Customer record, optionally linked to a user account."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    company: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CustomerStatus.ACTIVE.value)
    customer_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=CustomerType.INDIVIDUAL.value
    )
    total_spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    total_bookings: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    tags: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[str | None] = _assignee()

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, email='{self.email}', status={self.status})>"


class Lead(TimestampMixin, Base):
    """Sales lead captured before a customer exists."""

    __tablename__ = "leads"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    source: Mapped[str] = mapped_column(String(20), nullable=False, default=LeadSource.WEBSITE.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=LeadStatus.NEW.value, index=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=Priority.NORMAL.value)
    budget: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    destination: Mapped[str | None] = mapped_column(String(255), nullable=True)
    travel_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    group_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[str | None] = _assignee()
    next_follow_up: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    converted_customer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, name='{self.name}', status={self.status})>"


class LeadActivity(TimestampMixin, Base):
    """Logged touchpoint on a lead."""

    __tablename__ = "lead_activities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lead_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    performed_by: Mapped[str | None] = _assignee()

    def __repr__(self) -> str:
        return f"<LeadActivity(id={self.id}, lead_id={self.lead_id}, type={self.type})>"


class Opportunity(TimestampMixin, Base):
    """Potential sale moving through the pipeline."""

    __tablename__ = "opportunities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=True,
        index=True
    )
    lead_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("leads.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    package_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("tour_packages.id", ondelete="SET NULL"),
        nullable=True
    )
    stage: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=OpportunityStage.PROSPECTING.value,
        index=True
    )
    probability: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    expected_value: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    expected_close_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_to: Mapped[str | None] = _assignee()

    __table_args__ = (
        CheckConstraint("probability >= 0 AND probability <= 100", name="ck_opportunity_probability"),
    )

    def __repr__(self) -> str:
        return f"<Opportunity(id={self.id}, name='{self.name}', stage={self.stage})>"


class CustomerInteraction(TimestampMixin, Base):
    """Logged touchpoint on a customer."""

    __tablename__ = "customer_interactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    channel: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    performed_by: Mapped[str | None] = _assignee()

    def __repr__(self) -> str:
        return f"<CustomerInteraction(id={self.id}, customer_id={self.customer_id}, type={self.type})>"


class CustomerPreference(TimestampMixin, Base):
    """Travel and communication preferences of a customer."""

    __tablename__ = "customer_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    customer_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    preferred_destinations: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    travel_style: Mapped[str | None] = mapped_column(String(50), nullable=True)
    budget_range: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dietary: Mapped[str | None] = mapped_column(String(255), nullable=True)
    communication_channel: Mapped[str] = mapped_column(String(20), nullable=False, default="email")
    marketing_opt_in: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return f"<CustomerPreference(customer_id={self.customer_id})>"


class EmailTemplate(TimestampMixin, Base):
    """Reusable email whose subject and body are Jinja2 templates."""

    __tablename__ = "email_templates"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(String(20), nullable=False, default=TemplateCategory.GENERAL.value)
    variables: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_by: Mapped[str | None] = _assignee()

    def __repr__(self) -> str:
        return f"<EmailTemplate(id={self.id}, name='{self.name}')>"


class EmailCampaign(TimestampMixin, Base):
    """Bulk send of an email template."""

    __tablename__ = "email_campaigns"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    template_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("email_templates.id", ondelete="SET NULL"),
        nullable=True
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CampaignStatus.DRAFT.value, index=True)
    scheduled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    recipients_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    opened_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    clicked_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_by: Mapped[str | None] = _assignee()

    def __repr__(self) -> str:
        return f"<EmailCampaign(id={self.id}, name='{self.name}', status={self.status})>"


class Task(TimestampMixin, Base):
    """Follow-up task assigned to a staff member."""

    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskType.FOLLOW_UP.value)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, default=Priority.NORMAL.value)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=TaskStatus.PENDING.value, index=True)
    due_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    related_to: Mapped[str | None] = mapped_column(String(20), nullable=True)
    related_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    assigned_to: Mapped[str | None] = _assignee()
    created_by: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, title='{self.title}', status={self.status})>"
