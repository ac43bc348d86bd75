"""CRM Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, Field

from ..models.content import Priority
from ..models.crm import (
    ActivityType,
    CampaignStatus,
    CustomerStatus,
    CustomerType,
    LeadSource,
    LeadStatus,
    OpportunityStage,
    RelatedEntity,
    TaskStatus,
    TaskType,
    TemplateCategory,
)
from .common import CamelModel, Pagination


# Customers

class CustomerCreate(CamelModel):
    user_id: Optional[str] = None
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=255)
    status: CustomerStatus = CustomerStatus.ACTIVE
    customer_type: CustomerType = CustomerType.INDIVIDUAL
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None
    assigned_to: Optional[str] = None


class CustomerUpdate(CamelModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    company: Optional[str] = Field(None, max_length=255)
    status: Optional[CustomerStatus] = None
    customer_type: Optional[CustomerType] = None
    total_spent: Optional[Decimal] = Field(None, ge=0)
    total_bookings: Optional[int] = Field(None, ge=0)
    tags: Optional[List[str]] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None


class Customer(CamelModel):
    id: int
    user_id: Optional[str] = None
    email: str
    first_name: str
    last_name: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    status: CustomerStatus
    customer_type: CustomerType
    total_spent: Decimal
    total_bookings: int
    tags: List[str]
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class CustomerQuery(Pagination):
    status: Optional[CustomerStatus] = None
    customer_type: Optional[CustomerType] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = Field(None, min_length=1, description="Matches name, email or company")


# Leads

class LeadCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    source: LeadSource = LeadSource.WEBSITE
    status: LeadStatus = LeadStatus.NEW
    priority: Priority = Priority.NORMAL
    budget: Optional[Decimal] = Field(None, ge=0)
    destination: Optional[str] = Field(None, max_length=255)
    travel_date: Optional[date] = None
    group_size: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    next_follow_up: Optional[datetime] = None


class LeadUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    source: Optional[LeadSource] = None
    status: Optional[LeadStatus] = None
    priority: Optional[Priority] = None
    budget: Optional[Decimal] = Field(None, ge=0)
    destination: Optional[str] = Field(None, max_length=255)
    travel_date: Optional[date] = None
    group_size: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    next_follow_up: Optional[datetime] = None


class Lead(CamelModel):
    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    source: LeadSource
    status: LeadStatus
    priority: Priority
    budget: Optional[Decimal] = None
    destination: Optional[str] = None
    travel_date: Optional[date] = None
    group_size: Optional[int] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    next_follow_up: Optional[datetime] = None
    converted_customer_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class LeadQuery(Pagination):
    status: Optional[LeadStatus] = None
    source: Optional[LeadSource] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[str] = None
    search: Optional[str] = Field(None, min_length=1, description="Matches name, email or destination")


class LeadConversion(CamelModel):
    """Result of converting a lead into a customer."""

    lead: Lead
    customer: Customer


# Lead activities

class LeadActivityCreate(CamelModel):
    lead_id: int = Field(..., ge=1)
    type: ActivityType
    description: str = Field(..., min_length=1)


class LeadActivityUpdate(CamelModel):
    type: Optional[ActivityType] = None
    description: Optional[str] = Field(None, min_length=1)


class LeadActivity(CamelModel):
    id: int
    lead_id: int
    type: ActivityType
    description: str
    performed_by: Optional[str] = None
    created_at: datetime


class LeadActivityQuery(Pagination):
    lead_id: Optional[int] = Field(None, ge=1)
    type: Optional[ActivityType] = None


# Opportunities

class OpportunityCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    customer_id: Optional[int] = Field(None, ge=1)
    lead_id: Optional[int] = Field(None, ge=1)
    package_id: Optional[int] = Field(None, ge=1)
    stage: OpportunityStage = OpportunityStage.PROSPECTING
    probability: int = Field(0, ge=0, le=100)
    expected_value: Optional[Decimal] = Field(None, ge=0)
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None


class OpportunityUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    customer_id: Optional[int] = Field(None, ge=1)
    lead_id: Optional[int] = Field(None, ge=1)
    package_id: Optional[int] = Field(None, ge=1)
    stage: Optional[OpportunityStage] = None
    probability: Optional[int] = Field(None, ge=0, le=100)
    expected_value: Optional[Decimal] = Field(None, ge=0)
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None


class Opportunity(CamelModel):
    id: int
    name: str
    customer_id: Optional[int] = None
    lead_id: Optional[int] = None
    package_id: Optional[int] = None
    stage: OpportunityStage
    probability: int
    expected_value: Optional[Decimal] = None
    expected_close_date: Optional[date] = None
    notes: Optional[str] = None
    assigned_to: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OpportunityQuery(Pagination):
    stage: Optional[OpportunityStage] = None
    customer_id: Optional[int] = Field(None, ge=1)
    lead_id: Optional[int] = Field(None, ge=1)
    assigned_to: Optional[str] = None


# Customer interactions

class CustomerInteractionCreate(CamelModel):
    customer_id: int = Field(..., ge=1)
    type: ActivityType
    channel: Optional[str] = Field(None, max_length=50)
    subject: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class CustomerInteractionUpdate(CamelModel):
    type: Optional[ActivityType] = None
    channel: Optional[str] = Field(None, max_length=50)
    subject: Optional[str] = Field(None, max_length=255)
    notes: Optional[str] = None


class CustomerInteraction(CamelModel):
    id: int
    customer_id: int
    type: ActivityType
    channel: Optional[str] = None
    subject: Optional[str] = None
    notes: Optional[str] = None
    performed_by: Optional[str] = None
    created_at: datetime


class CustomerInteractionQuery(Pagination):
    customer_id: Optional[int] = Field(None, ge=1)
    type: Optional[ActivityType] = None


# Customer preferences

class CustomerPreferenceCreate(CamelModel):
    customer_id: int = Field(..., ge=1)
    preferred_destinations: List[str] = Field(default_factory=list)
    travel_style: Optional[str] = Field(None, max_length=50)
    budget_range: Optional[str] = Field(None, max_length=50)
    dietary: Optional[str] = Field(None, max_length=255)
    communication_channel: str = Field("email", max_length=20)
    marketing_opt_in: bool = False


class CustomerPreferenceUpdate(CamelModel):
    preferred_destinations: Optional[List[str]] = None
    travel_style: Optional[str] = Field(None, max_length=50)
    budget_range: Optional[str] = Field(None, max_length=50)
    dietary: Optional[str] = Field(None, max_length=255)
    communication_channel: Optional[str] = Field(None, max_length=20)
    marketing_opt_in: Optional[bool] = None


class CustomerPreference(CamelModel):
    id: int
    customer_id: int
    preferred_destinations: List[str]
    travel_style: Optional[str] = None
    budget_range: Optional[str] = None
    dietary: Optional[str] = None
    communication_channel: str
    marketing_opt_in: bool
    updated_at: datetime


class CustomerPreferenceQuery(Pagination):
    customer_id: Optional[int] = Field(None, ge=1)
    marketing_opt_in: Optional[bool] = None


# Email templates

class EmailTemplateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    subject: str = Field(..., min_length=1, max_length=255, description="Jinja2 template")
    body: str = Field(..., min_length=1, description="Jinja2 template")
    category: TemplateCategory = TemplateCategory.GENERAL
    variables: List[str] = Field(default_factory=list, description="Variables the template expects")
    active: bool = True


class EmailTemplateUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    subject: Optional[str] = Field(None, min_length=1, max_length=255)
    body: Optional[str] = Field(None, min_length=1)
    category: Optional[TemplateCategory] = None
    variables: Optional[List[str]] = None
    active: Optional[bool] = None


class EmailTemplate(CamelModel):
    id: int
    name: str
    subject: str
    body: str
    category: TemplateCategory
    variables: List[str]
    active: bool
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EmailTemplateQuery(Pagination):
    category: Optional[TemplateCategory] = None
    active: Optional[bool] = None


class TemplatePreviewRequest(CamelModel):
    variables: Dict[str, Any] = Field(default_factory=dict, description="Values substituted into the template")


class TemplatePreview(CamelModel):
    subject: str
    body: str


# Email campaigns

class EmailCampaignCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    template_id: Optional[int] = Field(None, ge=1)
    status: CampaignStatus = CampaignStatus.DRAFT
    scheduled_at: Optional[datetime] = None
    recipients_count: int = Field(0, ge=0)


class EmailCampaignUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    template_id: Optional[int] = Field(None, ge=1)
    status: Optional[CampaignStatus] = None
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    recipients_count: Optional[int] = Field(None, ge=0)
    opened_count: Optional[int] = Field(None, ge=0)
    clicked_count: Optional[int] = Field(None, ge=0)


class EmailCampaign(CamelModel):
    id: int
    name: str
    template_id: Optional[int] = None
    status: CampaignStatus
    scheduled_at: Optional[datetime] = None
    sent_at: Optional[datetime] = None
    recipients_count: int
    opened_count: int
    clicked_count: int
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class EmailCampaignQuery(Pagination):
    status: Optional[CampaignStatus] = None
    template_id: Optional[int] = Field(None, ge=1)


# Tasks

class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    type: TaskType = TaskType.FOLLOW_UP
    priority: Priority = Priority.NORMAL
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[datetime] = None
    related_to: Optional[RelatedEntity] = None
    related_id: Optional[int] = Field(None, ge=1)
    assigned_to: Optional[str] = None


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    type: Optional[TaskType] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[datetime] = None
    related_to: Optional[RelatedEntity] = None
    related_id: Optional[int] = Field(None, ge=1)
    assigned_to: Optional[str] = None


class Task(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    type: TaskType
    priority: Priority
    status: TaskStatus
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    related_to: Optional[RelatedEntity] = None
    related_id: Optional[int] = None
    assigned_to: Optional[str] = None
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class TaskQuery(Pagination):
    status: Optional[TaskStatus] = None
    priority: Optional[Priority] = None
    type: Optional[TaskType] = None
    assigned_to: Optional[str] = None
    related_to: Optional[RelatedEntity] = None
    related_id: Optional[int] = Field(None, ge=1)
    due_before: Optional[datetime] = None
