"""Translation, newsletter and contact query schemas."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from ..models.content import ContactQueryStatus, Priority
from .common import CamelModel, Pagination


class UpsertTranslationRequest(CamelModel):
    """Create or replace the translation of one field."""

    entity_type: str = Field(..., min_length=1, max_length=50, description="e.g. package or event")
    entity_id: int = Field(..., ge=1)
    language: str = Field(..., min_length=2, max_length=10, description="Language code")
    field_name: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., description="Translated text")


class Translation(CamelModel):
    id: int
    entity_type: str
    entity_id: int
    language: str
    field_name: str
    content: str
    updated_at: datetime


class NewsletterRequest(CamelModel):
    email: EmailStr


class NewsletterSubscription(CamelModel):
    id: int
    email: str
    subscribed: bool
    created_at: datetime


class CreateContactQueryRequest(CamelModel):
    """Public contact form submission."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=10000)


class UpdateContactQueryRequest(CamelModel):
    """Admin triage of a contact query."""

    status: Optional[ContactQueryStatus] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[str] = Field(None, description="User id of the assignee")


class ContactQuery(CamelModel):
    """Contact query response schema."""

    id: int
    name: str
    email: str
    phone: Optional[str] = None
    subject: str
    message: str
    status: ContactQueryStatus
    priority: Priority
    assigned_to: Optional[str] = None
    resolved_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class ContactQueryFilter(Pagination):
    """Filters accepted by the admin contact query listing."""

    status: Optional[ContactQueryStatus] = None
    priority: Optional[Priority] = None
    assigned_to: Optional[str] = None
