"""Translation, newsletter and contact query model definitions."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from ..core.database import Base, TimestampMixin


class ContactQueryStatus(str, Enum):
    """Contact query workflow status."""
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class Priority(str, Enum):
    """Priority shared by contact queries, leads and tasks."""
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class Translation(TimestampMixin, Base):
    """Localized value of one field of one entity."""

    __tablename__ = "translations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[int] = mapped_column(Integer, nullable=False)
    language: Mapped[str] = mapped_column(String(10), nullable=False)
    field_name: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "entity_type", "entity_id", "language", "field_name",
            name="uq_translation_entity_field"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<Translation({self.entity_type}:{self.entity_id} "
            f"{self.language}.{self.field_name})>"
        )


class Newsletter(TimestampMixin, Base):
    """Newsletter subscription."""

    __tablename__ = "newsletters"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    subscribed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Newsletter(email='{self.email}', subscribed={self.subscribed})>"


class ContactQuery(TimestampMixin, Base):
    """Message submitted through the public contact form."""

    __tablename__ = "contact_queries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ContactQueryStatus.NEW.value,
        index=True
    )
    priority: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=Priority.NORMAL.value,
        index=True
    )
    assigned_to: Mapped[str | None] = mapped_column(
        String(255),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<ContactQuery(id={self.id}, subject='{self.subject}', status={self.status})>"
