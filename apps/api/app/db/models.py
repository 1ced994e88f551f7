"""SQLAlchemy ORM models for organizations, accounts, cases and sightings."""

import uuid
from datetime import date, datetime
from typing import Any

from sqlalchemy import (
    Boolean, CheckConstraint, Date, ForeignKey, Index, Integer, String, Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, utcnow
from app.db.enums import (
    DEFAULT_CASE_PRIORITY, DEFAULT_CASE_STATUS, DEFAULT_SIGHTING_STATUS,
    DEFAULT_VERIFICATION_STATUS,
)


# =============================================================================
# Auth & Tenant Models
# =============================================================================

class Organization(Base):
    """
    An NGO, police department or government agency.

    Organizations own cases and employ users. New registrations start
    as pending and are promoted by an administrator.
    """
    __tablename__ = "organizations"
    __table_args__ = (
        UniqueConstraint("contact_email", name="uq_organizations_contact_email"),
        Index("idx_organizations_verification", "verification_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(255), nullable=False)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    address: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_VERIFICATION_STATUS.value,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    users: Mapped[list["User"]] = relationship(back_populates="organization")
    cases: Mapped[list["Case"]] = relationship(back_populates="organization")


class User(Base):
    """
    Platform account.

    A user belongs to at most one organization. Platform admins and
    public accounts may have none.
    """
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        Index("idx_users_org_id", "organization_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    organization_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
    )
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    organization: Mapped["Organization | None"] = relationship(back_populates="users")


# =============================================================================
# Cases
# =============================================================================

class Case(Base):
    """
    A missing child report owned by an organization.

    organization_id and created_by are written once at creation.
    Cases are never hard-deleted; they move to found/closed instead.
    """
    __tablename__ = "cases"
    __table_args__ = (
        UniqueConstraint("case_number", name="uq_case_number"),
        CheckConstraint("age IS NULL OR age >= 0", name="ck_cases_age_non_negative"),
        Index("idx_cases_status", "status"),
        Index("idx_cases_org_id", "organization_id"),
        Index("idx_cases_created_at", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    case_number: Mapped[str] = mapped_column(String(64), nullable=False)
    child_name: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    last_seen_location: Mapped[str] = mapped_column(String(500), nullable=False)
    last_seen_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_CASE_STATUS.value,
        nullable=False,
    )
    priority: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_CASE_PRIORITY.value,
        nullable=False,
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("organizations.id", ondelete="RESTRICT"),
        nullable=False,
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    photo_urls: Mapped[list[str]] = mapped_column(default=list, nullable=False)
    additional_info: Mapped[dict[str, Any]] = mapped_column(default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    organization: Mapped["Organization"] = relationship(back_populates="cases")
    sightings: Mapped[list["Sighting"]] = relationship(back_populates="case")
    photo_embeddings: Mapped[list["PhotoEmbedding"]] = relationship(back_populates="case")

    @property
    def organization_name(self) -> str | None:
        return self.organization.name if self.organization else None


class Sighting(Base):
    """
    A community report claiming to have seen the subject of a case.

    Submitted without an account; reviewed later by organization staff.
    """
    __tablename__ = "sightings"
    __table_args__ = (
        CheckConstraint(
            "confidence_level IS NULL OR (confidence_level >= 1 AND confidence_level <= 5)",
            name="ck_sightings_confidence_level",
        ),
        Index("idx_sightings_case_id", "case_id"),
        Index("idx_sightings_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    case_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cases.id", ondelete="RESTRICT"),
        nullable=False,
    )
    reporter_name: Mapped[str] = mapped_column(String(255), nullable=False)
    reporter_email: Mapped[str] = mapped_column(String(255), nullable=False)
    reporter_phone: Mapped[str] = mapped_column(String(50), nullable=False)
    sighting_location: Mapped[str] = mapped_column(String(500), nullable=False)
    sighting_date: Mapped[date] = mapped_column(Date, nullable=False)
    sighting_time: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    photo_urls: Mapped[list[str]] = mapped_column(default=list, nullable=False)
    confidence_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_SIGHTING_STATUS.value,
        nullable=False,
    )
    verified_by: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    case: Mapped["Case"] = relationship(back_populates="sightings")


class PhotoEmbedding(Base):
    """Feature vector for one case photo, reused by every match request."""
    __tablename__ = "photo_embeddings"
    __table_args__ = (
        Index("idx_photo_embeddings_case_id", "case_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    case_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("cases.id", ondelete="CASCADE"),
        nullable=False,
    )
    photo_url: Mapped[str] = mapped_column(String(500), nullable=False)
    embedding: Mapped[list[float]] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow, nullable=False)

    # Relationships
    case: Mapped["Case"] = relationship(back_populates="photo_embeddings")
