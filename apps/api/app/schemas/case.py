"""Pydantic schemas for cases."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.db.enums import CasePriority, CaseStatus, Gender


def blank_to_none(value):
    """Treat empty form values as absent."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class CaseCreate(BaseModel):
    """
    Request schema for creating a case.

    child_name, description, last_seen_location and last_seen_date are
    required; case_service reports which one is missing.
    organization_id and created_by come from the session, never the body.
    """

    child_name: str | None = Field(None, max_length=255)
    age: int | None = None
    gender: str | None = None
    description: str | None = None
    last_seen_location: str | None = Field(None, max_length=500)
    last_seen_date: date | None = None
    priority: str | None = None
    additional_info: dict[str, str] | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_strings_to_none(cls, v):
        return blank_to_none(v)


class CaseRead(BaseModel):
    """Full case response for detail views."""

    id: UUID
    case_number: str
    child_name: str
    age: int | None = None
    gender: Gender | None = None
    description: str | None = None
    last_seen_location: str
    last_seen_date: date
    status: CaseStatus
    priority: CasePriority
    organization_id: UUID
    organization_name: str | None = None
    created_by: UUID
    photo_urls: list[str] = []
    additional_info: dict[str, str] = {}
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CaseListResponse(BaseModel):
    items: list[CaseRead]
    total: int
