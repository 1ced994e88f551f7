"""Pydantic schemas for sightings."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, StrictInt, field_validator

from app.db.enums import SightingStatus
from app.schemas.case import blank_to_none


class SightingCreate(BaseModel):
    """
    Public sighting submission.

    All fields except sighting_time and confidence_level are required;
    sighting_service validates them and parses confidence_level.
    """

    case_id: str | None = None
    reporter_name: str | None = Field(None, max_length=255)
    reporter_email: str | None = Field(None, max_length=255)
    reporter_phone: str | None = Field(None, max_length=50)
    sighting_location: str | None = Field(None, max_length=500)
    sighting_date: date | None = None
    sighting_time: str | None = Field(None, max_length=20)
    description: str | None = None
    # Strict so JSON booleans reach sighting_service unconverted and are rejected there
    confidence_level: StrictInt | StrictBool | str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_strings_to_none(cls, v):
        return blank_to_none(v)


class SightingPublicRead(BaseModel):
    """Sighting as shown on public case pages (no reporter contact details)."""

    id: UUID
    case_id: UUID
    sighting_location: str
    sighting_date: date
    sighting_time: str | None = None
    description: str
    confidence_level: int | None = None
    status: SightingStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class SightingRead(SightingPublicRead):
    """Full sighting for the owning organization's staff."""

    reporter_name: str
    reporter_email: str
    reporter_phone: str
    photo_urls: list[str] = []
    verified_by: UUID | None = None
    updated_at: datetime
