"""Pydantic schemas for photo matching."""

from datetime import date
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import CasePriority, CaseStatus, Gender, MatchConfidence


class PhotoMatch(BaseModel):
    """One candidate case for an uploaded photo."""

    case_id: UUID
    child_name: str
    case_number: str
    photo_url: str | None = None
    age: int | None = None
    gender: Gender | None = None
    last_seen_location: str
    last_seen_date: date
    priority: CasePriority
    status: CaseStatus
    similarity_score: float = Field(..., ge=0.0, le=1.0)
    similarity_display: str
    confidence_level: MatchConfidence


class PhotoMatchResponse(BaseModel):
    matches: list[PhotoMatch]
    message: str
