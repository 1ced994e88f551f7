"""Dashboard schemas."""

from pydantic import BaseModel

from app.schemas.sighting import SightingRead


class DashboardStats(BaseModel):
    """Case counts and latest sightings for the caller's organization."""

    total_cases: int
    active_cases: int
    found_cases: int
    closed_cases: int
    urgent_cases: int
    pending_sightings: int
    recent_sightings: list[SightingRead]
