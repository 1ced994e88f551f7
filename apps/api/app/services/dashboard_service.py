"""Dashboard service - organization statistics and recent activity."""

from uuid import UUID

from sqlalchemy.orm import Session

from app.schemas.dashboard import DashboardStats
from app.schemas.sighting import SightingRead
from app.services import case_service, sighting_service


def get_dashboard_stats(db: Session, org_id: UUID) -> DashboardStats:
    """Case counts, pending review queue and latest sightings for one organization."""
    counts = case_service.get_case_stats(db, org_id)
    recent = sighting_service.list_recent_sightings_for_org(db, org_id)
    return DashboardStats(
        **counts,
        pending_sightings=sighting_service.count_pending_sightings_for_org(db, org_id),
        recent_sightings=[SightingRead.model_validate(s) for s in recent],
    )
