"""Dashboard router - statistics for the caller's organization."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.core.deps import get_db, require_roles
from app.db.enums import ROLES_CAN_MANAGE_CASES
from app.schemas.auth import UserSession
from app.schemas.dashboard import DashboardStats
from app.services import dashboard_service

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_CASES))),
):
    """Case counts, pending sightings and recent sightings for the caller's organization."""
    if session.org_id is None:
        raise HTTPException(status_code=400, detail="No organization for this account")
    return dashboard_service.get_dashboard_stats(db, session.org_id)
