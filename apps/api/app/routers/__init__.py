"""API routers."""

from app.routers.auth import router as auth_router
from app.routers.cases import router as cases_router
from app.routers.dashboard import router as dashboard_router
from app.routers.organizations import router as organizations_router
from app.routers.photo_match import router as photo_match_router
from app.routers.sightings import router as sightings_router

__all__ = [
    "auth_router",
    "cases_router",
    "dashboard_router",
    "organizations_router",
    "photo_match_router",
    "sightings_router",
]
