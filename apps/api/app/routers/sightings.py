"""Sightings router - anonymous sighting submission."""

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.core.errors import StorageError, ValidationError
from app.core.rate_limit import PUBLIC_LIMIT, limiter
from app.schemas.sighting import SightingCreate, SightingPublicRead
from app.services import sighting_service

router = APIRouter(prefix="/sightings", tags=["Sightings"])


@router.post("", status_code=201, response_model=SightingPublicRead)
@limiter.limit(PUBLIC_LIMIT)
def create_sighting(
    request: Request,
    body: SightingCreate,
    db: Session = Depends(get_db),
):
    """
    Report a sighting. No account needed.

    The response echoes the report without the reporter's contact details.
    """
    try:
        sighting = sighting_service.create_sighting(db, body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create sighting")
    return SightingPublicRead.model_validate(sighting)
