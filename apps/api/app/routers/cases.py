"""Cases router - public case browsing and staff case management."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from app.core.case_access import can_modify_case, check_case_modify_access
from app.core.config import settings
from app.core.deps import (
    get_db,
    get_optional_session,
    require_csrf_header,
    require_roles,
)
from app.core.errors import StorageError, ValidationError
from app.db.enums import ROLES_CAN_MANAGE_CASES
from app.db.models import Case
from app.schemas.auth import UserSession
from app.schemas.case import CaseCreate, CaseListResponse, CaseRead
from app.schemas.sighting import SightingPublicRead, SightingRead
from app.services import case_service, sighting_service
from app.utils.file_upload import content_length_exceeds_limit, read_upload_bounded

router = APIRouter(prefix="/cases", tags=["Cases"])


def _get_case_or_404(db: Session, case_id: str) -> Case:
    case = case_service.get_case_by_id(db, case_id)
    if not case:
        raise HTTPException(status_code=404, detail="Case not found")
    return case


# =============================================================================
# Public reads
# =============================================================================

@router.get("", response_model=CaseListResponse)
def list_cases(
    status: str | None = None,
    organization_id: str | None = None,
    limit: int | None = None,
    db: Session = Depends(get_db),
):
    """
    List cases, newest first.

    Filters combine with AND. At most CASE_LIST_MAX_LIMIT rows are returned.
    """
    cases = case_service.list_cases(
        db,
        status=status,
        organization_id=organization_id,
        limit=limit,
    )
    return CaseListResponse(
        items=[CaseRead.model_validate(c) for c in cases],
        total=len(cases),
    )


@router.get("/{case_id}", response_model=CaseRead)
def get_case(case_id: str, db: Session = Depends(get_db)):
    """Get case detail."""
    return CaseRead.model_validate(_get_case_or_404(db, case_id))


@router.get("/{case_id}/sightings", response_model=None)
def list_case_sightings(
    case_id: str,
    db: Session = Depends(get_db),
    session: UserSession | None = Depends(get_optional_session),
):
    """
    Sightings for a case, newest first.

    Reporter contact details are only included for staff of the
    organization that owns the case.
    """
    case = case_service.get_case_by_id(db, case_id)
    if not case:
        return []

    sightings = sighting_service.list_sightings_by_case(db, case.id)
    if can_modify_case(case, session):
        return [SightingRead.model_validate(s) for s in sightings]
    return [SightingPublicRead.model_validate(s) for s in sightings]


# =============================================================================
# Staff writes
# =============================================================================

@router.post(
    "",
    status_code=201,
    response_model=CaseRead,
    dependencies=[Depends(require_csrf_header)],
)
def create_case(
    body: CaseCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_CASES))),
):
    """File a new case for the caller's organization."""
    try:
        case = case_service.create_case(db, session.org_id, session.user_id, body)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to create case")
    return CaseRead.model_validate(case)


@router.post(
    "/{case_id}/photos",
    response_model=CaseRead,
    dependencies=[Depends(require_csrf_header)],
)
async def upload_case_photo(
    request: Request,
    case_id: str,
    photo: Annotated[UploadFile | None, File()] = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_roles(list(ROLES_CAN_MANAGE_CASES))),
):
    """Attach a photo to a case and index it for photo matching."""
    case = _get_case_or_404(db, case_id)
    check_case_modify_access(case, session)

    if content_length_exceeds_limit(
        request.headers.get("content-length"),
        max_size_bytes=settings.PHOTO_MAX_BYTES,
    ):
        raise HTTPException(status_code=400, detail="File too large")

    data, size = (b"", 0)
    content_type = None
    if photo is not None:
        data, size = await read_upload_bounded(photo, settings.PHOTO_MAX_BYTES)
        content_type = photo.content_type

    try:
        case = case_service.add_case_photo(
            db,
            case,
            content_type=content_type,
            data=data,
            size=size,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to store photo")
    return CaseRead.model_validate(case)
