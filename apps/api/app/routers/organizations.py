"""Organizations router - public directory of verified organizations."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_db
from app.schemas.org import OrganizationRead
from app.services import org_service

router = APIRouter(prefix="/organizations", tags=["Organizations"])


@router.get("", response_model=list[OrganizationRead])
def list_organizations(db: Session = Depends(get_db)):
    """Verified organizations, sorted by name."""
    return [OrganizationRead.model_validate(o) for o in org_service.list_verified_orgs(db)]
