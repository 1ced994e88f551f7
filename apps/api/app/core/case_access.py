"""Case access control - centralized permission checks for case operations.

Reading cases is public. Changing a case (attaching photos, seeing
reporter contact details on its sightings) requires organization staff:
- members of the owning organization
- platform admins, for any organization
"""

from fastapi import HTTPException, status

from app.db.enums import Role, ROLES_CAN_MANAGE_CASES, ROLES_CROSS_ORG
from app.db.models import Case
from app.schemas.auth import UserSession


def can_modify_case(case: Case, session: UserSession | None) -> bool:
    """Check if the principal is staff of the organization that owns the case."""
    if session is None:
        return False

    role = Role(session.role)
    if role not in ROLES_CAN_MANAGE_CASES:
        return False

    # Platform admins bypass ownership
    if role in ROLES_CROSS_ORG:
        return True

    return session.org_id is not None and session.org_id == case.organization_id


def check_case_modify_access(case: Case, session: UserSession) -> None:
    """
    Raise 403 unless the principal may modify this case.

    Raises:
        HTTPException: 403 if access denied
    """
    if not can_modify_case(case, session):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the organization that filed this case can modify it",
        )
