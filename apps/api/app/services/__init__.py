"""Service layer modules."""

from app.services.auth_service import (
    authenticate_user,
    create_session_for_user,
    create_user,
    get_user_by_email,
    register_organization,
)
from app.services.org_service import list_verified_orgs

__all__ = [
    # Auth service
    "authenticate_user",
    "create_session_for_user",
    "create_user",
    "get_user_by_email",
    "register_organization",
    # Org service
    "list_verified_orgs",
]
