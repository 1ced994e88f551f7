"""FastAPI dependencies for authentication, authorization, and database access."""

from typing import Generator

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from app.core.errors import UnauthenticatedError, UnauthorizedError
from app.db.session import SessionLocal
from app.schemas.auth import UserSession
from app.services.session_service import require_role, resolve_current_principal


# Cookie and header names
COOKIE_NAME = "auth_token"
CSRF_HEADER = "X-Requested-With"
CSRF_HEADER_VALUE = "XMLHttpRequest"


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Yields a database session and ensures it's closed after the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_optional_session(
    request: Request,
    db: Session = Depends(get_db),
) -> UserSession | None:
    """
    Resolve the session cookie, if any.

    Never raises: anonymous, expired and forged sessions all yield None.
    Used by public endpoints that show more to organization staff.
    """
    return resolve_current_principal(db, request.cookies.get(COOKIE_NAME))


def get_current_session(
    session: UserSession | None = Depends(get_optional_session),
) -> UserSession:
    """
    Get the authenticated principal.

    This is the PRIMARY auth dependency for staff endpoints.

    Raises:
        HTTPException 401: Not authenticated
    """
    if session is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return session


def require_roles(allowed_roles: list):
    """
    Dependency factory for role-based authorization.

    Uses enum values (not strings) to prevent drift.

    Usage:
        @router.post("/cases", dependencies=[Depends(require_roles([Role.NGO_ADMIN]))])
    """
    def dependency(session: UserSession | None = Depends(get_optional_session)) -> UserSession:
        try:
            return require_role(session, allowed_roles)
        except UnauthenticatedError:
            raise HTTPException(status_code=401, detail="Not authenticated")
        except UnauthorizedError as exc:
            raise HTTPException(status_code=403, detail=str(exc))
    return dependency


def require_csrf_header(request: Request) -> None:
    """
    Verify CSRF header on mutations.

    Apply to cookie-authenticated state-changing endpoints.

    Raises:
        HTTPException 403: Missing or invalid CSRF header
    """
    if request.headers.get(CSRF_HEADER) != CSRF_HEADER_VALUE:
        raise HTTPException(
            status_code=403,
            detail=f"Missing CSRF header. Include '{CSRF_HEADER}: {CSRF_HEADER_VALUE}'"
        )
