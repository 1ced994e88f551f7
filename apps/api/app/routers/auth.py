"""Authentication router - registration, password sign-in and session management."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import COOKIE_NAME, get_current_session, get_db, require_csrf_header
from app.core.errors import DuplicateEmailError, StorageError, ValidationError
from app.core.rate_limit import AUTH_LIMIT, limiter
from app.schemas.auth import LoginRequest, MeResponse, UserSession
from app.schemas.org import OrganizationRead, RegistrationRequest, RegistrationResponse
from app.schemas.user import UserRead
from app.services import auth_service
from app.services.session_service import build_user_session

router = APIRouter()

LOGIN_ERRORS = {
    "invalid_credentials": (401, "Invalid email or password"),
    "account_unverified": (403, "Account is awaiting verification"),
}


def _me_response(session: UserSession) -> MeResponse:
    return MeResponse(**session.model_dump())


# =============================================================================
# Registration
# =============================================================================

@router.post("/register", status_code=201, response_model=RegistrationResponse)
@limiter.limit(AUTH_LIMIT)
def register(
    request: Request,
    body: RegistrationRequest,
    db: Session = Depends(get_db),
):
    """
    Register an organization together with its first account.

    The organization starts pending verification and the account
    unverified, whatever the request contains.
    """
    try:
        org, user = auth_service.register_organization(db, body.organization, body.user)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except DuplicateEmailError:
        raise HTTPException(status_code=400, detail="Email already exists")
    except StorageError:
        raise HTTPException(status_code=500, detail="Registration failed")

    return RegistrationResponse(
        message="Registration successful. Your organization is pending verification.",
        organization=OrganizationRead.model_validate(org),
        user=UserRead.model_validate(user),
    )


# =============================================================================
# Session Endpoints
# =============================================================================

@router.post("/login")
@limiter.limit(AUTH_LIMIT)
def login(
    request: Request,
    response: Response,
    body: LoginRequest,
    db: Session = Depends(get_db),
) -> MeResponse:
    """Sign in with email and password and set the session cookie."""
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    user, error = auth_service.authenticate_user(db, body.email, body.password)
    if error:
        status_code, detail = LOGIN_ERRORS[error]
        raise HTTPException(status_code=status_code, detail=detail)

    response.set_cookie(
        key=COOKIE_NAME,
        value=auth_service.create_session_for_user(user),
        max_age=settings.JWT_EXPIRES_HOURS * 3600,
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
        path="/",
    )
    return _me_response(build_user_session(user))


@router.get("/me")
def get_me(session: UserSession = Depends(get_current_session)) -> MeResponse:
    """
    Get current authenticated user info.

    Used by the frontend to bootstrap auth state on page load.
    """
    return _me_response(session)


@router.post("/logout", dependencies=[Depends(require_csrf_header)])
def logout(
    response: Response,
    session: UserSession = Depends(get_current_session),
):
    """Clear the session cookie."""
    response.delete_cookie(
        COOKIE_NAME,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.cookie_secure,
    )
    return {"status": "logged_out"}
