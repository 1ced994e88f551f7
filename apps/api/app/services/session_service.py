"""Session service - resolve session tokens to principals and check roles."""

import logging
from collections.abc import Iterable

import jwt
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.errors import UnauthenticatedError, UnauthorizedError
from app.core.security import decode_session_token
from app.core.structured_logging import build_log_context
from app.db.enums import Role
from app.db.models import User
from app.schemas.auth import TokenPayload, UserSession

logger = logging.getLogger(__name__)


def build_user_session(user: User) -> UserSession:
    """Build the principal for a user row (organization name joined)."""
    org = user.organization
    return UserSession(
        user_id=user.id,
        email=user.email,
        name=user.name,
        role=Role(user.role),
        org_id=user.organization_id,
        org_name=org.name if org else None,
        is_verified=user.is_verified,
    )


def resolve_current_principal(db: Session, token: str | None) -> UserSession | None:
    """
    Resolve a session token to the current principal.

    Returns None (never raises) when:
    - no token was sent
    - the token fails signature, expiry or claim checks
    - the user no longer exists or has an unknown role
    - storage is unavailable while re-reading the user

    The user row is re-read on every call so a changed role or
    organization applies to existing sessions immediately.
    """
    if not token:
        return None

    try:
        payload = TokenPayload.model_validate(decode_session_token(token))
    except (jwt.InvalidTokenError, PydanticValidationError):
        return None

    try:
        user = (
            db.query(User)
            .options(joinedload(User.organization))
            .filter(User.id == payload.sub)
            .first()
        )
    except SQLAlchemyError:
        logger.exception(
            "Principal lookup failed",
            extra=build_log_context(operation="resolve_principal", user_id=payload.sub),
        )
        return None

    if not user:
        return None

    if not Role.has_value(user.role):
        logger.warning(
            "User has unknown role",
            extra=build_log_context(operation="resolve_principal", user_id=user.id),
        )
        return None

    return build_user_session(user)


def require_role(
    principal: UserSession | None,
    allowed_roles: Iterable[Role],
) -> UserSession:
    """
    Check the principal's role.

    Raises:
        UnauthenticatedError: No principal
        UnauthorizedError: Role not in allowed_roles
    """
    if principal is None:
        raise UnauthenticatedError("Not authenticated")
    if principal.role not in set(allowed_roles):
        raise UnauthorizedError(
            f"Role '{principal.role.value}' not authorized for this action"
        )
    return principal
