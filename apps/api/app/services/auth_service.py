"""Authentication service - registration, password sign-in, session creation."""

import logging
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import DuplicateEmailError, StorageError, ValidationError
from app.core.security import create_session_token, hash_password, verify_password
from app.core.structured_logging import build_log_context
from app.db.enums import (
    DEFAULT_VERIFICATION_STATUS,
    OrganizationType,
    Role,
    ROLES_CAN_SELF_REGISTER,
)
from app.db.models import Organization, User
from app.schemas.org import OrganizationCreate
from app.schemas.user import UserCreate
from app.utils.normalization import normalize_email, normalize_name, normalize_text

logger = logging.getLogger(__name__)

EMAIL_CONSTRAINTS = ("uq_users_email", "uq_organizations_contact_email")
# SQLite reports columns instead of constraint names
EMAIL_COLUMNS = ("users.email", "organizations.contact_email")
# bcrypt only hashes the first 72 bytes
MAX_PASSWORD_BYTES = 72


def _is_email_conflict(error: IntegrityError) -> bool:
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name in EMAIL_CONSTRAINTS:
        return True
    message = str(error.orig) if error.orig else str(error)
    return any(name in message for name in EMAIL_CONSTRAINTS + EMAIL_COLUMNS)


def _email_taken(db: Session, *emails: str) -> bool:
    return db.query(
        db.query(User).filter(User.email.in_(emails)).exists()
    ).scalar() or db.query(
        db.query(Organization).filter(Organization.contact_email.in_(emails)).exists()
    ).scalar()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Find a user by email (case-insensitive)."""
    normalized = normalize_email(email)
    if not normalized:
        return None
    return db.query(User).filter(User.email == normalized).first()


# =============================================================================
# Registration
# =============================================================================

def _validate_org(data: OrganizationCreate) -> dict:
    name = normalize_name(data.name)
    if not name:
        raise ValidationError("organization.name")
    org_type = normalize_text(data.type)
    if not org_type:
        raise ValidationError("organization.type")
    try:
        OrganizationType(org_type)
    except ValueError:
        raise ValidationError("organization.type", f"Invalid organization type: {org_type}")
    contact_email = normalize_email(data.contact_email)
    if not contact_email:
        raise ValidationError("organization.contact_email")
    return {
        "name": name,
        "type": org_type,
        "contact_email": contact_email,
        "contact_phone": normalize_text(data.contact_phone),
        "address": normalize_text(data.address),
    }


def _validate_user(data: UserCreate) -> dict:
    name = normalize_name(data.name)
    if not name:
        raise ValidationError("user.name")
    email = normalize_email(data.email)
    if not email:
        raise ValidationError("user.email")
    role = normalize_text(data.role)
    if not role:
        raise ValidationError("user.role")
    if not Role.has_value(role) or Role(role) not in ROLES_CAN_SELF_REGISTER:
        raise ValidationError("user.role", f"Role '{role}' cannot be requested at registration")
    if data.password and len(data.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError("user.password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return {
        "name": name,
        "email": email,
        "role": role,
        "phone": normalize_text(data.phone),
        "password": data.password or None,
    }


def register_organization(
    db: Session,
    org_data: OrganizationCreate,
    user_data: UserCreate,
) -> tuple[Organization, User]:
    """
    Register an organization and its first account in one transaction.

    The organization always starts pending and the user unverified,
    whatever the request says.

    Raises:
        ValidationError: Missing or invalid field
        DuplicateEmailError: Email already used by a user or organization
        StorageError: Any other write failure
    """
    org_fields = _validate_org(org_data)
    user_fields = _validate_user(user_data)

    try:
        if _email_taken(db, org_fields["contact_email"], user_fields["email"]):
            raise DuplicateEmailError(user_fields["email"])

        org = Organization(
            **org_fields,
            verification_status=DEFAULT_VERIFICATION_STATUS.value,
        )
        db.add(org)
        db.flush()  # Get org.id

        password = user_fields.pop("password")
        user = User(
            **user_fields,
            organization_id=org.id,
            password_hash=hash_password(password) if password else None,
            is_verified=False,
        )
        db.add(user)
        db.commit()
    except DuplicateEmailError:
        db.rollback()
        raise
    except IntegrityError as exc:
        db.rollback()
        if _is_email_conflict(exc):
            raise DuplicateEmailError(user_fields["email"]) from exc
        logger.exception(
            "Registration failed",
            extra=build_log_context(operation="register_organization"),
        )
        raise StorageError("register_organization") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Registration failed",
            extra=build_log_context(operation="register_organization"),
        )
        raise StorageError("register_organization") from exc

    db.refresh(org)
    db.refresh(user)
    logger.info(
        "Organization registered",
        extra=build_log_context(operation="register_organization", org_id=org.id, user_id=user.id),
    )
    return org, user


def create_user(
    db: Session,
    *,
    email: str,
    name: str,
    role: Role,
    organization_id: UUID | None = None,
    phone: str | None = None,
    password: str | None = None,
) -> User:
    """
    Create a platform account. New accounts are always unverified.

    Raises:
        ValidationError: Missing email or name
        DuplicateEmailError: Email already exists
        StorageError: Any other write failure
    """
    normalized_email = normalize_email(email)
    if not normalized_email:
        raise ValidationError("email")
    normalized_name = normalize_name(name)
    if not normalized_name:
        raise ValidationError("name")
    if password and len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError("password", f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

    user = User(
        email=normalized_email,
        name=normalized_name,
        role=Role(role).value,
        organization_id=organization_id,
        phone=normalize_text(phone),
        password_hash=hash_password(password) if password else None,
        is_verified=False,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if _is_email_conflict(exc):
            raise DuplicateEmailError(normalized_email) from exc
        raise StorageError("create_user") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to create user", extra=build_log_context(operation="create_user"))
        raise StorageError("create_user") from exc
    db.refresh(user)
    return user


# =============================================================================
# Sign-in
# =============================================================================

def authenticate_user(
    db: Session,
    email: str | None,
    password: str | None,
) -> tuple[User | None, str | None]:
    """
    Check email and password.

    The bcrypt hash is always verified. Only when AUTH_ALLOW_ANY_PASSWORD
    is set in a dev environment does a failed check still succeed.

    Returns:
        (user, error_code) - one will be None
    """
    user = get_user_by_email(db, email or "")
    if not user:
        return None, "invalid_credentials"

    if not verify_password(password or "", user.password_hash):
        if not settings.allow_any_password:
            return None, "invalid_credentials"
        logger.warning(
            "Password check bypassed by AUTH_ALLOW_ANY_PASSWORD",
            extra=build_log_context(operation="authenticate_user", user_id=user.id),
        )

    if settings.REQUIRE_VERIFIED_LOGIN and not user.is_verified:
        return None, "account_unverified"

    return user, None


def create_session_for_user(user: User) -> str:
    """Issue a session token for a signed-in user."""
    return create_session_token(
        user_id=user.id,
        email=user.email,
        role=user.role,
        org_id=user.organization_id,
    )
