"""Organization service - lookup, listing and verification status."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError, ValidationError
from app.core.structured_logging import build_log_context
from app.db.enums import VerificationStatus
from app.db.models import Organization

logger = logging.getLogger(__name__)


def get_org_by_contact_email(db: Session, email: str) -> Organization | None:
    """Get organization by its (normalized) contact email."""
    return db.query(Organization).filter(Organization.contact_email == email).first()


def list_verified_orgs(db: Session) -> list[Organization]:
    """
    List verified organizations by name.

    Public directory data: returns [] when storage is unavailable.
    """
    try:
        return (
            db.query(Organization)
            .filter(Organization.verification_status == VerificationStatus.VERIFIED.value)
            .order_by(Organization.name.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.exception(
            "Failed to list organizations",
            extra=build_log_context(operation="list_verified_orgs"),
        )
        return []


def set_verification_status(
    db: Session,
    org: Organization,
    status: str,
) -> Organization:
    """
    Administrative review of an organization registration.

    Raises:
        ValidationError: Unknown status
        StorageError: Write failed
    """
    try:
        new_status = VerificationStatus(status)
    except ValueError:
        raise ValidationError("verification_status", f"Invalid verification status: {status}")

    org.verification_status = new_status.value
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Failed to update organization status",
            extra=build_log_context(operation="set_verification_status", org_id=org.id),
        )
        raise StorageError("set_verification_status") from exc
    db.refresh(org)
    return org
