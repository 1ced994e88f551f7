"""Sighting service - public sighting reports linked to cases."""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import StorageError, ValidationError
from app.core.structured_logging import build_log_context
from app.db.enums import DEFAULT_SIGHTING_STATUS, SightingStatus
from app.db.models import Case, Sighting
from app.schemas.sighting import SightingCreate
from app.utils.normalization import normalize_email, normalize_name, normalize_text, parse_uuid

logger = logging.getLogger(__name__)

MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5
RECENT_SIGHTINGS_LIMIT = 10


def parse_confidence_level(value: int | str | None) -> int | None:
    """
    Parse a reporter confidence rating.

    Accepts an int or a numeric string. Out-of-range values are
    rejected, never clamped.

    Raises:
        ValidationError: Not an integer or outside 1-5
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError("confidence_level", "Confidence level must be an integer")
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            value = int(value)
        except ValueError:
            raise ValidationError("confidence_level", "Confidence level must be an integer")
    if not MIN_CONFIDENCE <= value <= MAX_CONFIDENCE:
        raise ValidationError(
            "confidence_level",
            f"Confidence level must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}",
        )
    return value


def _validate_sighting(data: SightingCreate) -> dict:
    required = {
        "case_id": normalize_text(data.case_id),
        "reporter_name": normalize_name(data.reporter_name),
        "reporter_email": normalize_email(data.reporter_email),
        "reporter_phone": normalize_text(data.reporter_phone),
        "sighting_location": normalize_text(data.sighting_location),
        "sighting_date": data.sighting_date,
        "description": normalize_text(data.description),
    }
    for field, value in required.items():
        if value is None:
            raise ValidationError(field)

    case_id = parse_uuid(required["case_id"])
    if case_id is None:
        raise ValidationError("case_id", "Case not found")

    return {
        **required,
        "case_id": case_id,
        "sighting_time": normalize_text(data.sighting_time),
        "confidence_level": parse_confidence_level(data.confidence_level),
    }


def create_sighting(db: Session, data: SightingCreate) -> Sighting:
    """
    Record a public sighting report. No account required.

    Raises:
        ValidationError: Missing field, bad confidence level, unknown case
        StorageError: Write failed (details are logged, not returned)
    """
    fields = _validate_sighting(data)

    try:
        case_exists = db.query(
            db.query(Case).filter(Case.id == fields["case_id"]).exists()
        ).scalar()
        if not case_exists:
            raise ValidationError("case_id", "Case not found")

        sighting = Sighting(
            **fields,
            photo_urls=[],
            status=DEFAULT_SIGHTING_STATUS.value,
        )
        db.add(sighting)
        db.commit()
        db.refresh(sighting)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(
            "Failed to create sighting",
            extra=build_log_context(operation="create_sighting", case_id=fields["case_id"]),
        )
        raise StorageError("create_sighting") from exc

    logger.info(
        "Sighting reported",
        extra=build_log_context(operation="create_sighting", case_id=sighting.case_id),
    )
    return sighting


def list_sightings_by_case(db: Session, case_id: UUID | str | None) -> list[Sighting]:
    """Sightings for a case, newest first. Degrades to [] on any failure."""
    case_uuid = parse_uuid(case_id)
    if case_uuid is None:
        return []
    try:
        return (
            db.query(Sighting)
            .filter(Sighting.case_id == case_uuid)
            .order_by(Sighting.created_at.desc(), Sighting.id)
            .all()
        )
    except SQLAlchemyError:
        logger.exception(
            "Sighting listing failed",
            extra=build_log_context(operation="list_sightings", case_id=case_uuid),
        )
        return []


def list_recent_sightings_for_org(
    db: Session,
    org_id: UUID,
    limit: int = RECENT_SIGHTINGS_LIMIT,
) -> list[Sighting]:
    """Newest sightings across all cases owned by an organization."""
    try:
        return (
            db.query(Sighting)
            .join(Case, Sighting.case_id == Case.id)
            .filter(Case.organization_id == org_id)
            .order_by(Sighting.created_at.desc(), Sighting.id)
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception(
            "Recent sightings lookup failed",
            extra=build_log_context(operation="list_recent_sightings", org_id=org_id),
        )
        return []


def count_pending_sightings_for_org(db: Session, org_id: UUID) -> int:
    return (
        db.query(Sighting)
        .join(Case, Sighting.case_id == Case.id)
        .filter(
            Case.organization_id == org_id,
            Sighting.status == SightingStatus.PENDING.value,
        )
        .count()
    )
