"""Case service - business logic for case operations."""

import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from app.core.config import settings
from app.core.errors import StorageError, ValidationError
from app.core.structured_logging import build_log_context
from app.db.base import utcnow
from app.db.enums import (
    DEFAULT_CASE_PRIORITY,
    DEFAULT_CASE_STATUS,
    CasePriority,
    CaseStatus,
    Gender,
)
from app.db.models import Case
from app.schemas.case import CaseCreate
from app.services import photo_match_service, storage_service
from app.utils.normalization import normalize_name, normalize_text, parse_uuid

logger = logging.getLogger(__name__)

# Milliseconds to probe past the creation timestamp for a free case number
CASE_NUMBER_PROBE_LIMIT = 100
CASE_CREATE_ATTEMPTS = 3


def generate_case_number(db: Session, org_id: UUID, now: datetime | None = None) -> str:
    """
    Build "{org_id}-{creation timestamp in ms}".

    If that number is taken the timestamp is bumped one millisecond at a
    time, so numbers stay unique and sort in creation order.
    """
    millis = int((now or utcnow()).timestamp() * 1000)
    for offset in range(CASE_NUMBER_PROBE_LIMIT):
        candidate = f"{org_id}-{millis + offset}"
        taken = db.query(
            db.query(Case).filter(Case.case_number == candidate).exists()
        ).scalar()
        if not taken:
            return candidate
    return f"{org_id}-{millis + CASE_NUMBER_PROBE_LIMIT}"


def _is_case_number_conflict(error: IntegrityError) -> bool:
    constraint_name = getattr(getattr(error.orig, "diag", None), "constraint_name", None)
    if constraint_name == "uq_case_number":
        return True
    message = str(error.orig) if error.orig else str(error)
    # SQLite reports the column rather than the constraint name
    return "uq_case_number" in message or "cases.case_number" in message


def _parse_enum(enum_cls, value: str | None, field: str):
    if value is None:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        raise ValidationError(field, f"Invalid {field}: {value}")


def _validate_case(org_id: UUID | None, user_id: UUID | None, data: CaseCreate) -> dict:
    child_name = normalize_name(data.child_name)
    if not child_name:
        raise ValidationError("child_name")
    description = normalize_text(data.description)
    if not description:
        raise ValidationError("description")
    last_seen_location = normalize_text(data.last_seen_location)
    if not last_seen_location:
        raise ValidationError("last_seen_location")
    if data.last_seen_date is None:
        raise ValidationError("last_seen_date")
    if org_id is None:
        raise ValidationError("organization_id")
    if user_id is None:
        raise ValidationError("created_by")
    if data.age is not None and data.age < 0:
        raise ValidationError("age", "Age must be a non-negative integer")

    gender = _parse_enum(Gender, data.gender, "gender")
    priority = _parse_enum(CasePriority, data.priority, "priority") or DEFAULT_CASE_PRIORITY

    return {
        "child_name": child_name,
        "age": data.age,
        "gender": gender.value if gender else None,
        "description": description,
        "last_seen_location": last_seen_location,
        "last_seen_date": data.last_seen_date,
        "priority": priority.value,
        "additional_info": dict(data.additional_info or {}),
    }


def create_case(
    db: Session,
    org_id: UUID | None,
    user_id: UUID | None,
    data: CaseCreate,
) -> Case:
    """
    File a new case for an organization.

    Status always starts active. Priority defaults to medium.

    Raises:
        ValidationError: Missing or invalid field
        StorageError: Write failed
    """
    fields = _validate_case(org_id, user_id, data)

    case = None
    for attempt in range(CASE_CREATE_ATTEMPTS):
        try:
            case = Case(
                **fields,
                case_number=generate_case_number(db, org_id),
                status=DEFAULT_CASE_STATUS.value,
                organization_id=org_id,
                created_by=user_id,
                photo_urls=[],
            )
            db.add(case)
            db.commit()
            db.refresh(case)
            break
        except IntegrityError as exc:
            db.rollback()
            if _is_case_number_conflict(exc) and attempt < CASE_CREATE_ATTEMPTS - 1:
                continue
            logger.exception(
                "Failed to create case",
                extra=build_log_context(operation="create_case", org_id=org_id, user_id=user_id),
            )
            raise StorageError("create_case") from exc
        except SQLAlchemyError as exc:
            db.rollback()
            logger.exception(
                "Failed to create case",
                extra=build_log_context(operation="create_case", org_id=org_id, user_id=user_id),
            )
            raise StorageError("create_case") from exc

    logger.info(
        "Case created",
        extra=build_log_context(operation="create_case", org_id=org_id, case_id=case.id),
    )
    return case


def list_cases(
    db: Session,
    status: str | None = None,
    organization_id: UUID | str | None = None,
    limit: int | None = None,
) -> list[Case]:
    """
    List cases matching every given filter, newest first.

    Returns [] when nothing matches, the organization id is malformed,
    or storage is unavailable.
    """
    max_limit = settings.CASE_LIST_MAX_LIMIT
    if limit is None:
        limit = max_limit
    elif limit <= 0:
        return []
    limit = min(limit, max_limit)

    org_uuid = None
    if organization_id is not None:
        org_uuid = parse_uuid(organization_id)
        if org_uuid is None:
            return []

    try:
        query = db.query(Case).options(joinedload(Case.organization))
        if status:
            query = query.filter(Case.status == str(getattr(status, "value", status)))
        if org_uuid is not None:
            query = query.filter(Case.organization_id == org_uuid)
        return (
            query.order_by(Case.created_at.desc(), Case.case_number.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError:
        logger.exception("Case listing failed", extra=build_log_context(operation="list_cases"))
        return []


def get_case_by_id(db: Session, case_id: UUID | str | None) -> Case | None:
    """Get a case by id. Malformed ids and storage failures return None."""
    case_uuid = parse_uuid(case_id)
    if case_uuid is None:
        return None
    try:
        return (
            db.query(Case)
            .options(joinedload(Case.organization))
            .filter(Case.id == case_uuid)
            .first()
        )
    except SQLAlchemyError:
        logger.exception(
            "Case lookup failed",
            extra=build_log_context(operation="get_case", case_id=case_uuid),
        )
        return None


def add_case_photo(
    db: Session,
    case: Case,
    *,
    content_type: str | None,
    data: bytes,
    size: int | None = None,
) -> Case:
    """
    Attach a photo to a case and index it for photo matching.

    The file is written first; if the database update then fails the
    file is removed again.

    Raises:
        ValidationError: Missing, oversized or non-image upload
        StorageError: File or database write failed
    """
    photo_match_service.validate_photo_upload(content_type, len(data) if size is None else size)
    embedding = photo_match_service.analyze_photo(data)
    case_id = case.id

    storage_key = storage_service.build_case_photo_key(case_id, content_type)
    try:
        photo_url = storage_service.store_file(storage_key, data)
    except OSError as exc:
        logger.exception(
            "Failed to store case photo",
            extra=build_log_context(operation="add_case_photo", case_id=case_id),
        )
        raise StorageError("add_case_photo") from exc

    try:
        # Re-read under a row lock so concurrent uploads do not drop each other's URLs
        db.refresh(case, with_for_update=True)
        # Reassign so the JSON column change is detected
        case.photo_urls = [*(case.photo_urls or []), photo_url]
        photo_match_service.add_photo_embedding(db, case_id, photo_url, embedding)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        storage_service.delete_file(storage_key)
        logger.exception(
            "Failed to attach case photo",
            extra=build_log_context(operation="add_case_photo", case_id=case_id),
        )
        raise StorageError("add_case_photo") from exc

    try:
        db.refresh(case)
    except SQLAlchemyError as exc:
        logger.exception(
            "Case photo stored but case could not be reloaded",
            extra=build_log_context(operation="add_case_photo", case_id=case_id),
        )
        raise StorageError("add_case_photo") from exc
    return case


def get_case_stats(db: Session, org_id: UUID) -> dict[str, int]:
    """Case counts for an organization's dashboard."""
    status_counts = dict(
        db.query(Case.status, func.count(Case.id))
        .filter(Case.organization_id == org_id)
        .group_by(Case.status)
        .all()
    )
    urgent = (
        db.query(func.count(Case.id))
        .filter(
            Case.organization_id == org_id,
            Case.priority == CasePriority.URGENT.value,
        )
        .scalar()
    )
    return {
        "total_cases": sum(status_counts.values()),
        "active_cases": status_counts.get(CaseStatus.ACTIVE.value, 0),
        "found_cases": status_counts.get(CaseStatus.FOUND.value, 0),
        "closed_cases": status_counts.get(CaseStatus.CLOSED.value, 0),
        "urgent_cases": urgent or 0,
    }
