"""Photo matching service - feature extraction and ranking of active cases.

Every case photo gets a fixed-length feature vector when it is attached
(PhotoEmbedding). A match request extracts the same vector from the
uploaded image and ranks active cases by cosine similarity against the
stored vectors; nothing is recomputed for existing photos.

The "mock" backend reproduces the old random-score placeholder and is
only meant for local development.
"""

import io
import logging
import random
from uuid import UUID

import numpy as np
from PIL import Image, UnidentifiedImageError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.errors import StorageError, ValidationError
from app.core.structured_logging import build_log_context
from app.db.enums import CaseStatus, MatchConfidence
from app.db.models import Case, PhotoEmbedding
from app.schemas.photo_match import PhotoMatch

logger = logging.getLogger(__name__)

# 8 bins per RGB channel -> 512-dimensional colour histogram
HISTOGRAM_BINS = 8
PHOTO_EMBEDDING_DIM = HISTOGRAM_BINS ** 3
ANALYSIS_SIZE = (64, 64)

HIGH_CONFIDENCE_SCORE = 0.8
MEDIUM_CONFIDENCE_SCORE = 0.6

MOCK_MATCH_CASE_LIMIT = 5
MOCK_SCORE_MIN = 0.6
MOCK_SCORE_MAX = 1.0

BACKEND_EMBEDDING = "embedding"
BACKEND_MOCK = "mock"


# =============================================================================
# Validation & feature extraction
# =============================================================================

def validate_photo_upload(content_type: str | None, size: int) -> None:
    """
    Check an upload before any processing or storage access.

    Raises:
        ValidationError: No file, not an image type, or over PHOTO_MAX_BYTES
    """
    if size <= 0:
        raise ValidationError("photo", "No photo provided")
    if not content_type or not content_type.lower().startswith("image/"):
        raise ValidationError("photo", "Invalid file type")
    if size > settings.PHOTO_MAX_BYTES:
        max_mb = settings.PHOTO_MAX_BYTES / (1024 * 1024)
        raise ValidationError("photo", f"File too large (max {max_mb:.0f} MB)")


def load_image(data: bytes) -> Image.Image:
    """Decode image bytes to RGB. Undecodable content is a validation error."""
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError):
        raise ValidationError("photo", "File is not a readable image")
    return image.convert("RGB")


def analyze_photo(data: bytes) -> list[float]:
    """
    Extract the feature vector for an image.

    Returns an L2-normalized RGB colour histogram of length
    PHOTO_EMBEDDING_DIM.
    """
    image = load_image(data).resize(ANALYSIS_SIZE)
    pixels = np.asarray(image, dtype=np.uint8).reshape(-1, 3)

    quantized = (pixels // (256 // HISTOGRAM_BINS)).astype(np.int64)
    index = (
        quantized[:, 0] * HISTOGRAM_BINS * HISTOGRAM_BINS
        + quantized[:, 1] * HISTOGRAM_BINS
        + quantized[:, 2]
    )
    hist = np.bincount(index, minlength=PHOTO_EMBEDDING_DIM).astype(np.float64)
    hist = hist / (np.linalg.norm(hist) + 1e-12)
    return hist.tolist()


def calculate_similarity(embedding1: list[float], embedding2: list[float]) -> float:
    """Cosine similarity clipped to [0, 1]. Mismatched or empty vectors score 0."""
    a = np.asarray(embedding1, dtype=np.float64)
    b = np.asarray(embedding2, dtype=np.float64)
    if a.size == 0 or a.shape != b.shape:
        return 0.0
    denom = np.linalg.norm(a) * np.linalg.norm(b)
    if denom == 0:
        return 0.0
    return float(np.clip(np.dot(a, b) / denom, 0.0, 1.0))


def get_confidence_level(score: float) -> MatchConfidence:
    if score >= HIGH_CONFIDENCE_SCORE:
        return MatchConfidence.HIGH
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return MatchConfidence.MEDIUM
    return MatchConfidence.LOW


def format_similarity_score(score: float) -> str:
    """Format a score as a whole percentage, e.g. 0.923 -> '92%'."""
    return f"{round(score * 100)}%"


def add_photo_embedding(
    db: Session,
    case_id: UUID,
    photo_url: str,
    embedding: list[float],
) -> PhotoEmbedding:
    """Stage an embedding row for a case photo. The caller commits."""
    row = PhotoEmbedding(case_id=case_id, photo_url=photo_url, embedding=embedding)
    db.add(row)
    return row


# =============================================================================
# Ranking
# =============================================================================

def _to_match(case: Case, score: float) -> PhotoMatch:
    return PhotoMatch(
        case_id=case.id,
        child_name=case.child_name,
        case_number=case.case_number,
        photo_url=case.photo_urls[0] if case.photo_urls else None,
        age=case.age,
        gender=case.gender,
        last_seen_location=case.last_seen_location,
        last_seen_date=case.last_seen_date,
        priority=case.priority,
        status=case.status,
        similarity_score=score,
        similarity_display=format_similarity_score(score),
        confidence_level=get_confidence_level(score),
    )


def _rank(scored: list[tuple[float, Case]], limit: int) -> list[PhotoMatch]:
    # Score descending; case id breaks ties so results are reproducible
    scored.sort(key=lambda item: (-item[0], str(item[1].id)))
    return [_to_match(case, score) for score, case in scored[:limit]]


def find_matches(
    db: Session,
    embedding: list[float],
    threshold: float | None = None,
    limit: int | None = None,
) -> list[PhotoMatch]:
    """
    Rank active cases against a query embedding.

    Each case scores the best similarity over its stored photos; cases
    under the threshold are dropped.

    Raises:
        StorageError: Case or embedding lookup failed (no partial results)
    """
    threshold = settings.PHOTO_MATCH_THRESHOLD if threshold is None else threshold
    limit = settings.PHOTO_MATCH_LIMIT if limit is None else limit

    try:
        rows = (
            db.query(PhotoEmbedding, Case)
            .join(Case, PhotoEmbedding.case_id == Case.id)
            .filter(Case.status == CaseStatus.ACTIVE.value)
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception(
            "Photo match lookup failed",
            extra=build_log_context(operation="find_matches"),
        )
        raise StorageError("photo_match") from exc

    best: dict[UUID, tuple[float, Case]] = {}
    for row, case in rows:
        score = calculate_similarity(embedding, row.embedding)
        current = best.get(case.id)
        if current is None or score > current[0]:
            best[case.id] = (score, case)

    scored = [(score, case) for score, case in best.values() if score >= threshold]
    return _rank(scored, limit)


def mock_matches(db: Session, rng: random.Random | None = None) -> list[PhotoMatch]:
    """
    Development placeholder: up to five active cases with random scores
    in [0.6, 1.0]. Not a similarity measure.

    Raises:
        StorageError: Case lookup failed
    """
    rng = rng or random.Random()
    try:
        cases = (
            db.query(Case)
            .filter(Case.status == CaseStatus.ACTIVE.value)
            .order_by(Case.created_at.desc(), Case.case_number.desc())
            .limit(MOCK_MATCH_CASE_LIMIT)
            .all()
        )
    except SQLAlchemyError as exc:
        logger.exception(
            "Photo match lookup failed",
            extra=build_log_context(operation="mock_matches"),
        )
        raise StorageError("photo_match") from exc

    scored = [(rng.uniform(MOCK_SCORE_MIN, MOCK_SCORE_MAX), case) for case in cases]
    return _rank(scored, MOCK_MATCH_CASE_LIMIT)


def match_photo(
    db: Session,
    *,
    content_type: str | None,
    data: bytes,
    size: int | None = None,
    backend: str | None = None,
) -> list[PhotoMatch]:
    """
    Rank active cases for an uploaded photo.

    The upload is validated and decoded before any case lookup.

    Raises:
        ValidationError: Missing, oversized, non-image or undecodable upload
        StorageError: Case lookup failed
    """
    validate_photo_upload(content_type, len(data) if size is None else size)

    backend = backend or settings.PHOTO_MATCH_BACKEND
    if backend == BACKEND_MOCK:
        load_image(data)
        return mock_matches(db)
    if backend == BACKEND_EMBEDDING:
        return find_matches(db, analyze_photo(data))
    raise ValueError(f"Unknown photo match backend: {backend}")
