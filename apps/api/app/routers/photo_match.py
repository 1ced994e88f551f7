"""Photo match router - rank active cases against an uploaded photo."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.deps import get_db
from app.core.errors import StorageError, ValidationError
from app.core.rate_limit import PUBLIC_LIMIT, limiter
from app.schemas.photo_match import PhotoMatchResponse
from app.services import photo_match_service
from app.utils.file_upload import content_length_exceeds_limit, read_upload_bounded

router = APIRouter(prefix="/photo-match", tags=["Photo Match"])


@router.post("", response_model=PhotoMatchResponse)
@limiter.limit(PUBLIC_LIMIT)
async def match_photo(
    request: Request,
    photo: Annotated[UploadFile | None, File()] = None,
    db: Session = Depends(get_db),
):
    """
    Find active cases that look like the uploaded photo.

    The upload is validated before any case is looked up; a lookup
    failure returns a generic error and no partial results.
    """
    if content_length_exceeds_limit(
        request.headers.get("content-length"),
        max_size_bytes=settings.PHOTO_MAX_BYTES,
    ):
        raise HTTPException(status_code=400, detail="File too large")

    data, size = (b"", 0)
    content_type = None
    if photo is not None:
        data, size = await read_upload_bounded(photo, settings.PHOTO_MAX_BYTES)
        content_type = photo.content_type

    try:
        matches = photo_match_service.match_photo(
            db,
            content_type=content_type,
            data=data,
            size=size,
        )
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=exc.message)
    except StorageError:
        raise HTTPException(status_code=500, detail="Failed to process photo")

    return PhotoMatchResponse(
        matches=matches,
        message=f"Found {len(matches)} potential matches",
    )
