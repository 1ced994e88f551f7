"""Utility modules."""

from app.utils.normalization import (
    normalize_email,
    normalize_name,
    normalize_text,
    parse_uuid,
)

__all__ = [
    "normalize_email",
    "normalize_name",
    "normalize_text",
    "parse_uuid",
]
