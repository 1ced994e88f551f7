"""Rate limiting configuration for the FindThem API."""

import os

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

# In-memory storage for tests; otherwise whatever RATE_LIMIT_STORAGE_URI names
# (e.g. redis://host:6379/0 for multi-worker deployments)
IS_TESTING = os.getenv("TESTING", "").lower() in ("1", "true", "yes")

AUTH_LIMIT = f"{settings.RATE_LIMIT_AUTH}/minute"
PUBLIC_LIMIT = f"{settings.RATE_LIMIT_PUBLIC}/minute"

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://" if IS_TESTING else settings.RATE_LIMIT_STORAGE_URI,
    enabled=not IS_TESTING,
)
