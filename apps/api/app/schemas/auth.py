"""Authentication-related Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel

from app.db.enums import Role


class TokenPayload(BaseModel):
    """Decoded JWT payload structure."""
    sub: UUID  # user_id
    email: str
    role: str
    org_id: UUID | None = None


class UserSession(BaseModel):
    """
    Authenticated principal for a request.

    Built from the session token, then refreshed from storage so that
    role and organization changes take effect immediately.
    """
    user_id: UUID
    email: str
    name: str
    role: Role  # Validated enum
    org_id: UUID | None = None
    org_name: str | None = None
    is_verified: bool = False


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class MeResponse(BaseModel):
    """Response schema for GET /auth/me and POST /auth/login."""
    user_id: UUID
    email: str
    name: str
    role: Role
    org_id: UUID | None = None
    org_name: str | None = None
    is_verified: bool
