"""User-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import Role


class UserCreate(BaseModel):
    """Account half of a registration request."""

    name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=255)
    role: str | None = None
    phone: str | None = Field(None, max_length=50)
    password: str | None = Field(None, max_length=128)


class UserRead(BaseModel):
    """Response schema for reading a user. Never includes the password hash."""

    id: UUID
    email: str
    name: str
    role: Role
    organization_id: UUID | None = None
    phone: str | None = None
    is_verified: bool
    created_at: datetime

    model_config = {"from_attributes": True}
