"""Organization-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from app.db.enums import OrganizationType, VerificationStatus
from app.schemas.user import UserCreate, UserRead


class OrganizationCreate(BaseModel):
    """
    Organization half of a registration request.

    Required fields are checked by the registration service so that a
    missing field is reported by name with a 400.
    """

    name: str | None = Field(None, max_length=255)
    type: str | None = None
    contact_email: str | None = Field(None, max_length=255)
    contact_phone: str | None = Field(None, max_length=50)
    address: str | None = None


class OrganizationRead(BaseModel):
    """Response schema for reading an organization."""

    id: UUID
    name: str
    type: OrganizationType
    contact_email: str
    contact_phone: str | None = None
    address: str | None = None
    verification_status: VerificationStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class RegistrationRequest(BaseModel):
    organization: OrganizationCreate
    user: UserCreate


class RegistrationResponse(BaseModel):
    message: str
    organization: OrganizationRead
    user: UserRead
