"""Organization enums."""

from enum import Enum


class OrganizationType(str, Enum):
    NGO = "ngo"
    POLICE = "police"
    GOVERNMENT = "government"


class VerificationStatus(str, Enum):
    """Organization review state. New registrations start as PENDING."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"
