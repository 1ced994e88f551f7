"""Default enum values for model columns and schemas."""

from app.db.enums.cases import CasePriority, CaseStatus, SightingStatus
from app.db.enums.organizations import VerificationStatus

DEFAULT_CASE_STATUS = CaseStatus.ACTIVE
DEFAULT_CASE_PRIORITY = CasePriority.MEDIUM
DEFAULT_SIGHTING_STATUS = SightingStatus.PENDING
DEFAULT_VERIFICATION_STATUS = VerificationStatus.PENDING
