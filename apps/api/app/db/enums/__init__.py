"""Enum definitions for application constants."""

from app.db.enums.auth import Role
from app.db.enums.cases import (
    CasePriority,
    CaseStatus,
    Gender,
    MatchConfidence,
    SightingStatus,
)
from app.db.enums.defaults import (
    DEFAULT_CASE_PRIORITY,
    DEFAULT_CASE_STATUS,
    DEFAULT_SIGHTING_STATUS,
    DEFAULT_VERIFICATION_STATUS,
)
from app.db.enums.organizations import OrganizationType, VerificationStatus
from app.db.enums.permissions import (
    ROLES_CAN_MANAGE_CASES,
    ROLES_CAN_SELF_REGISTER,
    ROLES_CROSS_ORG,
)

__all__ = [
    "CasePriority",
    "CaseStatus",
    "DEFAULT_CASE_PRIORITY",
    "DEFAULT_CASE_STATUS",
    "DEFAULT_SIGHTING_STATUS",
    "DEFAULT_VERIFICATION_STATUS",
    "Gender",
    "MatchConfidence",
    "OrganizationType",
    "ROLES_CAN_MANAGE_CASES",
    "ROLES_CAN_SELF_REGISTER",
    "ROLES_CROSS_ORG",
    "Role",
    "SightingStatus",
    "VerificationStatus",
]
