"""Case and sighting enums."""

from enum import Enum


class CaseStatus(str, Enum):
    ACTIVE = "active"
    FOUND = "found"
    CLOSED = "closed"


class CasePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class SightingStatus(str, Enum):
    """Review state of a public sighting report."""

    PENDING = "pending"
    VERIFIED = "verified"
    FALSE_POSITIVE = "false_positive"


class MatchConfidence(str, Enum):
    """Bucketed photo-match similarity."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
