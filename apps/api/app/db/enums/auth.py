"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    Platform account roles.

    - PUBLIC: Community member account (no organization)
    - NGO_ADMIN: Administrator of a registered NGO
    - NGO_MEMBER: Staff member of a registered NGO
    - POLICE: Law-enforcement officer
    - ADMIN: Platform administrator (organization optional)
    """

    PUBLIC = "public"
    NGO_ADMIN = "ngo_admin"
    NGO_MEMBER = "ngo_member"
    POLICE = "police"
    ADMIN = "admin"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_
