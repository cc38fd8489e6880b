"""Organization membership type."""

from enum import StrEnum


class MembershipType(StrEnum):
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    GUEST = "GUEST"
