"""Role scope."""

from enum import StrEnum


class RoleScope(StrEnum):
    """Level at which a role is meant to be assigned."""

    APPLICATION = "APPLICATION"
    ORGANIZATION = "ORGANIZATION"
    TENANT = "TENANT"
    RESOURCE = "RESOURCE"
