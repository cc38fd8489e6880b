"""How a grant came into existence."""

from enum import StrEnum


class GrantType(StrEnum):
    """Grant origin."""

    DIRECT = "DIRECT"
    INHERITED = "INHERITED"
    DELEGATED = "DELEGATED"
