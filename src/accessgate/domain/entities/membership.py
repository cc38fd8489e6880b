"""Organization membership entity."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from accessgate.domain.value_objects import MembershipType


@dataclass
class Membership:
    """User membership in an organization, optionally carrying an organization role."""

    id: UUID
    user_id: str
    organization_id: str
    tenant_id: str
    membership_type: MembershipType = MembershipType.MEMBER
    role_id: UUID | None = None
    is_active: bool = True
    expires_at: datetime | None = None

    def is_valid(self, now: datetime) -> bool:
        return self.is_active and (self.expires_at is None or self.expires_at > now)
