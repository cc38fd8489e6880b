"""Grant entity - explicit allow of a permission on a resource."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from accessgate.domain.value_objects import GrantType, SubjectRef


@dataclass
class Grant:
    """Grant addressed to exactly one of user_id / role_id.

    A grant counts only while valid: active, not revoked and not expired.
    Expiry is evaluated at read time; nothing sweeps expired rows.
    """

    id: UUID
    resource_id: str
    permission_id: UUID
    granted_by: str
    tenant_id: str
    created_at: datetime
    user_id: str | None = None
    role_id: UUID | None = None
    grant_type: GrantType = GrantType.DIRECT
    expires_at: datetime | None = None
    is_active: bool = True
    revoked_at: datetime | None = None
    revoked_by: str | None = None
    reason: str | None = None

    @property
    def subject(self) -> SubjectRef:
        return SubjectRef(user_id=self.user_id, role_id=self.role_id)

    def is_valid(self, now: datetime) -> bool:
        return (
            self.is_active
            and self.revoked_at is None
            and (self.expires_at is None or self.expires_at > now)
        )

    def revoke(self, revoked_by: str, reason: str | None, now: datetime) -> None:
        self.is_active = False
        self.revoked_at = now
        self.revoked_by = revoked_by
        self.reason = reason
