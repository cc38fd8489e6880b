"""Resource entity - anything permissions can be applied to."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Resource:
    """Resource - owned, tenant-bound, optionally nested and publicly published."""

    id: str
    name: str
    resource_type: str
    owner_id: str
    tenant_id: str
    created_at: datetime
    updated_at: datetime
    description: str | None = None
    external_id: str | None = None
    organization_id: str | None = None
    parent_resource_id: str | None = None
    is_public: bool = False
    public_permissions: frozenset[str] = field(default_factory=frozenset)
    public_link_token: str | None = None
    public_link_expires_at: datetime | None = None
    is_active: bool = True

    def is_public_link_valid(self, now: datetime) -> bool:
        """Token present and not expired."""
        return self.public_link_token is not None and (
            self.public_link_expires_at is None or self.public_link_expires_at > now
        )

    def allows_anonymous(self, permission_name: str) -> bool:
        return self.is_public and permission_name in self.public_permissions
