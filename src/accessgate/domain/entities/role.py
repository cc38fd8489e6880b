"""Role entity for RBAC."""

from dataclasses import dataclass, field
from uuid import UUID

from accessgate.domain.value_objects import RoleScope


@dataclass
class Role:
    """Role - flat bundle of permission names. tenant_id None means system-wide."""

    id: UUID
    name: str
    scope: RoleScope
    description: str | None = None
    tenant_id: str | None = None
    is_system: bool = False
    is_active: bool = True
    permissions: frozenset[str] = field(default_factory=frozenset)

    def applies_to_tenant(self, tenant_id: str) -> bool:
        return self.tenant_id is None or self.tenant_id == tenant_id
