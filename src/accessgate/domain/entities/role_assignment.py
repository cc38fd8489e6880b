"""Role assignment entity - user holds a role inside a tenant."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass
class RoleAssignment:
    id: UUID
    user_id: str
    role_id: UUID
    tenant_id: str
    created_at: datetime
    assigned_by: str | None = None
    is_active: bool = True
