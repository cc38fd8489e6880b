"""Role assignment repository port."""

from typing import Protocol

from accessgate.domain.entities import RoleAssignment


class RoleAssignmentRepository(Protocol):
    async def list_active_for_user(self, user_id: str, tenant_id: str) -> list[RoleAssignment]: ...
