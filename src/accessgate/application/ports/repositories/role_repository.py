"""Role repository port."""

from typing import Protocol
from uuid import UUID

from accessgate.domain.entities import Role


class RoleRepository(Protocol):
    """Port for role persistence. Returned roles carry their permission names."""

    async def get_by_id(self, role_id: UUID) -> Role | None: ...

    async def get_by_name(self, name: str, tenant_id: str | None = None) -> Role | None: ...

    async def list_by_ids(self, role_ids: list[UUID]) -> list[Role]: ...

    async def create(self, role: Role) -> Role: ...

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None: ...
