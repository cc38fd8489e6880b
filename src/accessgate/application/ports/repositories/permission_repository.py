"""Permission repository port."""

from typing import Protocol
from uuid import UUID

from accessgate.domain.entities import Permission


class PermissionRepository(Protocol):
    """Port for the permission catalog persistence."""

    async def get_by_id(self, permission_id: UUID) -> Permission | None: ...

    async def get_by_name(self, name: str) -> Permission | None:
        """Get permission by name. Names are unique across the whole catalog.

        Type-scoped permissions carry their type as a prefix ("document:read"),
        which makes name alone a narrower key than (name, resource_type).
        """
        ...

    async def get_by_name_and_type(
        self, name: str, resource_type: str | None
    ) -> Permission | None: ...

    async def list(self, *, resource_type: str | None = None) -> list[Permission]: ...

    async def create(self, permission: Permission) -> Permission: ...
