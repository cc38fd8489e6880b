"""Resource repository port."""

from typing import Protocol

from accessgate.domain.entities import Resource


class ResourceRepository(Protocol):
    """Port for resource persistence."""

    async def get_by_id(self, resource_id: str) -> Resource | None: ...

    async def get_for_update(self, resource_id: str) -> Resource | None:
        """Get resource and hold its row lock until the transaction ends."""
        ...

    async def get_by_public_token(self, token: str) -> Resource | None: ...

    async def list_by_ids(self, resource_ids: list[str]) -> list[Resource]: ...

    async def list_children(self, resource_id: str) -> list[Resource]: ...

    async def list_by_owner(self, owner_id: str, tenant_id: str) -> list[Resource]: ...

    async def list_by_tenant(self, tenant_id: str) -> list[Resource]: ...

    async def list_by_organization(self, organization_id: str, tenant_id: str) -> list[Resource]: ...

    async def list_public(self, tenant_id: str) -> list[Resource]: ...

    async def create(self, resource: Resource) -> Resource: ...

    async def update(self, resource: Resource) -> None: ...

    async def lock_hierarchy(self, tenant_id: str) -> None:
        """Serialize hierarchy mutations within a tenant until the transaction ends."""
        ...
