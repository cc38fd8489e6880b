"""Permission catalog - resolves permission names to definitions."""

from accessgate.application.ports import UnitOfWork
from accessgate.domain.entities import Permission


class PermissionCatalog:
    """Named permission lookup.

    Names are unique per (name, resource_type). Type-scoped permissions carry
    their type as a prefix (``document:read``), so callers pass the scoped name.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def resolve(self, name: str) -> Permission | None:
        """Return the active permission with this name, or None."""
        if not name or not name.strip():
            return None
        permission = await self._uow.permissions.get_by_name(name.strip())
        if permission is None or not permission.is_active:
            return None
        return permission

    async def list(self, resource_type: str | None = None) -> list[Permission]:
        permissions = await self._uow.permissions.list(resource_type=resource_type)
        return [p for p in permissions if p.is_active]
