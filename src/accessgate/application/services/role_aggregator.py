"""Role aggregator - flat permission sets and the roles a user holds."""

from datetime import datetime
from uuid import UUID

from accessgate.application.ports import UnitOfWork
from accessgate.domain.entities import Role


class RoleAggregator:
    """Resolves which roles apply to a user and what they allow.

    Roles are flat: a role's effective permissions are exactly its assigned
    set. A user holds a role in a tenant through an active role assignment in
    that tenant, or through a valid organization membership whose organization
    matches the resource being checked.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @staticmethod
    def permissions_for(role: Role) -> frozenset[str]:
        """Effective permission names of a role (empty when inactive)."""
        if not role.is_active:
            return frozenset()
        return frozenset(role.permissions)

    @classmethod
    def any_allows(cls, roles: list[Role], permission_name: str) -> bool:
        return any(permission_name in cls.permissions_for(r) for r in roles)

    async def tenant_roles(self, user_id: str, tenant_id: str) -> list[Role]:
        """Roles held through active assignments in the tenant."""
        assignments = await self._uow.role_assignments.list_active_for_user(user_id, tenant_id)
        role_ids = [a.role_id for a in assignments if a.is_active and a.tenant_id == tenant_id]
        return await self._load(role_ids, tenant_id)

    async def organization_roles(
        self, user_id: str, tenant_id: str, now: datetime
    ) -> dict[str, list[Role]]:
        """Roles held through valid memberships, keyed by organization id."""
        memberships = await self._uow.memberships.list_for_user(user_id, tenant_id)
        by_org: dict[str, list[UUID]] = {}
        for m in memberships:
            if m.role_id is None or m.tenant_id != tenant_id or not m.is_valid(now):
                continue
            by_org.setdefault(m.organization_id, []).append(m.role_id)
        return {org: await self._load(ids, tenant_id) for org, ids in by_org.items()}

    async def roles_for(
        self,
        user_id: str,
        tenant_id: str,
        now: datetime,
        organization_id: str | None = None,
    ) -> list[Role]:
        """All roles applying to a resource in the given organization (if any)."""
        roles = await self.tenant_roles(user_id, tenant_id)
        if organization_id is not None:
            org_roles = await self.organization_roles(user_id, tenant_id, now)
            seen = {r.id for r in roles}
            roles += [r for r in org_roles.get(organization_id, []) if r.id not in seen]
        return roles

    async def _load(self, role_ids: list[UUID], tenant_id: str) -> list[Role]:
        if not role_ids:
            return []
        unique_ids = list(dict.fromkeys(role_ids))
        roles = await self._uow.roles.list_by_ids(unique_ids)
        return [r for r in roles if r.is_active and r.applies_to_tenant(tenant_id)]
