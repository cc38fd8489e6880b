"""Get accessible resources use case."""

from accessgate.application.dto.resource_dto import AccessibleResourcesQuery
from accessgate.application.ports import Clock
from accessgate.application.services import PermissionCatalog, ResourceHierarchy, RoleAggregator
from accessgate.domain.entities import Resource


class GetAccessibleResourcesUseCase:
    """List resources a subject can reach in a tenant.

    Mirrors the decision sources: ownership, valid direct grants, valid grants
    to held roles, tenant roles (every resource in the tenant) and organization
    roles (every resource of that organization). Children of a reachable
    resource are reachable through inheritance.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self, query: AccessibleResourcesQuery) -> list[Resource]:
        if not query.subject_id:
            return []
        now = self._clock.now()
        tenant_id = query.tenant_id
        async with self._uow_factory() as uow:
            permission_id = None
            if query.permission_name is not None:
                permission = await PermissionCatalog(uow).resolve(query.permission_name)
                if permission is None:
                    return []
                permission_id = permission.id

            def grant_matches(grant) -> bool:
                return grant.is_valid(now) and (
                    permission_id is None or grant.permission_id == permission_id
                )

            found: dict[str, Resource] = {
                r.id: r for r in await uow.resources.list_by_owner(query.subject_id, tenant_id)
            }
            reachable_ids = set(found)
            reachable_ids.update(
                g.resource_id
                for g in await uow.grants.list_by_user(query.subject_id, tenant_id)
                if grant_matches(g)
            )

            aggregator = RoleAggregator(uow)
            tenant_roles = await aggregator.tenant_roles(query.subject_id, tenant_id)
            org_roles = await aggregator.organization_roles(query.subject_id, tenant_id, now)
            held_roles = list(tenant_roles) + [r for roles in org_roles.values() for r in roles]
            if held_roles:
                reachable_ids.update(
                    g.resource_id
                    for g in await uow.grants.list_by_roles(
                        list({r.id for r in held_roles}), tenant_id
                    )
                    if grant_matches(g)
                )

            if self._roles_cover(tenant_roles, query.permission_name):
                for r in await uow.resources.list_by_tenant(tenant_id):
                    found[r.id] = r
            for organization_id, roles in org_roles.items():
                if self._roles_cover(roles, query.permission_name):
                    for r in await uow.resources.list_by_organization(organization_id, tenant_id):
                        found[r.id] = r

            reachable_ids.update(found)
            await self._load_missing(uow, reachable_ids, found)
            roots = {
                rid for rid, r in found.items() if r.is_active and r.tenant_id == tenant_id
            }
            await self._load_missing(
                uow, await ResourceHierarchy(uow).descendants(roots, tenant_id), found
            )

        result = [
            r
            for r in found.values()
            if r.tenant_id == tenant_id
            and r.is_active
            and (query.resource_type is None or r.resource_type == query.resource_type)
        ]
        return sorted(result, key=lambda r: (r.name, r.id))

    @staticmethod
    def _roles_cover(roles: list, permission_name: str | None) -> bool:
        if not roles:
            return False
        if permission_name is None:
            return True
        return RoleAggregator.any_allows(roles, permission_name)

    @staticmethod
    async def _load_missing(uow, resource_ids: set[str], found: dict[str, Resource]) -> None:
        missing = [rid for rid in resource_ids if rid not in found]
        if missing:
            for r in await uow.resources.list_by_ids(missing):
                found[r.id] = r
