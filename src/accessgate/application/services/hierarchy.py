"""Resource hierarchy - parent chains with cycle detection."""

from accessgate.application.ports import UnitOfWork
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import CycleDetected


class ResourceHierarchy:
    """Walks parent links. The store does not guarantee acyclicity, so every
    walk keeps a visited set and raises CycleDetected on a revisit."""

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    async def resolve_chain(self, resource_id: str) -> list[Resource]:
        """Ancestors of resource_id, nearest parent first.

        A dangling parent reference ends the chain.
        """
        resource = await self._uow.resources.get_by_id(resource_id)
        if resource is None:
            return []
        visited = {resource.id}
        chain: list[Resource] = []
        parent_id = resource.parent_resource_id
        while parent_id is not None:
            if parent_id in visited:
                raise CycleDetected(parent_id)
            visited.add(parent_id)
            parent = await self._uow.resources.get_by_id(parent_id)
            if parent is None:
                break
            chain.append(parent)
            parent_id = parent.parent_resource_id
        return chain

    async def is_descendant(self, candidate_id: str, ancestor_id: str) -> bool:
        """True if ancestor_id appears in candidate_id's parent chain."""
        return any(r.id == ancestor_id for r in await self.resolve_chain(candidate_id))

    async def children(self, resource_id: str) -> list[Resource]:
        return await self._uow.resources.list_children(resource_id)

    async def descendants(self, resource_ids: set[str], tenant_id: str) -> set[str]:
        """Ids reachable downwards from resource_ids (excluding the roots).

        An inactive child, or one in another tenant, is skipped together with
        its subtree: inheritance does not pass through it.
        """
        found: set[str] = set()
        frontier = list(resource_ids)
        seen = set(resource_ids)
        while frontier:
            current = frontier.pop()
            for child in await self._uow.resources.list_children(current):
                if child.id in seen:
                    continue
                seen.add(child.id)
                if not child.is_active or child.tenant_id != tenant_id:
                    continue
                found.add(child.id)
                frontier.append(child.id)
        return found
