"""Get children use case."""

from accessgate.application.ports import PermissionChecker
from accessgate.application.services import ResourceHierarchy
from accessgate.application.use_cases.guards import load_resource
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import PermissionDenied
from accessgate.domain.value_objects import ActorContext, PermissionAction


class GetChildrenUseCase:
    """List direct children of a resource."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker

    async def execute(self, actor: ActorContext, resource_id: str) -> list[Resource]:
        """Direct children in the actor's tenant. Actor must have read on the parent."""
        has_read = await self._permission_checker.check(
            actor.subject_id, resource_id, PermissionAction.READ, actor.tenant_id
        )
        if not has_read:
            raise PermissionDenied("User does not have read access to resource")

        async with self._uow_factory() as uow:
            parent = await load_resource(uow, resource_id, actor.tenant_id)
            children = await ResourceHierarchy(uow).children(parent.id)
        return [c for c in children if c.tenant_id == actor.tenant_id and c.is_active]
