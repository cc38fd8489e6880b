"""Set parent use case."""

import logging
from dataclasses import replace

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.services import ResourceHierarchy
from accessgate.application.use_cases.guards import (
    authorize,
    ensure_still_authorized,
    load_resource,
)
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import CycleDetected, NotFound, TenantMismatch
from accessgate.domain.value_objects import ActorContext, AuditAction, PermissionAction

logger = logging.getLogger(__name__)


class SetParentUseCase:
    """Attach a resource under a parent, or detach it with ``None``."""

    def __init__(
        self,
        unit_of_work_factory: type,
        permission_checker: PermissionChecker,
        audit_sink: AuditSink,
        clock: Clock,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._permission_checker = permission_checker
        self._audit_sink = audit_sink
        self._clock = clock

    async def execute(
        self,
        actor: ActorContext,
        resource_id: str,
        parent_resource_id: str | None,
    ) -> Resource:
        """Set parent. Actor must own the resource or hold admin on it.

        Raises CycleDetected when the parent is the resource itself or one of
        its descendants. Hierarchy writes in a tenant are serialized so two
        concurrent moves cannot close a loop.
        """
        now = self._clock.now()
        checked = await authorize(
            self._uow_factory, self._permission_checker, actor, resource_id, PermissionAction.ADMIN
        )
        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id, for_update=True)
            ensure_still_authorized(actor, checked, resource)
            previous_parent = resource.parent_resource_id

            if parent_resource_id is not None:
                if parent_resource_id == resource.id:
                    raise CycleDetected(resource.id, "A resource cannot be its own parent")
                await uow.resources.lock_hierarchy(actor.tenant_id)
                parent = await uow.resources.get_by_id(parent_resource_id)
                if parent is None or not parent.is_active:
                    raise NotFound("Resource", parent_resource_id)
                if parent.tenant_id != actor.tenant_id:
                    raise TenantMismatch("Parent resource belongs to another tenant")
                if await ResourceHierarchy(uow).is_descendant(parent.id, resource.id):
                    raise CycleDetected(
                        resource.id, f"Resource {parent.id} is a descendant of {resource.id}"
                    )

            moved = replace(resource, parent_resource_id=parent_resource_id, updated_at=now)
            await uow.resources.update(moved)

        logger.info(
            "Parent of %s changed %s -> %s by %s",
            resource_id,
            previous_parent,
            parent_resource_id,
            actor.subject_id,
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.PARENT_CHANGED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                resource_id=resource_id,
                previous_parent_id=previous_parent,
                parent_id=parent_resource_id,
            ),
        )
        return moved
