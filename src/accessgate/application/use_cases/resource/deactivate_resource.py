"""Deactivate (soft-delete) resource use case."""

import logging
from dataclasses import replace

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock
from accessgate.application.use_cases.guards import ensure_owner, load_resource
from accessgate.domain.value_objects import ActorContext, AuditAction

logger = logging.getLogger(__name__)


class DeactivateResourceUseCase:
    """Soft delete: the row stays, every decision on it denies."""

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_sink: AuditSink,
        clock: Clock,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_sink = audit_sink
        self._clock = clock

    async def execute(self, actor: ActorContext, resource_id: str) -> None:
        now = self._clock.now()
        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id, for_update=True)
            ensure_owner(actor, resource, "Only the owner can delete a resource")
            await uow.resources.update(replace(resource, is_active=False, updated_at=now))

        logger.info("Deactivated %s by %s", resource_id, actor.subject_id)
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.RESOURCE_DELETED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                resource_id=resource_id,
            ),
        )
