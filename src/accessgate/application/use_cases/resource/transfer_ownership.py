"""Transfer ownership use case."""

import logging
from dataclasses import replace

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock
from accessgate.application.use_cases.guards import ensure_owner, load_resource
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import ValidationError
from accessgate.domain.value_objects import ActorContext, AuditAction

logger = logging.getLogger(__name__)


class TransferOwnershipUseCase:
    """Hand a resource to a new owner. Only the current owner may do this."""

    def __init__(
        self,
        unit_of_work_factory: type,
        audit_sink: AuditSink,
        clock: Clock,
    ) -> None:
        self._uow_factory = unit_of_work_factory
        self._audit_sink = audit_sink
        self._clock = clock

    async def execute(
        self, actor: ActorContext, resource_id: str, new_owner_id: str
    ) -> Resource:
        new_owner_id = (new_owner_id or "").strip()
        if not new_owner_id:
            raise ValidationError("New owner is required")
        now = self._clock.now()
        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id, for_update=True)
            ensure_owner(actor, resource, "Only the owner can transfer ownership")
            previous_owner = resource.owner_id
            transferred = replace(resource, owner_id=new_owner_id, updated_at=now)
            await uow.resources.update(transferred)

        logger.info("Ownership of %s: %s -> %s", resource_id, previous_owner, new_owner_id)
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.OWNERSHIP_TRANSFERRED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                target_user_id=new_owner_id,
                resource_id=resource_id,
                previous_owner_id=previous_owner,
            ),
        )
        return transferred
