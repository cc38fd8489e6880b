"""Unpublish resource use case."""

import logging
from dataclasses import replace

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.use_cases.guards import (
    authorize,
    ensure_still_authorized,
    load_resource,
)
from accessgate.domain.entities import Resource
from accessgate.domain.value_objects import ActorContext, AuditAction, PermissionAction

logger = logging.getLogger(__name__)


class UnpublishResourceUseCase:
    """Revoke all anonymous access: flag, allow-list, token and expiry cleared together."""

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

    async def execute(self, actor: ActorContext, resource_id: str) -> Resource:
        now = self._clock.now()
        checked = await authorize(
            self._uow_factory,
            self._permission_checker,
            actor,
            resource_id,
            PermissionAction.PUBLISH,
        )
        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id, for_update=True)
            ensure_still_authorized(actor, checked, resource)
            unpublished = replace(
                resource,
                is_public=False,
                public_permissions=frozenset(),
                public_link_token=None,
                public_link_expires_at=None,
                updated_at=now,
            )
            await uow.resources.update(unpublished)

        logger.info("Unpublished %s by %s", resource_id, actor.subject_id)
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.RESOURCE_UNPUBLISHED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                resource_id=resource_id,
            ),
        )
        return unpublished
