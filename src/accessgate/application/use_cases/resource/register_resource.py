"""Register resource use case."""

import logging
from uuid import uuid4

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.dto.resource_dto import RegisterResourceInput
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.use_cases.guards import authorize, load_resource
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import ValidationError
from accessgate.domain.value_objects import ActorContext, AuditAction, PermissionAction

logger = logging.getLogger(__name__)


class RegisterResourceUseCase:
    """Register a resource in the actor's tenant."""

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

    async def execute(self, actor: ActorContext, data: RegisterResourceInput) -> Resource:
        """Create resource. Owner defaults to the actor.

        Nesting under a parent requires admin on that parent.
        """
        name = (data.name or "").strip()
        resource_type = (data.resource_type or "").strip()
        if not name:
            raise ValidationError("Resource name is required")
        if not resource_type:
            raise ValidationError("Resource type is required")

        now = self._clock.now()
        if data.parent_resource_id is not None:
            await authorize(
                self._uow_factory,
                self._permission_checker,
                actor,
                data.parent_resource_id,
                PermissionAction.ADMIN,
            )
        async with self._uow_factory() as uow:
            if data.parent_resource_id is not None:
                await load_resource(uow, data.parent_resource_id, actor.tenant_id)
            resource = Resource(
                id=str(uuid4()),
                name=name,
                resource_type=resource_type,
                owner_id=data.owner_id or actor.subject_id,
                tenant_id=actor.tenant_id,
                created_at=now,
                updated_at=now,
                description=data.description,
                external_id=data.external_id,
                organization_id=data.organization_id,
                parent_resource_id=data.parent_resource_id,
            )
            await uow.resources.create(resource)

        logger.info(
            "Registered %s %s (%s) owner=%s tenant=%s",
            resource_type,
            resource.id,
            name,
            resource.owner_id,
            actor.tenant_id,
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.RESOURCE_CREATED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                target_user_id=resource.owner_id,
                resource_id=resource.id,
                resource_type=resource_type,
                parent_id=data.parent_resource_id,
            ),
        )
        return resource
