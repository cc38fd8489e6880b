"""Revoke permission use case."""

import logging
from uuid import UUID

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.use_cases.guards import (
    authorize,
    ensure_still_authorized,
    load_resource,
)
from accessgate.domain.value_objects import (
    ActorContext,
    AuditAction,
    PermissionAction,
    SubjectRef,
)

logger = logging.getLogger(__name__)


class RevokePermissionUseCase:
    """Revoke every valid grant of a permission to a subject on a resource."""

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
        subject: SubjectRef,
        resource_id: str,
        permission_id: UUID,
        reason: str | None = None,
    ) -> bool:
        """Revoke matching grants. Returns False when nothing was revoked."""
        now = self._clock.now()
        checked = await authorize(
            self._uow_factory, self._permission_checker, actor, resource_id, PermissionAction.ADMIN
        )
        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id)
            ensure_still_authorized(actor, checked, resource)
            grants = await uow.grants.list_for_subject(subject, resource.id)
            revoked = [g for g in grants if g.permission_id == permission_id and g.is_valid(now)]
            for grant in revoked:
                grant.revoke(actor.subject_id, reason, now)
                await uow.grants.update(grant)

        if not revoked:
            logger.debug("No valid grant of %s on %s for %s", permission_id, resource_id, subject)
            return False

        logger.info(
            "Revoked %d grant(s) of %s on %s from %s by %s",
            len(revoked),
            permission_id,
            resource_id,
            subject,
            actor.subject_id,
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.PERMISSION_REVOKED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                target_user_id=subject.user_id,
                role_id=subject.role_id,
                resource_id=resource_id,
                permission=str(permission_id),
                reason=reason,
                grant_ids=[str(g.id) for g in revoked],
            ),
        )
        return True
