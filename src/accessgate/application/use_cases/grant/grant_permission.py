"""Grant permission use case."""

import logging
from datetime import datetime
from uuid import UUID, uuid4

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.use_cases.guards import (
    ensure_owner_or_permission,
    ensure_still_authorized,
    load_resource,
)
from accessgate.domain.entities import Grant
from accessgate.domain.exceptions import NotFound, TenantMismatch, ValidationError
from accessgate.domain.value_objects import (
    ActorContext,
    AuditAction,
    GrantType,
    PermissionAction,
    SubjectRef,
)

logger = logging.getLogger(__name__)


class GrantPermissionUseCase:
    """Grant a permission on a resource to a user or a role."""

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
        expires_at: datetime | None = None,
    ) -> Grant:
        """Grant permission. Actor must own the resource or have admin on it.

        Idempotent: an existing valid grant for the same subject, resource and
        permission is returned instead of creating a duplicate.
        """
        now = self._clock.now()
        if expires_at is not None and expires_at <= now:
            raise ValidationError("expires_at must be in the future")

        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id)
            permission = await uow.permissions.get_by_id(permission_id)
            if permission is None or not permission.is_active:
                raise NotFound("Permission", str(permission_id))
            if subject.role_id is not None:
                role = await uow.roles.get_by_id(subject.role_id)
                if role is None:
                    raise NotFound("Role", str(subject.role_id))
                if not role.applies_to_tenant(actor.tenant_id):
                    raise TenantMismatch(
                        f"Role {role.id} is not available in tenant {actor.tenant_id}"
                    )

        await ensure_owner_or_permission(
            self._permission_checker, actor, resource, PermissionAction.ADMIN
        )

        async with self._uow_factory() as uow:
            ensure_still_authorized(
                actor, resource, await load_resource(uow, resource_id, actor.tenant_id)
            )
            grant = Grant(
                id=uuid4(),
                resource_id=resource.id,
                permission_id=permission.id,
                granted_by=actor.subject_id,
                tenant_id=actor.tenant_id,
                created_at=now,
                user_id=subject.user_id,
                role_id=subject.role_id,
                grant_type=GrantType.DIRECT,
                expires_at=expires_at,
            )
            stored = await uow.grants.create_if_absent(grant, now)

        if stored.id != grant.id:
            logger.debug("%s already holds %s on %s", subject, permission.name, resource.id)
            return stored

        logger.info(
            "Granted %s on %s to %s by %s", permission.name, resource.id, subject, actor.subject_id
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.PERMISSION_GRANTED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                target_user_id=subject.user_id,
                role_id=subject.role_id,
                resource_id=resource.id,
                permission=permission.name,
                grant_id=str(stored.id),
                expires_at=expires_at.isoformat() if expires_at else None,
            ),
        )
        return stored
