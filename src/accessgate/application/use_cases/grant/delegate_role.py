"""Delegate (share) a role's permissions on a resource to a user."""

import logging
from uuid import UUID, uuid4

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.services import PermissionCatalog, RoleAggregator
from accessgate.application.use_cases.guards import (
    ensure_owner_or_permission,
    ensure_still_authorized,
    load_resource,
)
from accessgate.domain.entities import Grant
from accessgate.domain.exceptions import NotFound, TenantMismatch
from accessgate.domain.value_objects import (
    ActorContext,
    AuditAction,
    GrantType,
    PermissionAction,
    SubjectRef,
)

logger = logging.getLogger(__name__)


class DelegateRoleUseCase:
    """Share a resource: one DELEGATED grant per permission of the role."""

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
        target_user_id: str,
        role_id: UUID,
    ) -> list[Grant]:
        """Expand role permissions into grants for target user. Actor needs share."""
        subject = SubjectRef.user(target_user_id)
        now = self._clock.now()
        grants: list[Grant] = []

        async with self._uow_factory() as uow:
            resource = await load_resource(uow, resource_id, actor.tenant_id)
            role = await uow.roles.get_by_id(role_id)
            if role is None:
                raise NotFound("Role", str(role_id))
            if not role.applies_to_tenant(actor.tenant_id):
                raise TenantMismatch(
                    f"Role {role.id} is not available in tenant {actor.tenant_id}"
                )

        await ensure_owner_or_permission(
            self._permission_checker, actor, resource, PermissionAction.SHARE
        )

        async with self._uow_factory() as uow:
            ensure_still_authorized(
                actor, resource, await load_resource(uow, resource_id, actor.tenant_id)
            )
            catalog = PermissionCatalog(uow)
            for name in sorted(RoleAggregator.permissions_for(role)):
                permission = await catalog.resolve(name)
                if permission is None:
                    logger.warning("Role %s references unknown permission %s", role.name, name)
                    continue
                grant = Grant(
                    id=uuid4(),
                    resource_id=resource.id,
                    permission_id=permission.id,
                    granted_by=actor.subject_id,
                    tenant_id=actor.tenant_id,
                    created_at=now,
                    user_id=subject.user_id,
                    grant_type=GrantType.DELEGATED,
                )
                grants.append(await uow.grants.create_if_absent(grant, now))

        logger.info(
            "Shared %s with %s as %s (%d grants) by %s",
            resource_id,
            target_user_id,
            role.name,
            len(grants),
            actor.subject_id,
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.RESOURCE_SHARED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                target_user_id=target_user_id,
                resource_id=resource_id,
                role_id=role.id,
                grant_ids=[str(g.id) for g in grants],
            ),
        )
        return grants
