"""Publish resource use case."""

import logging
import secrets
from dataclasses import replace
from datetime import datetime

from accessgate.application.audit import audit_event, emit_audit
from accessgate.application.ports import AuditSink, Clock, PermissionChecker
from accessgate.application.services import PermissionCatalog
from accessgate.application.use_cases.guards import (
    authorize,
    ensure_still_authorized,
    load_resource,
)
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import NotFound, ValidationError
from accessgate.domain.value_objects import ActorContext, AuditAction, PermissionAction

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


def generate_link_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


class PublishResourceUseCase:
    """Make a resource public with an explicit anonymous allow-list."""

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
        permission_names: list[str],
        link_expires_at: datetime | None = None,
    ) -> Resource:
        """Publish resource. Actor must own it or hold publish.

        An existing link token is kept; a new one is generated otherwise.
        """
        names = frozenset(n.strip() for n in permission_names if n and n.strip())
        if not names:
            raise ValidationError("At least one public permission is required")
        now = self._clock.now()
        if link_expires_at is not None and link_expires_at <= now:
            raise ValidationError("link_expires_at must be in the future")

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
            catalog = PermissionCatalog(uow)
            for name in sorted(names):
                if await catalog.resolve(name) is None:
                    raise NotFound("Permission", name)

            published = replace(
                resource,
                is_public=True,
                public_permissions=names,
                public_link_token=resource.public_link_token or generate_link_token(),
                public_link_expires_at=link_expires_at,
                updated_at=now,
            )
            await uow.resources.update(published)

        logger.info(
            "Published %s with %s by %s", resource_id, sorted(names), actor.subject_id
        )
        await emit_audit(
            self._audit_sink,
            audit_event(
                AuditAction.RESOURCE_PUBLISHED,
                actor.tenant_id,
                now,
                actor_id=actor.subject_id,
                resource_id=resource_id,
                public_permissions=sorted(names),
                link_expires_at=link_expires_at.isoformat() if link_expires_at else None,
            ),
        )
        return published
