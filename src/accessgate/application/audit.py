"""Audit emission helpers shared by decisions and mutations."""

import logging
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from accessgate.application.ports import AuditSink
from accessgate.domain.entities import AuditEvent
from accessgate.domain.value_objects import AuditAction

logger = logging.getLogger(__name__)


def audit_event(
    action: AuditAction,
    tenant_id: str | None,
    occurred_at: datetime,
    *,
    success: bool = True,
    actor_id: str | None = None,
    target_user_id: str | None = None,
    resource_id: str | None = None,
    permission: str | None = None,
    role_id: UUID | None = None,
    reason: str | None = None,
    **details: Any,
) -> AuditEvent:
    """Build an audit event; extra keyword arguments land in ``details``."""
    return AuditEvent(
        id=uuid4(),
        action=action,
        tenant_id=tenant_id,
        occurred_at=occurred_at,
        success=success,
        actor_id=actor_id,
        target_user_id=target_user_id,
        resource_id=resource_id,
        permission=permission,
        role_id=role_id,
        reason=reason,
        details=details,
    )


async def emit_audit(sink: AuditSink, event: AuditEvent) -> None:
    """Hand the event to the sink. Sink failures are logged and never propagate."""
    try:
        await sink.record(event)
    except Exception:
        logger.exception(
            "Audit sink failed to record %s for resource %s", event.action, event.resource_id
        )
