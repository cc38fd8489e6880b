"""Audit sink writing one log line per event."""

import logging

from accessgate.domain.entities import AuditEvent
from accessgate.logging import safe_preview

logger = logging.getLogger("accessgate.audit")


class LoggingAuditSink:
    """Writes audit events to the ``accessgate.audit`` logger at INFO."""

    async def record(self, event: AuditEvent) -> None:
        logger.info(
            "audit action=%s tenant=%s success=%s actor=%s target=%s resource=%s "
            "permission=%s role=%s reason=%s details=%s",
            event.action.value,
            event.tenant_id,
            event.success,
            event.actor_id,
            event.target_user_id,
            event.resource_id,
            event.permission,
            event.role_id,
            safe_preview(event.reason),
            safe_preview(event.details),
        )
