"""Audit sink port."""

from typing import Protocol

from accessgate.domain.entities import AuditEvent


class AuditSink(Protocol):
    """Append-only receiver of audit events. Never read back by decisions."""

    async def record(self, event: AuditEvent) -> None: ...
