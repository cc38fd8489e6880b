"""Audit event - immutable record of a decision or mutation."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

from accessgate.domain.value_objects import AuditAction


@dataclass(frozen=True)
class AuditEvent:
    id: UUID
    action: AuditAction
    tenant_id: str | None
    occurred_at: datetime
    success: bool = True
    actor_id: str | None = None
    target_user_id: str | None = None
    resource_id: str | None = None
    permission: str | None = None
    role_id: UUID | None = None
    reason: str | None = None
    details: dict[str, Any] = field(default_factory=dict)
