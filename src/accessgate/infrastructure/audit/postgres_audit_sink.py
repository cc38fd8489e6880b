"""Audit sink appending events to the audit_event table."""

from psycopg.types.json import Jsonb
from psycopg_pool import AsyncConnectionPool

from accessgate.domain.entities import AuditEvent


class PostgresAuditSink:
    """Append-only audit table writer.

    Uses its own pooled connection and transaction so that audit rows survive
    the rollback of the operation they describe.
    """

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def record(self, event: AuditEvent) -> None:
        async with self._pool.connection() as conn:
            await conn.execute(
                "INSERT INTO audit_event (id, action, tenant_id, occurred_at, success, actor_id, "
                "target_user_id, resource_id, permission, role_id, reason, details) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
                (
                    event.id,
                    event.action.value,
                    event.tenant_id,
                    event.occurred_at,
                    event.success,
                    event.actor_id,
                    event.target_user_id,
                    event.resource_id,
                    event.permission,
                    event.role_id,
                    event.reason,
                    Jsonb(event.details),
                ),
            )
