"""PostgreSQL role assignment repository implementation."""

from psycopg import AsyncConnection

from accessgate.domain.entities import RoleAssignment


class PostgresRoleAssignmentRepository:
    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_active_for_user(self, user_id: str, tenant_id: str) -> list[RoleAssignment]:
        """Active assignments of user inside tenant."""
        cur = await self._conn.execute(
            "SELECT id, user_id, role_id, tenant_id, created_at, assigned_by, is_active "
            "FROM role_assignment WHERE user_id = %s AND tenant_id = %s AND is_active",
            (user_id, tenant_id),
        )
        rows = await cur.fetchall()
        return [
            RoleAssignment(
                id=r[0],
                user_id=r[1],
                role_id=r[2],
                tenant_id=r[3],
                created_at=r[4],
                assigned_by=r[5],
                is_active=r[6],
            )
            for r in rows
        ]
