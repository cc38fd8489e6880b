"""PostgreSQL membership repository implementation."""

from psycopg import AsyncConnection

from accessgate.domain.entities import Membership
from accessgate.domain.value_objects import MembershipType


class PostgresMembershipRepository:
    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_for_user(self, user_id: str, tenant_id: str) -> list[Membership]:
        """Active memberships of user inside tenant. Expiry is checked by the caller."""
        cur = await self._conn.execute(
            "SELECT id, user_id, organization_id, tenant_id, membership_type, role_id, "
            "is_active, expires_at "
            "FROM membership WHERE user_id = %s AND tenant_id = %s AND is_active",
            (user_id, tenant_id),
        )
        rows = await cur.fetchall()
        return [
            Membership(
                id=r[0],
                user_id=r[1],
                organization_id=r[2],
                tenant_id=r[3],
                membership_type=MembershipType(r[4]),
                role_id=r[5],
                is_active=r[6],
                expires_at=r[7],
            )
            for r in rows
        ]
