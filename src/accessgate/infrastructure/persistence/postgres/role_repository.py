"""PostgreSQL role repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from accessgate.domain.entities import Role
from accessgate.domain.value_objects import RoleScope

_SELECT = (
    "SELECT r.id, r.name, r.scope, r.description, r.tenant_id, r.is_system, r.is_active, "
    "COALESCE(array_agg(p.name) FILTER (WHERE p.id IS NOT NULL AND p.is_active), '{}') "
    "FROM role r "
    "LEFT JOIN role_permission rp ON rp.role_id = r.id "
    "LEFT JOIN permission p ON p.id = rp.permission_id"
)


def _to_role(r: tuple) -> Role:
    return Role(
        id=r[0],
        name=r[1],
        scope=RoleScope(r[2]),
        description=r[3],
        tenant_id=r[4],
        is_system=r[5],
        is_active=r[6],
        permissions=frozenset(r[7] or ()),
    )


class PostgresRoleRepository:
    """Role repository implementation. Roles are loaded with their permission names."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, role_id: UUID) -> Role | None:
        """Get role by id."""
        cur = await self._conn.execute(
            f"{_SELECT} WHERE r.id = %s GROUP BY r.id",
            (role_id,),
        )
        r = await cur.fetchone()
        return _to_role(r) if r else None

    async def get_by_name(self, name: str, tenant_id: str | None = None) -> Role | None:
        """Get role by name; tenant_id None means a system-wide role."""
        cur = await self._conn.execute(
            f"{_SELECT} WHERE r.name = %s AND r.tenant_id IS NOT DISTINCT FROM %s GROUP BY r.id",
            (name, tenant_id),
        )
        r = await cur.fetchone()
        return _to_role(r) if r else None

    async def list_by_ids(self, role_ids: list[UUID]) -> list[Role]:
        if not role_ids:
            return []
        cur = await self._conn.execute(
            f"{_SELECT} WHERE r.id = ANY(%s) GROUP BY r.id",
            (list(role_ids),),
        )
        rows = await cur.fetchall()
        return [_to_role(r) for r in rows]

    async def create(self, role: Role) -> Role:
        """Create role (without permissions; see add_permission)."""
        await self._conn.execute(
            "INSERT INTO role (id, name, scope, description, tenant_id, is_system, is_active) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                role.id,
                role.name,
                role.scope.value,
                role.description,
                role.tenant_id,
                role.is_system,
                role.is_active,
            ),
        )
        return role

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        await self._conn.execute(
            "INSERT INTO role_permission (role_id, permission_id) VALUES (%s, %s) "
            "ON CONFLICT DO NOTHING",
            (role_id, permission_id),
        )
