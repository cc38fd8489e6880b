"""PostgreSQL permission repository implementation."""

from uuid import UUID

from psycopg import AsyncConnection

from accessgate.domain.entities import Permission

_COLUMNS = "id, name, created_at, resource_type, description, is_system, is_active"


def _to_permission(r: tuple) -> Permission:
    return Permission(
        id=r[0],
        name=r[1],
        created_at=r[2],
        resource_type=r[3],
        description=r[4],
        is_system=r[5],
        is_active=r[6],
    )


class PostgresPermissionRepository:
    """Permission repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        """Get permission by id."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE id = %s",
            (permission_id,),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def get_by_name(self, name: str) -> Permission | None:
        """Get permission by name.

        Name alone is unique (ix_permission_name), narrower than (name, resource_type):
        type-scoped permissions are stored as "type:name", so "document:read" and a
        global "read" never collide.
        """
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission WHERE name = %s",
            (name,),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def get_by_name_and_type(
        self, name: str, resource_type: str | None
    ) -> Permission | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM permission "
            "WHERE name = %s AND resource_type IS NOT DISTINCT FROM %s",
            (name, resource_type),
        )
        r = await cur.fetchone()
        return _to_permission(r) if r else None

    async def create(self, permission: Permission) -> Permission:
        """Create permission."""
        await self._conn.execute(
            f"INSERT INTO permission ({_COLUMNS}) VALUES (%s, %s, %s, %s, %s, %s, %s)",
            (
                permission.id,
                permission.name,
                permission.created_at,
                permission.resource_type,
                permission.description,
                permission.is_system,
                permission.is_active,
            ),
        )
        return permission

    async def list(self, *, resource_type: str | None = None) -> list[Permission]:
        """List permissions, optionally only those scoped to resource_type."""
        q = f"SELECT {_COLUMNS} FROM permission"
        params: tuple = ()
        if resource_type is not None:
            q += " WHERE resource_type = %s"
            params = (resource_type,)
        cur = await self._conn.execute(q + " ORDER BY name", params)
        rows = await cur.fetchall()
        return [_to_permission(r) for r in rows]
