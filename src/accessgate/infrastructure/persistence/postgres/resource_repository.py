"""PostgreSQL resource repository implementation."""

from psycopg import AsyncConnection

from accessgate.domain.entities import Resource

_COLUMNS = (
    "id, name, resource_type, owner_id, tenant_id, created_at, updated_at, description, "
    "external_id, organization_id, parent_resource_id, is_public, public_permissions, "
    "public_link_token, public_link_expires_at, is_active"
)


def _to_resource(r: tuple) -> Resource:
    return Resource(
        id=r[0],
        name=r[1],
        resource_type=r[2],
        owner_id=r[3],
        tenant_id=r[4],
        created_at=r[5],
        updated_at=r[6],
        description=r[7],
        external_id=r[8],
        organization_id=r[9],
        parent_resource_id=r[10],
        is_public=r[11],
        public_permissions=frozenset(r[12] or ()),
        public_link_token=r[13],
        public_link_expires_at=r[14],
        is_active=r[15],
    )


class PostgresResourceRepository:
    """Resource repository implementation."""

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def get_by_id(self, resource_id: str) -> Resource | None:
        """Get resource by id (active or not)."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM resource WHERE id = %s",
            (resource_id,),
        )
        r = await cur.fetchone()
        return _to_resource(r) if r else None

    async def get_for_update(self, resource_id: str) -> Resource | None:
        """Get resource with a row lock; concurrent mutations of it wait for this transaction."""
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM resource WHERE id = %s FOR UPDATE",
            (resource_id,),
        )
        r = await cur.fetchone()
        return _to_resource(r) if r else None

    async def get_by_public_token(self, token: str) -> Resource | None:
        cur = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM resource WHERE public_link_token = %s",
            (token,),
        )
        r = await cur.fetchone()
        return _to_resource(r) if r else None

    async def list_by_ids(self, resource_ids: list[str]) -> list[Resource]:
        if not resource_ids:
            return []
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource WHERE id = ANY(%s)", (list(resource_ids),)
        )

    async def list_children(self, resource_id: str) -> list[Resource]:
        """Direct children, any tenant; callers filter."""
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource WHERE parent_resource_id = %s ORDER BY name, id",
            (resource_id,),
        )

    async def list_by_owner(self, owner_id: str, tenant_id: str) -> list[Resource]:
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource "
            "WHERE owner_id = %s AND tenant_id = %s AND is_active",
            (owner_id, tenant_id),
        )

    async def list_by_tenant(self, tenant_id: str) -> list[Resource]:
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource WHERE tenant_id = %s AND is_active",
            (tenant_id,),
        )

    async def list_by_organization(self, organization_id: str, tenant_id: str) -> list[Resource]:
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource "
            "WHERE organization_id = %s AND tenant_id = %s AND is_active",
            (organization_id, tenant_id),
        )

    async def list_public(self, tenant_id: str) -> list[Resource]:
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource "
            "WHERE tenant_id = %s AND is_public AND is_active ORDER BY name, id",
            (tenant_id,),
        )

    async def create(self, resource: Resource) -> Resource:
        """Create resource."""
        await self._conn.execute(
            f"INSERT INTO resource ({_COLUMNS}) "
            "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)",
            (
                resource.id,
                resource.name,
                resource.resource_type,
                resource.owner_id,
                resource.tenant_id,
                resource.created_at,
                resource.updated_at,
                resource.description,
                resource.external_id,
                resource.organization_id,
                resource.parent_resource_id,
                resource.is_public,
                sorted(resource.public_permissions),
                resource.public_link_token,
                resource.public_link_expires_at,
                resource.is_active,
            ),
        )
        return resource

    async def update(self, resource: Resource) -> None:
        """Update mutable fields in one statement."""
        await self._conn.execute(
            "UPDATE resource SET name=%s, description=%s, owner_id=%s, organization_id=%s, "
            "parent_resource_id=%s, is_public=%s, public_permissions=%s, public_link_token=%s, "
            "public_link_expires_at=%s, is_active=%s, updated_at=%s WHERE id=%s",
            (
                resource.name,
                resource.description,
                resource.owner_id,
                resource.organization_id,
                resource.parent_resource_id,
                resource.is_public,
                sorted(resource.public_permissions),
                resource.public_link_token,
                resource.public_link_expires_at,
                resource.is_active,
                resource.updated_at,
                resource.id,
            ),
        )

    async def lock_hierarchy(self, tenant_id: str) -> None:
        """Transaction-scoped advisory lock keyed by tenant."""
        await self._conn.execute(
            "SELECT pg_advisory_xact_lock(hashtext('resource_hierarchy:' || %s))",
            (tenant_id,),
        )

    async def _fetch_all(self, query: str, params: tuple) -> list[Resource]:
        cur = await self._conn.execute(query, params)
        rows = await cur.fetchall()
        return [_to_resource(r) for r in rows]
