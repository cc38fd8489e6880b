"""PostgreSQL grant repository implementation."""

from datetime import datetime
from uuid import UUID

from psycopg import AsyncConnection

from accessgate.domain.entities import Grant
from accessgate.domain.value_objects import GrantType, SubjectRef

_COLUMNS = (
    "id, resource_id, permission_id, granted_by, tenant_id, created_at, user_id, role_id, "
    "grant_type, expires_at, is_active, revoked_at, revoked_by, reason"
)

_VALID = "is_active AND revoked_at IS NULL AND (expires_at IS NULL OR expires_at > %s)"


def _to_grant(r: tuple) -> Grant:
    return Grant(
        id=r[0],
        resource_id=r[1],
        permission_id=r[2],
        granted_by=r[3],
        tenant_id=r[4],
        created_at=r[5],
        user_id=r[6],
        role_id=r[7],
        grant_type=GrantType(r[8]),
        expires_at=r[9],
        is_active=r[10],
        revoked_at=r[11],
        revoked_by=r[12],
        reason=r[13],
    )


def _subject_column(subject: SubjectRef) -> tuple[str, object]:
    if subject.is_user:
        return "user_id", subject.user_id
    return "role_id", subject.role_id


class PostgresGrantRepository:
    """Grant repository implementation.

    Uniqueness of active grants per (subject, resource, permission) is enforced
    by partial unique indexes; create_if_absent relies on them.
    """

    def __init__(self, conn: AsyncConnection) -> None:
        self._conn = conn

    async def list_for_subject(self, subject: SubjectRef, resource_id: str) -> list[Grant]:
        """Active grants to subject on resource. Expiry is checked by the caller."""
        column, value = _subject_column(subject)
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource_grant "
            f"WHERE {column} = %s AND resource_id = %s AND is_active",
            (value, resource_id),
        )

    async def list_for_roles(self, role_ids: list[UUID], resource_id: str) -> list[Grant]:
        if not role_ids:
            return []
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource_grant "
            "WHERE role_id = ANY(%s) AND resource_id = %s AND is_active",
            (list(role_ids), resource_id),
        )

    async def list_by_user(self, user_id: str, tenant_id: str) -> list[Grant]:
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource_grant "
            "WHERE user_id = %s AND tenant_id = %s AND is_active",
            (user_id, tenant_id),
        )

    async def list_by_roles(self, role_ids: list[UUID], tenant_id: str) -> list[Grant]:
        if not role_ids:
            return []
        return await self._fetch_all(
            f"SELECT {_COLUMNS} FROM resource_grant "
            "WHERE role_id = ANY(%s) AND tenant_id = %s AND is_active",
            (list(role_ids), tenant_id),
        )

    async def create_if_absent(self, grant: Grant, now: datetime) -> Grant:
        """Conditional insert; returns the new grant or the existing valid one."""
        column, value = _subject_column(grant.subject)
        # Expired rows still hold the partial unique index slot.
        await self._conn.execute(
            "UPDATE resource_grant SET is_active = false "
            f"WHERE {column} = %s AND resource_id = %s AND permission_id = %s "
            "AND is_active AND expires_at IS NOT NULL AND expires_at <= %s",
            (value, grant.resource_id, grant.permission_id, now),
        )
        for _ in range(2):
            cur = await self._conn.execute(
                f"INSERT INTO resource_grant ({_COLUMNS}) "
                "VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s) "
                "ON CONFLICT DO NOTHING RETURNING id",
                (
                    grant.id,
                    grant.resource_id,
                    grant.permission_id,
                    grant.granted_by,
                    grant.tenant_id,
                    grant.created_at,
                    grant.user_id,
                    grant.role_id,
                    grant.grant_type.value,
                    grant.expires_at,
                    grant.is_active,
                    grant.revoked_at,
                    grant.revoked_by,
                    grant.reason,
                ),
            )
            if await cur.fetchone():
                return grant
            cur = await self._conn.execute(
                f"SELECT {_COLUMNS} FROM resource_grant "
                f"WHERE {column} = %s AND resource_id = %s AND permission_id = %s AND {_VALID}",
                (value, grant.resource_id, grant.permission_id, now),
            )
            r = await cur.fetchone()
            if r:
                return _to_grant(r)
        raise RuntimeError(
            f"Could not store grant of {grant.permission_id} on {grant.resource_id} "
            f"for {grant.subject}"
        )

    async def update(self, grant: Grant) -> None:
        await self._conn.execute(
            "UPDATE resource_grant SET is_active=%s, revoked_at=%s, revoked_by=%s, reason=%s, "
            "expires_at=%s WHERE id=%s",
            (
                grant.is_active,
                grant.revoked_at,
                grant.revoked_by,
                grant.reason,
                grant.expires_at,
                grant.id,
            ),
        )

    async def _fetch_all(self, query: str, params: tuple) -> list[Grant]:
        cur = await self._conn.execute(query, params)
        rows = await cur.fetchall()
        return [_to_grant(r) for r in rows]
