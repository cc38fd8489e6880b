"""PostgreSQL Unit of Work implementation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from psycopg_pool import AsyncConnectionPool

from accessgate.infrastructure.persistence.postgres.grant_repository import (
    PostgresGrantRepository,
)
from accessgate.infrastructure.persistence.postgres.membership_repository import (
    PostgresMembershipRepository,
)
from accessgate.infrastructure.persistence.postgres.permission_repository import (
    PostgresPermissionRepository,
)
from accessgate.infrastructure.persistence.postgres.resource_repository import (
    PostgresResourceRepository,
)
from accessgate.infrastructure.persistence.postgres.role_assignment_repository import (
    PostgresRoleAssignmentRepository,
)
from accessgate.infrastructure.persistence.postgres.role_repository import (
    PostgresRoleRepository,
)


class PostgresUnitOfWork:
    """PostgreSQL Unit of Work - one connection, one transaction."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool
        self._conn: object | None = None
        self._conn_cm: object | None = None

    async def __aenter__(self) -> "PostgresUnitOfWork":
        self._conn_cm = self._pool.connection()
        self._conn = await self._conn_cm.__aenter__()
        self._permissions = PostgresPermissionRepository(self._conn)
        self._roles = PostgresRoleRepository(self._conn)
        self._role_assignments = PostgresRoleAssignmentRepository(self._conn)
        self._memberships = PostgresMembershipRepository(self._conn)
        self._resources = PostgresResourceRepository(self._conn)
        self._grants = PostgresGrantRepository(self._conn)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        if exc_type and self._conn:
            await self._conn.rollback()
        if self._conn_cm:
            await self._conn_cm.__aexit__(exc_type, exc_val, exc_tb)

    @property
    def permissions(self) -> PostgresPermissionRepository:
        return self._permissions

    @property
    def roles(self) -> PostgresRoleRepository:
        return self._roles

    @property
    def role_assignments(self) -> PostgresRoleAssignmentRepository:
        return self._role_assignments

    @property
    def memberships(self) -> PostgresMembershipRepository:
        return self._memberships

    @property
    def resources(self) -> PostgresResourceRepository:
        return self._resources

    @property
    def grants(self) -> PostgresGrantRepository:
        return self._grants

    async def commit(self) -> None:
        if self._conn:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn:
            await self._conn.rollback()


def create_uow_factory(pool: AsyncConnectionPool) -> object:
    """Create UnitOfWork factory (async context manager)."""

    @asynccontextmanager
    async def factory() -> AsyncIterator[PostgresUnitOfWork]:
        uow = PostgresUnitOfWork(pool)
        async with uow:
            try:
                yield uow
                await uow.commit()
            except BaseException:
                await uow.rollback()
                raise

    return factory
