"""Pytest fixtures for AccessGate tests."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from accessgate.domain.entities import (
    AuditEvent,
    Grant,
    Membership,
    Permission,
    Resource,
    Role,
    RoleAssignment,
)
from accessgate.domain.value_objects import (
    GrantType,
    PermissionAction,
    RoleScope,
    SubjectRef,
)
from accessgate.infrastructure.permission.permission_checker import (
    AccessGatePermissionChecker,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
TENANT = "tenant-a"
OTHER_TENANT = "tenant-b"


# Row locks taken by the current fake transaction.
_held_locks: ContextVar[list[asyncio.Lock]] = ContextVar("held_locks", default=[])


# --- Fake repositories ---


class FakePermissionRepository:
    """In-memory permission catalog."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Permission] = {}

    async def get_by_id(self, permission_id: UUID) -> Permission | None:
        return self._by_id.get(permission_id)

    async def get_by_name(self, name: str) -> Permission | None:
        for p in self._by_id.values():
            if p.name == name:
                return p
        return None

    async def get_by_name_and_type(
        self, name: str, resource_type: str | None
    ) -> Permission | None:
        for p in self._by_id.values():
            if p.name == name and p.resource_type == resource_type:
                return p
        return None

    async def create(self, permission: Permission) -> Permission:
        self._by_id[permission.id] = permission
        return permission

    def add_permission(
        self, name: str, resource_type: str | None = None, is_active: bool = True
    ) -> Permission:
        """Helper to add permission for tests."""
        permission = Permission(
            id=uuid4(),
            name=name,
            created_at=NOW,
            resource_type=resource_type,
            is_system=True,
            is_active=is_active,
        )
        self._by_id[permission.id] = permission
        return permission

    async def list(self, *, resource_type: str | None = None) -> list[Permission]:
        items = list(self._by_id.values())
        if resource_type is not None:
            items = [p for p in items if p.resource_type == resource_type]
        return sorted(items, key=lambda p: p.name)


class FakeRoleRepository:
    """In-memory role repository; add_permission resolves names via the catalog."""

    def __init__(self, permissions: FakePermissionRepository) -> None:
        self._by_id: dict[UUID, Role] = {}
        self._permissions = permissions

    async def get_by_id(self, role_id: UUID) -> Role | None:
        return self._by_id.get(role_id)

    async def get_by_name(self, name: str, tenant_id: str | None = None) -> Role | None:
        for r in self._by_id.values():
            if r.name == name and r.tenant_id == tenant_id:
                return r
        return None

    async def list_by_ids(self, role_ids: list[UUID]) -> list[Role]:
        return [self._by_id[i] for i in role_ids if i in self._by_id]

    async def create(self, role: Role) -> Role:
        self._by_id[role.id] = role
        return role

    async def add_permission(self, role_id: UUID, permission_id: UUID) -> None:
        role = self._by_id[role_id]
        permission = self._permissions._by_id[permission_id]
        self._by_id[role_id] = replace(role, permissions=role.permissions | {permission.name})

    def add_role(
        self,
        name: str,
        permissions: set[str],
        scope: RoleScope = RoleScope.TENANT,
        tenant_id: str | None = None,
        is_active: bool = True,
    ) -> Role:
        """Helper to add role for tests."""
        role = Role(
            id=uuid4(),
            name=name,
            scope=scope,
            tenant_id=tenant_id,
            is_active=is_active,
            permissions=frozenset(permissions),
        )
        self._by_id[role.id] = role
        return role


class FakeRoleAssignmentRepository:
    def __init__(self) -> None:
        self._store: list[RoleAssignment] = []

    async def list_active_for_user(self, user_id: str, tenant_id: str) -> list[RoleAssignment]:
        return [
            a
            for a in self._store
            if a.user_id == user_id and a.tenant_id == tenant_id and a.is_active
        ]

    def assign(self, user_id: str, role: Role, tenant_id: str = TENANT) -> RoleAssignment:
        """Helper to assign role for tests."""
        assignment = RoleAssignment(
            id=uuid4(), user_id=user_id, role_id=role.id, tenant_id=tenant_id, created_at=NOW
        )
        self._store.append(assignment)
        return assignment


class FakeMembershipRepository:
    def __init__(self) -> None:
        self._store: list[Membership] = []

    async def list_for_user(self, user_id: str, tenant_id: str) -> list[Membership]:
        return [
            m
            for m in self._store
            if m.user_id == user_id and m.tenant_id == tenant_id and m.is_active
        ]

    def add_membership(
        self,
        user_id: str,
        organization_id: str,
        role: Role | None,
        tenant_id: str = TENANT,
        expires_at: datetime | None = None,
    ) -> Membership:
        """Helper to add membership for tests."""
        membership = Membership(
            id=uuid4(),
            user_id=user_id,
            organization_id=organization_id,
            tenant_id=tenant_id,
            role_id=role.id if role else None,
            expires_at=expires_at,
        )
        self._store.append(membership)
        return membership


class FakeResourceRepository:
    """In-memory resource repository.

    ``delay`` and ``error`` make get_by_id slow or failing, for fail-closed tests.
    get_for_update takes a per-row lock held until the enclosing unit of work exits.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Resource] = {}
        self._row_locks: dict[str, asyncio.Lock] = {}
        self.delay = 0.0
        self.error: Exception | None = None
        self.hierarchy_locks: list[str] = []

    async def get_by_id(self, resource_id: str) -> Resource | None:
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        return self._by_id.get(resource_id)

    async def get_for_update(self, resource_id: str) -> Resource | None:
        lock = self._row_locks.setdefault(resource_id, asyncio.Lock())
        held = _held_locks.get()
        if lock not in held:
            await lock.acquire()
            held.append(lock)
        return await self.get_by_id(resource_id)

    async def get_by_public_token(self, token: str) -> Resource | None:
        for r in self._by_id.values():
            if r.public_link_token == token:
                return r
        return None

    async def list_by_ids(self, resource_ids: list[str]) -> list[Resource]:
        return [self._by_id[i] for i in resource_ids if i in self._by_id]

    async def list_children(self, resource_id: str) -> list[Resource]:
        children = [r for r in self._by_id.values() if r.parent_resource_id == resource_id]
        return sorted(children, key=lambda r: (r.name, r.id))

    async def list_by_owner(self, owner_id: str, tenant_id: str) -> list[Resource]:
        return [
            r
            for r in self._by_id.values()
            if r.owner_id == owner_id and r.tenant_id == tenant_id and r.is_active
        ]

    async def list_by_tenant(self, tenant_id: str) -> list[Resource]:
        return [r for r in self._by_id.values() if r.tenant_id == tenant_id and r.is_active]

    async def list_by_organization(self, organization_id: str, tenant_id: str) -> list[Resource]:
        return [
            r
            for r in self._by_id.values()
            if r.organization_id == organization_id and r.tenant_id == tenant_id and r.is_active
        ]

    async def list_public(self, tenant_id: str) -> list[Resource]:
        items = [
            r
            for r in self._by_id.values()
            if r.tenant_id == tenant_id and r.is_public and r.is_active
        ]
        return sorted(items, key=lambda r: (r.name, r.id))

    async def create(self, resource: Resource) -> Resource:
        self._by_id[resource.id] = resource
        return resource

    async def update(self, resource: Resource) -> None:
        self._by_id[resource.id] = resource

    async def lock_hierarchy(self, tenant_id: str) -> None:
        self.hierarchy_locks.append(tenant_id)

    def add_resource(
        self,
        resource_id: str,
        owner_id: str = "owner",
        tenant_id: str = TENANT,
        parent_resource_id: str | None = None,
        resource_type: str = "document",
        organization_id: str | None = None,
        name: str | None = None,
        **fields,
    ) -> Resource:
        """Helper to add resource for tests."""
        resource = Resource(
            id=resource_id,
            name=name or resource_id,
            resource_type=resource_type,
            owner_id=owner_id,
            tenant_id=tenant_id,
            created_at=NOW,
            updated_at=NOW,
            organization_id=organization_id,
            parent_resource_id=parent_resource_id,
            **fields,
        )
        self._by_id[resource.id] = resource
        return resource

    def get(self, resource_id: str) -> Resource:
        return self._by_id[resource_id]


class FakeGrantRepository:
    """In-memory grant ledger with the same conditional-insert contract as Postgres."""

    def __init__(self) -> None:
        self._by_id: dict[UUID, Grant] = {}

    async def list_for_subject(self, subject: SubjectRef, resource_id: str) -> list[Grant]:
        return [
            g
            for g in self._by_id.values()
            if g.subject == subject and g.resource_id == resource_id and g.is_active
        ]

    async def list_for_roles(self, role_ids: list[UUID], resource_id: str) -> list[Grant]:
        return [
            g
            for g in self._by_id.values()
            if g.role_id in role_ids and g.resource_id == resource_id and g.is_active
        ]

    async def list_by_user(self, user_id: str, tenant_id: str) -> list[Grant]:
        return [
            g
            for g in self._by_id.values()
            if g.user_id == user_id and g.tenant_id == tenant_id and g.is_active
        ]

    async def list_by_roles(self, role_ids: list[UUID], tenant_id: str) -> list[Grant]:
        return [
            g
            for g in self._by_id.values()
            if g.role_id in role_ids and g.tenant_id == tenant_id and g.is_active
        ]

    async def create_if_absent(self, grant: Grant, now: datetime) -> Grant:
        for existing in self._matching(grant):
            if existing.is_valid(now):
                return existing
            if existing.is_active and existing.expires_at and existing.expires_at <= now:
                existing.is_active = False
        self._by_id[grant.id] = grant
        return grant

    async def update(self, grant: Grant) -> None:
        self._by_id[grant.id] = grant

    def _matching(self, grant: Grant) -> list[Grant]:
        return [
            g
            for g in self._by_id.values()
            if g.subject == grant.subject
            and g.resource_id == grant.resource_id
            and g.permission_id == grant.permission_id
        ]

    def add_grant(
        self,
        resource_id: str,
        permission: Permission,
        user_id: str | None = None,
        role: Role | None = None,
        tenant_id: str = TENANT,
        expires_at: datetime | None = None,
        grant_type: GrantType = GrantType.DIRECT,
    ) -> Grant:
        """Helper to add grant for tests."""
        grant = Grant(
            id=uuid4(),
            resource_id=resource_id,
            permission_id=permission.id,
            granted_by="owner",
            tenant_id=tenant_id,
            created_at=NOW,
            user_id=user_id,
            role_id=role.id if role else None,
            grant_type=grant_type,
            expires_at=expires_at,
        )
        self._by_id[grant.id] = grant
        return grant

    def all(self) -> list[Grant]:
        return list(self._by_id.values())


# --- Fake UnitOfWork ---


class FakeUnitOfWork:
    """In-memory Unit of Work with fake repositories."""

    def __init__(self) -> None:
        self.permissions = FakePermissionRepository()
        self.roles = FakeRoleRepository(self.permissions)
        self.role_assignments = FakeRoleAssignmentRepository()
        self.memberships = FakeMembershipRepository()
        self.resources = FakeResourceRepository()
        self.grants = FakeGrantRepository()
        self.commits = 0
        self.rollbacks = 0
        self.open_transactions = 0
        self.max_open_transactions = 0

    async def commit(self) -> None:
        self.commits += 1

    async def rollback(self) -> None:
        self.rollbacks += 1


def shared_uow_factory(uow: FakeUnitOfWork):
    """Factory yielding the same FakeUnitOfWork on every call.

    Each call is one transaction. ``open_transactions`` and ``max_open_transactions``
    count transactions in flight; row locks taken by get_for_update are released on exit.
    """

    @asynccontextmanager
    async def _factory() -> AsyncIterator[FakeUnitOfWork]:
        token = _held_locks.set([])
        uow.open_transactions += 1
        uow.max_open_transactions = max(uow.max_open_transactions, uow.open_transactions)
        try:
            yield uow
            await uow.commit()
        except BaseException:
            await uow.rollback()
            raise
        finally:
            uow.open_transactions -= 1
            for lock in _held_locks.get():
                lock.release()
            _held_locks.reset(token)

    return _factory


# --- Clock and audit doubles ---


class FixedClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class RecordingAuditSink:
    def __init__(self) -> None:
        self.events: list[AuditEvent] = []

    async def record(self, event: AuditEvent) -> None:
        self.events.append(event)

    def of(self, action) -> list[AuditEvent]:
        return [e for e in self.events if e.action == action]


class FailingAuditSink:
    async def record(self, event: AuditEvent) -> None:
        raise RuntimeError("audit store unavailable")


# --- Fixtures ---


@pytest.fixture
def fake_uow() -> FakeUnitOfWork:
    """Fresh in-memory UnitOfWork for each test."""
    return FakeUnitOfWork()


@pytest.fixture
def uow_factory(fake_uow: FakeUnitOfWork):
    """Factory returning async context manager over the test's FakeUnitOfWork."""
    return shared_uow_factory(fake_uow)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def audit_sink() -> RecordingAuditSink:
    return RecordingAuditSink()


@pytest.fixture
def permissions(fake_uow: FakeUnitOfWork) -> dict[str, Permission]:
    """The global permission catalog, keyed by name."""
    return {a.value: fake_uow.permissions.add_permission(a.value) for a in PermissionAction}


@pytest.fixture
def checker(uow_factory, audit_sink, clock) -> AccessGatePermissionChecker:
    return AccessGatePermissionChecker(uow_factory, audit_sink, clock, timeout_seconds=1.0)


@pytest.fixture
def mock_permission_checker():
    """AsyncMock for PermissionChecker - returns True by default."""
    from unittest.mock import AsyncMock

    mock = AsyncMock()
    mock.check.return_value = True
    return mock
