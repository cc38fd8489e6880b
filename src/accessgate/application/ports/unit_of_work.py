"""Unit of Work port - transactional boundary."""

from collections.abc import AsyncIterator
from typing import Protocol

from accessgate.application.ports.repositories.grant_repository import GrantRepository
from accessgate.application.ports.repositories.membership_repository import (
    MembershipRepository,
)
from accessgate.application.ports.repositories.permission_repository import (
    PermissionRepository,
)
from accessgate.application.ports.repositories.resource_repository import (
    ResourceRepository,
)
from accessgate.application.ports.repositories.role_assignment_repository import (
    RoleAssignmentRepository,
)
from accessgate.application.ports.repositories.role_repository import RoleRepository


class UnitOfWork(Protocol):
    """Unit of Work - manages transaction and repository access."""

    @property
    def permissions(self) -> PermissionRepository: ...

    @property
    def roles(self) -> RoleRepository: ...

    @property
    def role_assignments(self) -> RoleAssignmentRepository: ...

    @property
    def memberships(self) -> MembershipRepository: ...

    @property
    def resources(self) -> ResourceRepository: ...

    @property
    def grants(self) -> GrantRepository: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class UnitOfWorkFactory(Protocol):
    """Factory for creating UnitOfWork instances."""

    async def __call__(self) -> AsyncIterator[UnitOfWork]: ...
