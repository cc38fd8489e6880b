"""Repository ports."""

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

__all__ = [
    "GrantRepository",
    "MembershipRepository",
    "PermissionRepository",
    "ResourceRepository",
    "RoleAssignmentRepository",
    "RoleRepository",
]
