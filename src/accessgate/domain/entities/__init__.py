"""Domain entities."""

from accessgate.domain.entities.audit_event import AuditEvent
from accessgate.domain.entities.grant import Grant
from accessgate.domain.entities.membership import Membership
from accessgate.domain.entities.permission import Permission
from accessgate.domain.entities.resource import Resource
from accessgate.domain.entities.role import Role
from accessgate.domain.entities.role_assignment import RoleAssignment

__all__ = [
    "AuditEvent",
    "Grant",
    "Membership",
    "Permission",
    "Resource",
    "Role",
    "RoleAssignment",
]
