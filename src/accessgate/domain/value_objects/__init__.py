"""Domain value objects."""

from accessgate.domain.value_objects.actor_context import ActorContext
from accessgate.domain.value_objects.audit_action import AuditAction
from accessgate.domain.value_objects.grant_type import GrantType
from accessgate.domain.value_objects.membership_type import MembershipType
from accessgate.domain.value_objects.permission_action import PermissionAction
from accessgate.domain.value_objects.role_scope import RoleScope
from accessgate.domain.value_objects.subject_ref import SubjectRef

__all__ = [
    "ActorContext",
    "AuditAction",
    "GrantType",
    "MembershipType",
    "PermissionAction",
    "RoleScope",
    "SubjectRef",
]
