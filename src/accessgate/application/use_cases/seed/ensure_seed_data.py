"""Ensure seed data use case - system permissions and roles."""

import logging
from dataclasses import dataclass
from uuid import uuid4

from accessgate.application.ports import Clock
from accessgate.domain.entities import Permission, Role
from accessgate.domain.value_objects import RoleScope

logger = logging.getLogger(__name__)

# (name, description)
GLOBAL_PERMISSIONS: list[tuple[str, str]] = [
    ("read", "Permission to read/view content"),
    ("write", "Permission to write/edit content"),
    ("delete", "Permission to delete content"),
    ("share", "Permission to share content with others"),
    ("publish", "Permission to publish/unpublish content"),
    ("annotate", "Permission to annotate/comment on content"),
    ("moderate", "Permission to moderate content and users"),
    ("admin", "Administrative permissions"),
]

# resource_type -> [(name, description)]; stored as "type:name"
TYPED_PERMISSIONS: dict[str, list[tuple[str, str]]] = {
    "document": [
        ("read", "Read documents"),
        ("write", "Edit documents"),
        ("annotate", "Comment on documents"),
        ("share", "Share documents"),
        ("publish", "Publish documents"),
    ],
    "dashboard": [
        ("read", "View dashboards"),
        ("write", "Edit dashboards"),
        ("share", "Share dashboards"),
        ("publish", "Publish dashboards"),
    ],
    "function": [
        ("read", "View functions"),
        ("write", "Edit functions"),
        ("execute", "Execute functions"),
        ("deploy", "Deploy functions"),
    ],
    "organization": [
        ("read", "View organization details"),
        ("write", "Edit organization settings"),
        ("admin", "Administer organization"),
        ("invite", "Invite members to organization"),
        ("remove", "Remove members from organization"),
    ],
}

# (name, description, scope, permission names)
SYSTEM_ROLES: list[tuple[str, str, RoleScope, tuple[str, ...]]] = [
    (
        "Super Admin",
        "Full system administration",
        RoleScope.APPLICATION,
        ("admin", "read", "write", "delete", "share", "publish", "moderate"),
    ),
    ("Platform User", "Basic platform access", RoleScope.APPLICATION, ("read",)),
    (
        "Organization Owner",
        "Organization owner with full access",
        RoleScope.ORGANIZATION,
        (
            "admin", "read", "write", "delete", "share", "publish", "moderate",
            "organization:invite", "organization:remove",
        ),
    ),
    (
        "Organization Admin",
        "Organization administrator",
        RoleScope.ORGANIZATION,
        ("read", "write", "share", "publish", "moderate", "organization:invite"),
    ),
    (
        "Organization Member",
        "Regular organization member",
        RoleScope.ORGANIZATION,
        ("read", "write", "share"),
    ),
    ("Organization Guest", "Guest with limited access", RoleScope.ORGANIZATION, ("read",)),
    ("Viewer", "Can only view content", RoleScope.RESOURCE, ("read",)),
    (
        "Editor",
        "Can edit and share content",
        RoleScope.RESOURCE,
        ("read", "write", "annotate", "share"),
    ),
    (
        "Publisher",
        "Can publish and manage content",
        RoleScope.RESOURCE,
        ("read", "write", "annotate", "share", "publish"),
    ),
    (
        "Moderator",
        "Can moderate content and users",
        RoleScope.RESOURCE,
        ("read", "write", "annotate", "share", "publish", "moderate"),
    ),
]


@dataclass
class SeedResult:
    permissions_created: int = 0
    roles_created: int = 0
    role_permissions_added: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.permissions_created or self.roles_created or self.role_permissions_added)


class EnsureSeedDataUseCase:
    """Idempotently create system permissions and system roles.

    Safe to run repeatedly: existing permissions and roles are left alone and
    only missing role-permission links are added.
    """

    def __init__(self, unit_of_work_factory: type, clock: Clock) -> None:
        self._uow_factory = unit_of_work_factory
        self._clock = clock

    async def execute(self) -> SeedResult:
        result = SeedResult()
        now = self._clock.now()
        async with self._uow_factory() as uow:
            by_name: dict[str, Permission] = {}
            specs = [(name, None, name, desc) for name, desc in GLOBAL_PERMISSIONS]
            for resource_type, entries in TYPED_PERMISSIONS.items():
                specs += [
                    (f"{resource_type}:{name}", resource_type, name, desc)
                    for name, desc in entries
                ]
            for full_name, resource_type, _, description in specs:
                permission = await uow.permissions.get_by_name_and_type(full_name, resource_type)
                if permission is None:
                    permission = await uow.permissions.create(
                        Permission(
                            id=uuid4(),
                            name=full_name,
                            created_at=now,
                            resource_type=resource_type,
                            description=description,
                            is_system=True,
                        )
                    )
                    result.permissions_created += 1
                by_name[full_name] = permission

            for name, description, scope, permission_names in SYSTEM_ROLES:
                role = await uow.roles.get_by_name(name)
                if role is None:
                    role = await uow.roles.create(
                        Role(
                            id=uuid4(),
                            name=name,
                            scope=scope,
                            description=description,
                            is_system=True,
                        )
                    )
                    result.roles_created += 1
                for permission_name in permission_names:
                    if permission_name in role.permissions:
                        continue
                    await uow.roles.add_permission(role.id, by_name[permission_name].id)
                    result.role_permissions_added += 1

        logger.info(
            "Seed complete: %d permissions, %d roles, %d role permissions added",
            result.permissions_created,
            result.roles_created,
            result.role_permissions_added,
        )
        return result
