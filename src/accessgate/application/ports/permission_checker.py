"""Permission checker port - allow/deny decisions."""

from typing import Protocol


class PermissionChecker(Protocol):
    """Port for authorization decisions. Implementations never raise; they deny."""

    async def check(
        self, subject_id: str | None, resource_id: str, permission_name: str, tenant_id: str
    ) -> bool: ...

    async def check_anonymous(
        self, resource_id: str, permission_name: str, tenant_id: str
    ) -> bool: ...

    async def validate_public_link(self, token: str, permission_name: str) -> bool: ...
