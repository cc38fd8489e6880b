"""Grant repository port."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from accessgate.domain.entities import Grant
from accessgate.domain.value_objects import SubjectRef


class GrantRepository(Protocol):
    """Port for grant persistence."""

    async def list_for_subject(self, subject: SubjectRef, resource_id: str) -> list[Grant]: ...

    async def list_for_roles(self, role_ids: list[UUID], resource_id: str) -> list[Grant]: ...

    async def list_by_user(self, user_id: str, tenant_id: str) -> list[Grant]: ...

    async def list_by_roles(self, role_ids: list[UUID], tenant_id: str) -> list[Grant]: ...

    async def create_if_absent(self, grant: Grant, now: datetime) -> Grant:
        """Insert grant unless a valid one exists for (subject, resource, permission).

        Returns the stored grant: the new one, or the existing valid one. Must be
        a conditional write so that concurrent callers cannot both insert.
        """
        ...

    async def update(self, grant: Grant) -> None: ...
