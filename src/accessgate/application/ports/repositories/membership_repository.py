"""Membership repository port."""

from typing import Protocol

from accessgate.domain.entities import Membership


class MembershipRepository(Protocol):
    async def list_for_user(self, user_id: str, tenant_id: str) -> list[Membership]: ...
