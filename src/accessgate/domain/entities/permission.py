"""Permission entity - a named capability."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Permission:
    """Permission - unique per (name, resource_type); global when resource_type is None."""

    id: UUID
    name: str
    created_at: datetime
    resource_type: str | None = None
    description: str | None = None
    is_system: bool = False
    is_active: bool = True
