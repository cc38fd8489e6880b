"""Resource DTOs."""

from dataclasses import dataclass


@dataclass
class RegisterResourceInput:
    """Input for registering a resource."""

    name: str
    resource_type: str
    owner_id: str | None = None
    parent_resource_id: str | None = None
    organization_id: str | None = None
    external_id: str | None = None
    description: str | None = None


@dataclass
class AccessibleResourcesQuery:
    """Filter for listing resources a subject can reach."""

    subject_id: str
    tenant_id: str
    resource_type: str | None = None
    permission_name: str | None = None
