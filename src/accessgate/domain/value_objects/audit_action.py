"""Audit event actions."""

from enum import StrEnum


class AuditAction(StrEnum):
    """What an audit event records."""

    ACCESS_ATTEMPT = "ACCESS_ATTEMPT"
    ANONYMOUS_ACCESS = "ANONYMOUS_ACCESS"
    PUBLIC_LINK_ACCESS = "PUBLIC_LINK_ACCESS"
    PERMISSION_GRANTED = "PERMISSION_GRANTED"
    PERMISSION_REVOKED = "PERMISSION_REVOKED"
    RESOURCE_SHARED = "RESOURCE_SHARED"
    RESOURCE_PUBLISHED = "RESOURCE_PUBLISHED"
    RESOURCE_UNPUBLISHED = "RESOURCE_UNPUBLISHED"
    RESOURCE_CREATED = "RESOURCE_CREATED"
    RESOURCE_DELETED = "RESOURCE_DELETED"
    OWNERSHIP_TRANSFERRED = "OWNERSHIP_TRANSFERRED"
    PARENT_CHANGED = "PARENT_CHANGED"
