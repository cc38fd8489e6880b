"""Built-in (global) permission names."""

from enum import StrEnum


class PermissionAction(StrEnum):
    """System-defined permissions available to every resource type."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    SHARE = "share"
    PUBLISH = "publish"
    ANNOTATE = "annotate"
    MODERATE = "moderate"
    ADMIN = "admin"
