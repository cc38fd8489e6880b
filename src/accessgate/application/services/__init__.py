"""Application services shared by the permission checker and use cases."""

from accessgate.application.services.catalog import PermissionCatalog
from accessgate.application.services.hierarchy import ResourceHierarchy
from accessgate.application.services.role_aggregator import RoleAggregator

__all__ = [
    "PermissionCatalog",
    "ResourceHierarchy",
    "RoleAggregator",
]
