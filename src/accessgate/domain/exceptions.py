"""Domain exceptions."""


class AccessGateError(Exception):
    """Base exception for AccessGate."""

    pass


class NotFound(AccessGateError):
    """Referenced resource, permission or role does not exist."""

    def __init__(self, entity: str, key: object) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key


class TenantMismatch(AccessGateError):
    """Resource belongs to a different tenant than the one asserted."""

    pass


class InvalidGrantTarget(AccessGateError):
    """Grant subject must be exactly one of user or role."""

    pass


class CycleDetected(AccessGateError):
    """Resource hierarchy contains (or would contain) a cycle."""

    def __init__(self, resource_id: str, message: str | None = None) -> None:
        super().__init__(message or f"Cycle detected in hierarchy at resource {resource_id}")
        self.resource_id = resource_id


class PermissionDenied(AccessGateError):
    """Actor is not allowed to perform the requested mutation."""

    pass


class ValidationError(AccessGateError):
    """Validation failed for input data."""

    pass
