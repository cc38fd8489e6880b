"""Shared preconditions for mutating use cases.

The permission checker opens its own UnitOfWork, so the actor is authorized
before the mutating transaction starts: a request never holds two pooled
connections at once.
"""

from accessgate.application.ports import PermissionChecker, UnitOfWork
from accessgate.domain.entities import Resource
from accessgate.domain.exceptions import NotFound, PermissionDenied, TenantMismatch
from accessgate.domain.value_objects import ActorContext


async def load_resource(
    uow: UnitOfWork, resource_id: str, tenant_id: str, for_update: bool = False
) -> Resource:
    """Load an active resource, raising NotFound / TenantMismatch.

    With ``for_update`` the row stays locked until the transaction ends.
    """
    if for_update:
        resource = await uow.resources.get_for_update(resource_id)
    else:
        resource = await uow.resources.get_by_id(resource_id)
    if resource is None or not resource.is_active:
        raise NotFound("Resource", resource_id)
    if resource.tenant_id != tenant_id:
        raise TenantMismatch(f"Resource {resource_id} is not in tenant {tenant_id}")
    return resource


async def ensure_owner_or_permission(
    permission_checker: PermissionChecker,
    actor: ActorContext,
    resource: Resource,
    permission_name: str,
) -> None:
    """Actor must own the resource or hold permission_name on it.

    Must not be awaited inside an open UnitOfWork.
    """
    if resource.owner_id == actor.subject_id:
        return
    allowed = await permission_checker.check(
        actor.subject_id, resource.id, permission_name, actor.tenant_id
    )
    if not allowed:
        raise PermissionDenied(
            f"Access denied: must be owner or have {permission_name} permission"
        )


async def authorize(
    unit_of_work_factory,
    permission_checker: PermissionChecker,
    actor: ActorContext,
    resource_id: str,
    permission_name: str,
) -> Resource:
    """Load the resource in a short read transaction, then check the actor outside it."""
    async with unit_of_work_factory() as uow:
        resource = await load_resource(uow, resource_id, actor.tenant_id)
    await ensure_owner_or_permission(permission_checker, actor, resource, permission_name)
    return resource


def ensure_still_authorized(actor: ActorContext, checked: Resource, current: Resource) -> None:
    """An actor let through as owner must still be the owner once the row is locked."""
    if checked.owner_id == actor.subject_id and current.owner_id != actor.subject_id:
        raise PermissionDenied("Access denied: ownership changed during the request")


def ensure_owner(actor: ActorContext, resource: Resource, message: str) -> None:
    if resource.owner_id != actor.subject_id:
        raise PermissionDenied(message)
