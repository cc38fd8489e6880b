"""Resource registry and hierarchy API resources."""

import falcon.asgi

from accessgate.application.dto.resource_dto import (
    AccessibleResourcesQuery,
    RegisterResourceInput,
)
from accessgate.application.use_cases.hierarchy.get_children import GetChildrenUseCase
from accessgate.application.use_cases.hierarchy.set_parent import SetParentUseCase
from accessgate.application.use_cases.resource.deactivate_resource import (
    DeactivateResourceUseCase,
)
from accessgate.application.use_cases.resource.get_accessible_resources import (
    GetAccessibleResourcesUseCase,
)
from accessgate.application.use_cases.resource.register_resource import RegisterResourceUseCase
from accessgate.application.use_cases.resource.transfer_ownership import (
    TransferOwnershipUseCase,
)
from accessgate.domain.exceptions import ValidationError
from accessgate.interfaces.api.resources.context import read_body, require_actor, required_str
from accessgate.interfaces.api.resources.serializers import resource_to_dict


def _optional_str(body: dict, key: str) -> str | None:
    value = body.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip() or None


class ResourcesResource:
    """POST /v1/acl/resources - register a resource."""

    def __init__(self, register_resource: RegisterResourceUseCase) -> None:
        self._register = register_resource

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        data = RegisterResourceInput(
            name=required_str(body, "name"),
            resource_type=required_str(body, "resource_type"),
            owner_id=_optional_str(body, "owner_id"),
            parent_resource_id=_optional_str(body, "parent_resource_id"),
            organization_id=_optional_str(body, "organization_id"),
            external_id=_optional_str(body, "external_id"),
            description=_optional_str(body, "description"),
        )
        resource = await self._register.execute(actor, data)
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_201


class ResourceResource:
    """DELETE /v1/acl/resources/{resource_id} - owner-only soft delete."""

    def __init__(self, deactivate_resource: DeactivateResourceUseCase) -> None:
        self._deactivate = deactivate_resource

    async def on_delete(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource_id: str
    ) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        await self._deactivate.execute(actor, resource_id)
        resp.status = falcon.HTTP_204


class ResourceOwnerResource:
    """PUT /v1/acl/resources/{resource_id}/owner"""

    def __init__(self, transfer_ownership: TransferOwnershipUseCase) -> None:
        self._transfer = transfer_ownership

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource_id: str
    ) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        resource = await self._transfer.execute(
            actor, resource_id, required_str(body, "new_owner_id")
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200


class ResourceParentResource:
    """PUT /v1/acl/resources/{resource_id}/parent - ``null`` detaches."""

    def __init__(self, set_parent: SetParentUseCase) -> None:
        self._set_parent = set_parent

    async def on_put(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource_id: str
    ) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        resource = await self._set_parent.execute(
            actor, resource_id, _optional_str(body, "parent_resource_id")
        )
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200


class ResourceChildrenResource:
    """GET /v1/acl/resources/{resource_id}/children"""

    def __init__(self, get_children: GetChildrenUseCase) -> None:
        self._get_children = get_children

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource_id: str
    ) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        children = await self._get_children.execute(actor, resource_id)
        resp.media = {"items": [resource_to_dict(c) for c in children]}
        resp.status = falcon.HTTP_200


class AccessibleResourcesResource:
    """GET /v1/acl/accessible-resources?resource_type=&permission="""

    def __init__(self, get_accessible_resources: GetAccessibleResourcesUseCase) -> None:
        self._get_accessible = get_accessible_resources

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        resources = await self._get_accessible.execute(
            AccessibleResourcesQuery(
                subject_id=actor.subject_id,
                tenant_id=actor.tenant_id,
                resource_type=req.get_param("resource_type"),
                permission_name=req.get_param("permission"),
            )
        )
        resp.media = {"items": [resource_to_dict(r) for r in resources]}
        resp.status = falcon.HTTP_200
