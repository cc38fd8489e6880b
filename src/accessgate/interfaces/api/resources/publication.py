"""Public access API resources."""

import falcon.asgi

from accessgate.application.use_cases.publication.get_public_resource import (
    GetPublicResourceUseCase,
)
from accessgate.application.use_cases.publication.publish_resource import PublishResourceUseCase
from accessgate.application.use_cases.publication.unpublish_resource import (
    UnpublishResourceUseCase,
)
from accessgate.domain.exceptions import ValidationError
from accessgate.interfaces.api.middleware.auth import request_tenant
from accessgate.interfaces.api.resources.context import (
    optional_datetime,
    read_body,
    require_actor,
    required_str,
)
from accessgate.interfaces.api.resources.serializers import resource_to_dict


class PublishResource:
    """POST /v1/acl/publish-resource - expose resource to anonymous callers."""

    def __init__(self, publish_resource: PublishResourceUseCase) -> None:
        self._publish = publish_resource

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        permissions = body.get("permissions") or ["read"]
        if not isinstance(permissions, list):
            raise ValidationError("permissions must be a list of names")
        resource = await self._publish.execute(
            actor,
            required_str(body, "resource_id"),
            [str(p) for p in permissions],
            link_expires_at=optional_datetime(body, "link_expires_at"),
        )
        resp.media = resource_to_dict(resource, include_link=True)
        resp.status = falcon.HTTP_200


class UnpublishResource:
    """POST /v1/acl/unpublish-resource"""

    def __init__(self, unpublish_resource: UnpublishResourceUseCase) -> None:
        self._unpublish = unpublish_resource

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        resource = await self._unpublish.execute(actor, required_str(body, "resource_id"))
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200


class PublicResourceResource:
    """GET /v1/acl/public-resource/{token} - resource behind a valid public link."""

    def __init__(self, get_public_resource: GetPublicResourceUseCase) -> None:
        self._get = get_public_resource

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, token: str
    ) -> None:
        resource = await self._get.execute(token)
        if resource is None:
            resp.status = falcon.HTTP_404
            resp.media = {"error": "Public resource not found or link expired"}
            return
        resp.media = resource_to_dict(resource)
        resp.status = falcon.HTTP_200


class PublicResourcesResource:
    """GET /v1/acl/public-resources - published resources of the tenant."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        tenant_id = request_tenant(req)
        if not tenant_id:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Missing tenant (X-Tenant-ID)"}
            return
        async with self._uow_factory() as uow:
            resources = await uow.resources.list_public(tenant_id)
        resp.media = {"items": [resource_to_dict(r) for r in resources]}
        resp.status = falcon.HTTP_200
