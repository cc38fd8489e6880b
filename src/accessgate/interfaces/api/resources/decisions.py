"""Decision API resources - permission checks."""

import falcon.asgi

from accessgate.application.ports import PermissionChecker
from accessgate.interfaces.api.middleware.auth import request_tenant
from accessgate.interfaces.api.resources.context import read_body, require_actor, required_str


class CheckPermissionResource:
    """POST /v1/acl/check-permission - may subject do permission on resource?"""

    def __init__(self, permission_checker: PermissionChecker) -> None:
        self._permission_checker = permission_checker

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Check for ``subject_id`` (defaults to the caller) in the caller's tenant."""
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        resource_id = required_str(body, "resource_id")
        permission = required_str(body, "permission")
        subject_id = str(body.get("subject_id") or actor.subject_id).strip()

        allowed = await self._permission_checker.check(
            subject_id, resource_id, permission, actor.tenant_id
        )
        resp.media = {"allowed": allowed}
        resp.status = falcon.HTTP_200


class CheckAnonymousPermissionResource:
    """POST /v1/acl/check-anonymous-permission - no authentication required."""

    def __init__(self, permission_checker: PermissionChecker) -> None:
        self._permission_checker = permission_checker

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        body = await read_body(req)
        resource_id = required_str(body, "resource_id")
        permission = required_str(body, "permission")
        tenant_id = request_tenant(req) or str(body.get("tenant_id") or "").strip()
        if not tenant_id:
            resp.status = falcon.HTTP_400
            resp.media = {"error": "Missing tenant (X-Tenant-ID)"}
            return

        allowed = await self._permission_checker.check_anonymous(
            resource_id, permission, tenant_id
        )
        resp.media = {"allowed": allowed}
        resp.status = falcon.HTTP_200


class ValidatePublicLinkResource:
    """GET /v1/acl/validate-public-link/{token}?permission=read"""

    def __init__(self, permission_checker: PermissionChecker) -> None:
        self._permission_checker = permission_checker

    async def on_get(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, token: str
    ) -> None:
        permission = req.get_param("permission") or "read"
        valid = await self._permission_checker.validate_public_link(token, permission)
        resp.media = {"valid": valid}
        resp.status = falcon.HTTP_200
