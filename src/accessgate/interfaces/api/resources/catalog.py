"""Permission catalog API resource."""

import falcon.asgi

from accessgate.application.services import PermissionCatalog
from accessgate.interfaces.api.resources.serializers import permission_to_dict


class PermissionsResource:
    """GET /v1/acl/permissions?resource_type= - active permission definitions."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        user = getattr(req.context, "user", None)
        if not user:
            resp.status = falcon.HTTP_401
            resp.media = {"error": "Unauthorized"}
            return
        async with self._uow_factory() as uow:
            permissions = await PermissionCatalog(uow).list(req.get_param("resource_type"))
        resp.media = {"items": [permission_to_dict(p) for p in permissions]}
        resp.status = falcon.HTTP_200
