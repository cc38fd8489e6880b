"""Grant ledger API resources."""

import falcon.asgi

from accessgate.application.use_cases.grant.delegate_role import DelegateRoleUseCase
from accessgate.application.use_cases.grant.grant_permission import GrantPermissionUseCase
from accessgate.application.use_cases.grant.revoke_permission import RevokePermissionUseCase
from accessgate.domain.value_objects import SubjectRef
from accessgate.interfaces.api.resources.context import (
    optional_datetime,
    optional_uuid,
    read_body,
    require_actor,
    required_str,
    required_uuid,
)
from accessgate.interfaces.api.resources.serializers import grant_to_dict


def _subject_from_body(body: dict) -> SubjectRef:
    user_id = body.get("user_id")
    return SubjectRef(
        user_id=str(user_id) if user_id is not None else None,
        role_id=optional_uuid(body, "role_id"),
    )


class GrantResource:
    """POST /v1/acl/grant - grant a permission to a user or role."""

    def __init__(self, grant_permission: GrantPermissionUseCase) -> None:
        self._grant = grant_permission

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        grant = await self._grant.execute(
            actor,
            _subject_from_body(body),
            required_str(body, "resource_id"),
            required_uuid(body, "permission_id"),
            expires_at=optional_datetime(body, "expires_at"),
        )
        resp.media = grant_to_dict(grant)
        resp.status = falcon.HTTP_201


class RevokeResource:
    """POST /v1/acl/revoke - revoke a permission from a user or role."""

    def __init__(self, revoke_permission: RevokePermissionUseCase) -> None:
        self._revoke = revoke_permission

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        revoked = await self._revoke.execute(
            actor,
            _subject_from_body(body),
            required_str(body, "resource_id"),
            required_uuid(body, "permission_id"),
            reason=body.get("reason"),
        )
        resp.media = {"revoked": revoked}
        resp.status = falcon.HTTP_200


class ShareResource:
    """POST /v1/acl/share-resource - delegate a role's permissions to a user."""

    def __init__(self, delegate_role: DelegateRoleUseCase) -> None:
        self._delegate = delegate_role

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        actor = require_actor(req, resp)
        if not actor:
            return
        body = await read_body(req)
        grants = await self._delegate.execute(
            actor,
            required_str(body, "resource_id"),
            required_str(body, "target_user_id"),
            required_uuid(body, "role_id"),
        )
        resp.media = {"items": [grant_to_dict(g) for g in grants]}
        resp.status = falcon.HTTP_201
