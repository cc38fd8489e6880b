"""Auth middleware - resolves the bearer token to a user."""

from dataclasses import dataclass

import falcon.asgi

from accessgate.domain.value_objects import ActorContext

TENANT_HEADER = "X-Tenant-ID"


@dataclass
class RequestUser:
    """User from request context."""

    user_id: str
    email: str | None = None
    username: str | None = None
    tenant_id: str | None = None


class AuthMiddleware:
    """Middleware that validates the bearer token and sets req.context.user.

    Requests without a valid token get ``req.context.user = None``; endpoints
    that serve anonymous callers (public links, anonymous checks) accept that.
    """

    def __init__(self, keycloak_provider=None) -> None:
        self._keycloak = keycloak_provider

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Extract user from Authorization header."""
        req.context.user = None
        auth = req.get_header("Authorization")
        if not auth or not auth.startswith("Bearer ") or not self._keycloak:
            return
        user = self._keycloak.decode_token(auth[7:])
        if user and user.user_id:
            req.context.user = RequestUser(
                user_id=user.user_id,
                email=user.email,
                username=user.username,
                tenant_id=user.tenant_id,
            )


def request_tenant(req: falcon.asgi.Request) -> str | None:
    """Tenant from the X-Tenant-ID header, falling back to the token's tenant claim."""
    header = (req.get_header(TENANT_HEADER) or "").strip()
    if header:
        return header
    user = getattr(req.context, "user", None)
    return user.tenant_id if user else None


def actor_from_request(req: falcon.asgi.Request) -> ActorContext | None:
    """ActorContext for the authenticated caller, or None.

    A token bound to one tenant cannot act in another.
    """
    user = getattr(req.context, "user", None)
    if not user:
        return None
    tenant_id = request_tenant(req)
    if not tenant_id:
        return None
    if user.tenant_id and user.tenant_id != tenant_id:
        return None
    return ActorContext(subject_id=user.user_id, tenant_id=tenant_id)
