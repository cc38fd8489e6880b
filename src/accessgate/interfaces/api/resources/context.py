"""Request parsing helpers shared by API resources."""

from datetime import UTC, datetime
from uuid import UUID

import falcon
import falcon.asgi

from accessgate.domain.exceptions import ValidationError
from accessgate.domain.value_objects import ActorContext
from accessgate.interfaces.api.middleware.auth import actor_from_request


def require_actor(req: falcon.asgi.Request, resp: falcon.asgi.Response) -> ActorContext | None:
    """Return the caller's ActorContext or set 401/400 on resp and return None."""
    if not getattr(req.context, "user", None):
        resp.status = falcon.HTTP_401
        resp.media = {"error": "Unauthorized"}
        return None
    actor = actor_from_request(req)
    if actor is None:
        resp.status = falcon.HTTP_400
        resp.media = {"error": "Missing or conflicting tenant (X-Tenant-ID)"}
        return None
    return actor


async def read_body(req: falcon.asgi.Request) -> dict:
    body = await req.get_media(default_when_empty={})
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def required_str(body: dict, key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Missing required field: {key}")
    return value.strip()


def optional_uuid(body: dict, key: str) -> UUID | None:
    value = body.get(key)
    if value in (None, ""):
        return None
    try:
        return UUID(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid {key}: {value}") from e


def required_uuid(body: dict, key: str) -> UUID:
    value = optional_uuid(body, key)
    if value is None:
        raise ValidationError(f"Missing required field: {key}")
    return value


def optional_datetime(body: dict, key: str) -> datetime | None:
    """ISO-8601 timestamp; naive values are taken as UTC."""
    value = body.get(key)
    if value in (None, ""):
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid {key}: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
