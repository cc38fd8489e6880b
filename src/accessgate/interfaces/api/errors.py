"""Domain error to HTTP status mapping."""

import logging

import falcon
import falcon.asgi

from accessgate.domain.exceptions import (
    AccessGateError,
    CycleDetected,
    InvalidGrantTarget,
    NotFound,
    PermissionDenied,
    TenantMismatch,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: list[tuple[type[AccessGateError], str]] = [
    (NotFound, falcon.HTTP_404),
    (PermissionDenied, falcon.HTTP_403),
    (TenantMismatch, falcon.HTTP_403),
    (InvalidGrantTarget, falcon.HTTP_400),
    (ValidationError, falcon.HTTP_400),
    (CycleDetected, falcon.HTTP_400),
]


def status_for(error: AccessGateError) -> str:
    for error_type, status in STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status
    return falcon.HTTP_400


async def handle_domain_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: AccessGateError, params
) -> None:
    """Render a domain error as ``{"error": ..., "type": ...}``."""
    resp.status = status_for(ex)
    resp.media = {"error": str(ex), "type": type(ex).__name__}
    logger.info("%s %s -> %s: %s", req.method, req.path, resp.status, ex)


async def handle_unexpected_error(
    req: falcon.asgi.Request, resp: falcon.asgi.Response, ex: Exception, params
) -> None:
    logger.error("Unhandled error on %s %s", req.method, req.path, exc_info=ex)
    resp.status = falcon.HTTP_500
    resp.media = {"title": "500 Internal Server Error"}
