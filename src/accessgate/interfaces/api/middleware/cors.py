"""CORS middleware - adds Access-Control-Allow-Origin headers."""

import falcon.asgi

from accessgate.interfaces.api.middleware.auth import TENANT_HEADER


class CORSMiddleware:
    """Middleware that adds CORS headers and handles OPTIONS preflight."""

    def __init__(self, origins: list[str]) -> None:
        self._origins = origins

    def _set_cors_headers(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Set CORS headers on response. Unlisted origins get no allow header."""
        origin = req.get_header("Origin")
        if origin and ("*" in self._origins or origin in self._origins):
            resp.set_header("Access-Control-Allow-Origin", origin)
            resp.set_header("Vary", "Origin")
        resp.set_header("Access-Control-Allow-Methods", "GET, POST, PUT, DELETE, OPTIONS")
        resp.set_header(
            "Access-Control-Allow-Headers", f"Authorization, Content-Type, {TENANT_HEADER}"
        )
        resp.set_header("Access-Control-Max-Age", "86400")

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Handle OPTIONS preflight; add CORS headers to all responses."""
        self._set_cors_headers(req, resp)
        if req.method == "OPTIONS":
            resp.status = falcon.HTTP_200
            resp.media = {}
            resp.complete = True

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        """Ensure CORS headers on response (in case process_request was short-circuited)."""
        self._set_cors_headers(req, resp)
