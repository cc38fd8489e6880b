"""Pool lifespan middleware - opens pools on startup, closes on shutdown."""

import logging
from typing import Any

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)


class PoolLifespanMiddleware:
    """Middleware that opens the connection pool on startup and closes on shutdown."""

    def __init__(self, pool: AsyncConnectionPool) -> None:
        self._pool = pool

    async def process_startup(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        """Open pool when ASGI server starts."""
        await self._pool.open()
        logger.info(
            "Connection pool open (min=%d max=%d)", self._pool.min_size, self._pool.max_size
        )

    async def process_shutdown(self, scope: dict[str, Any], event: dict[str, Any]) -> None:
        """Close pool when ASGI server shuts down."""
        await self._pool.close()
        logger.info("Connection pool closed")
