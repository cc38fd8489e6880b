"""PostgreSQL async connection pool."""

from psycopg_pool import AsyncConnectionPool


def create_pool(
    conninfo: str,
    min_size: int = 2,
    max_size: int = 10,
    statement_timeout_seconds: float | None = None,
) -> AsyncConnectionPool:
    """Create async connection pool.

    Pool is created with open=False. Caller must call await pool.open()
    before use (e.g. via PoolLifespanMiddleware in ASGI lifespan).
    With statement_timeout_seconds set, every session gets a server-side
    statement_timeout and checkouts wait at most that long.
    """
    kwargs: dict[str, object] = {}
    timeout = 30.0
    if statement_timeout_seconds:
        kwargs["options"] = f"-c statement_timeout={int(statement_timeout_seconds * 1000)}"
        timeout = statement_timeout_seconds
    return AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        kwargs=kwargs,
        timeout=timeout,
        open=False,
    )
