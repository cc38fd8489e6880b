"""Application entry point and composition root."""

import argparse
import asyncio
import logging

from accessgate import __version__
from accessgate.application.use_cases.seed.ensure_seed_data import EnsureSeedDataUseCase
from accessgate.config import Settings, get_settings
from accessgate.infrastructure.audit.logging_audit_sink import LoggingAuditSink
from accessgate.infrastructure.audit.postgres_audit_sink import PostgresAuditSink
from accessgate.infrastructure.auth.keycloak_provider import KeycloakProvider
from accessgate.infrastructure.clock.system_clock import SystemClock
from accessgate.infrastructure.permission.permission_checker import AccessGatePermissionChecker
from accessgate.infrastructure.persistence.postgres.connection import create_pool
from accessgate.infrastructure.persistence.postgres.unit_of_work import create_uow_factory
from accessgate.interfaces.api.app import create_app
from accessgate.interfaces.api.middleware.auth import AuthMiddleware
from accessgate.interfaces.api.middleware.cors import CORSMiddleware
from accessgate.interfaces.api.middleware.pool_lifespan import PoolLifespanMiddleware
from accessgate.logging import setup_logging

logger = logging.getLogger(__name__)


def _create_pool(settings: Settings):
    return create_pool(
        settings.database_url,
        min_size=settings.db_pool_min_size,
        max_size=settings.db_pool_max_size,
        statement_timeout_seconds=settings.store_timeout_seconds,
    )


def create_accessgate_app(settings: Settings | None = None):
    """Composition root - build Falcon app with all dependencies."""
    settings = settings or get_settings()
    pool = _create_pool(settings)
    uow_factory = create_uow_factory(pool)
    clock = SystemClock()
    audit_sink = PostgresAuditSink(pool) if settings.audit_sink == "postgres" else LoggingAuditSink()

    keycloak = (
        KeycloakProvider(
            server_url=settings.keycloak_url,
            realm=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret=settings.keycloak_client_secret,
        )
        if settings.keycloak_client_secret
        else None
    )
    if keycloak is None:
        logger.warning("KEYCLOAK_CLIENT_SECRET not set; all requests are unauthenticated")

    permission_checker = AccessGatePermissionChecker(
        uow_factory,
        audit_sink,
        clock,
        timeout_seconds=settings.store_timeout_seconds,
    )
    cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    return create_app(
        uow_factory,
        permission_checker,
        audit_sink,
        clock,
        middleware=[
            CORSMiddleware(cors_origins),
            PoolLifespanMiddleware(pool),
            AuthMiddleware(keycloak),
        ],
        pool=pool,
    )


async def seed(settings: Settings) -> None:
    """Create system permissions and roles, then close the pool."""
    pool = _create_pool(settings)
    await pool.open()
    try:
        result = await EnsureSeedDataUseCase(create_uow_factory(pool), SystemClock()).execute()
    finally:
        await pool.close()
    print(
        f"Seeded {result.permissions_created} permissions, {result.roles_created} roles, "
        f"{result.role_permissions_added} role permissions"
    )


def run_server(settings: Settings) -> None:
    """Run uvicorn server."""
    import uvicorn

    app = create_accessgate_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(prog="accessgate", description=f"AccessGate v{__version__}")
    parser.add_argument("--version", action="version", version=f"AccessGate v{__version__}")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the HTTP API")
    sub.add_parser("seed", help="Create system permissions and roles (idempotent)")
    args = parser.parse_args(argv)

    settings = get_settings()
    setup_logging(settings)
    if args.command == "seed":
        asyncio.run(seed(settings))
    else:
        run_server(settings)


if __name__ == "__main__":
    main()
