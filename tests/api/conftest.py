"""Fixtures for API tests."""

import pytest
from falcon.testing import TestClient

from accessgate.interfaces.api.app import create_app
from accessgate.interfaces.api.middleware.auth import TENANT_HEADER, RequestUser

from tests.conftest import TENANT

USER_HEADER = "X-Test-User"
CLAIM_HEADER = "X-Test-Tenant-Claim"


class AuthBypassMiddleware:
    """Middleware that sets context.user from test headers instead of a token."""

    async def process_request(self, req, resp):
        user_id = req.get_header(USER_HEADER)
        req.context.user = (
            RequestUser(user_id=user_id, tenant_id=req.get_header(CLAIM_HEADER))
            if user_id
            else None
        )


def as_user(user_id: str, tenant_id: str | None = TENANT, claim: str | None = None) -> dict:
    """Request headers for an authenticated caller."""
    headers = {USER_HEADER: user_id}
    if tenant_id:
        headers[TENANT_HEADER] = tenant_id
    if claim:
        headers[CLAIM_HEADER] = claim
    return headers


@pytest.fixture
def app(uow_factory, checker, audit_sink, clock, permissions):
    """Falcon ASGI app over the in-memory UnitOfWork with the global catalog seeded."""
    return create_app(
        unit_of_work_factory=uow_factory,
        permission_checker=checker,
        audit_sink=audit_sink,
        clock=clock,
        middleware=[AuthBypassMiddleware()],
    )


@pytest.fixture
def client(app):
    """Falcon ASGI test client."""
    return TestClient(app)
