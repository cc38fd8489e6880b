"""Unit tests for publish, unpublish and public link resolution."""

from datetime import timedelta

import pytest

from accessgate.application.use_cases.publication.get_public_resource import (
    GetPublicResourceUseCase,
)
from accessgate.application.use_cases.publication.publish_resource import (
    PublishResourceUseCase,
    generate_link_token,
)
from accessgate.application.use_cases.publication.unpublish_resource import (
    UnpublishResourceUseCase,
)
from accessgate.domain.exceptions import NotFound, PermissionDenied, ValidationError
from accessgate.domain.value_objects import ActorContext, AuditAction

from tests.conftest import NOW, TENANT

OWNER = ActorContext(subject_id="owner", tenant_id=TENANT)


@pytest.fixture
def publish(uow_factory, checker, audit_sink, clock) -> PublishResourceUseCase:
    return PublishResourceUseCase(uow_factory, checker, audit_sink, clock)


@pytest.fixture
def unpublish(uow_factory, checker, audit_sink, clock) -> UnpublishResourceUseCase:
    return UnpublishResourceUseCase(uow_factory, checker, audit_sink, clock)


@pytest.fixture
def doc(fake_uow):
    return fake_uow.resources.add_resource("doc")


def test_generate_link_token_is_random_and_url_safe() -> None:
    a, b = generate_link_token(), generate_link_token()

    assert a != b
    assert len(a) >= 40
    assert all(c.isalnum() or c in "-_" for c in a)


@pytest.mark.asyncio
async def test_publish_sets_allow_list_and_token(publish, fake_uow, permissions, doc, audit_sink) -> None:
    published = await publish.execute(OWNER, "doc", ["read", " annotate ", ""])

    stored = fake_uow.resources.get("doc")
    assert stored is published
    assert stored.is_public is True
    assert stored.public_permissions == frozenset({"read", "annotate"})
    assert stored.public_link_token
    assert stored.public_link_expires_at is None
    event = audit_sink.of(AuditAction.RESOURCE_PUBLISHED)[0]
    assert event.details["public_permissions"] == ["annotate", "read"]


@pytest.mark.asyncio
async def test_republish_keeps_existing_token(publish, fake_uow, permissions, doc) -> None:
    first = await publish.execute(OWNER, "doc", ["read"])
    second = await publish.execute(OWNER, "doc", ["read", "write"])

    assert second.public_link_token == first.public_link_token
    assert second.public_permissions == frozenset({"read", "write"})


@pytest.mark.asyncio
async def test_publish_validation(publish, permissions, doc) -> None:
    with pytest.raises(ValidationError):
        await publish.execute(OWNER, "doc", [])
    with pytest.raises(ValidationError):
        await publish.execute(OWNER, "doc", ["read"], link_expires_at=NOW - timedelta(minutes=1))
    with pytest.raises(NotFound, match="Permission"):
        await publish.execute(OWNER, "doc", ["read", "teleport"])


@pytest.mark.asyncio
async def test_publish_requires_owner_or_publish(publish, fake_uow, permissions, doc) -> None:
    editor = ActorContext(subject_id="editor", tenant_id=TENANT)

    with pytest.raises(PermissionDenied):
        await publish.execute(editor, "doc", ["read"])

    fake_uow.grants.add_grant("doc", permissions["publish"], user_id="editor")
    published = await publish.execute(editor, "doc", ["read"])
    assert published.is_public is True


@pytest.mark.asyncio
async def test_unpublish_clears_everything(
    publish, unpublish, fake_uow, permissions, doc, audit_sink
) -> None:
    await publish.execute(OWNER, "doc", ["read"], link_expires_at=NOW + timedelta(days=1))

    await unpublish.execute(OWNER, "doc")

    stored = fake_uow.resources.get("doc")
    assert stored.is_public is False
    assert stored.public_permissions == frozenset()
    assert stored.public_link_token is None
    assert stored.public_link_expires_at is None
    assert len(audit_sink.of(AuditAction.RESOURCE_UNPUBLISHED)) == 1


@pytest.mark.asyncio
async def test_get_public_resource_by_token(publish, uow_factory, clock, permissions, doc) -> None:
    published = await publish.execute(
        OWNER, "doc", ["read"], link_expires_at=NOW + timedelta(hours=1)
    )
    use_case = GetPublicResourceUseCase(uow_factory, clock)

    found = await use_case.execute(published.public_link_token)
    assert found is not None and found.id == "doc"

    assert await use_case.execute("unknown") is None
    assert await use_case.execute("") is None

    clock.advance(hours=2)
    assert await use_case.execute(published.public_link_token) is None


@pytest.mark.asyncio
async def test_get_public_resource_ignores_inactive(uow_factory, clock, fake_uow) -> None:
    fake_uow.resources.add_resource(
        "gone",
        is_active=False,
        is_public=True,
        public_permissions=frozenset({"read"}),
        public_link_token="tok-gone",
    )

    assert await GetPublicResourceUseCase(uow_factory, clock).execute("tok-gone") is None
