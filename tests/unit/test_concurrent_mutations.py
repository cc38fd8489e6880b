"""Concurrent mutations on the same resource and connection usage per request."""

import asyncio
from dataclasses import replace

import pytest

from accessgate.application.use_cases.grant.grant_permission import GrantPermissionUseCase
from accessgate.application.use_cases.guards import ensure_still_authorized
from accessgate.application.use_cases.hierarchy.set_parent import SetParentUseCase
from accessgate.application.use_cases.publication.publish_resource import (
    PublishResourceUseCase,
)
from accessgate.application.use_cases.publication.unpublish_resource import (
    UnpublishResourceUseCase,
)
from accessgate.domain.exceptions import PermissionDenied
from accessgate.domain.value_objects import ActorContext, AuditAction, SubjectRef

from tests.conftest import NOW, TENANT

OWNER = ActorContext(subject_id="owner", tenant_id=TENANT)
MALLORY = ActorContext(subject_id="mallory", tenant_id=TENANT)


@pytest.fixture
def deps(uow_factory, checker, audit_sink, clock) -> dict:
    return dict(
        unit_of_work_factory=uow_factory,
        permission_checker=checker,
        audit_sink=audit_sink,
        clock=clock,
    )


@pytest.fixture
def published_doc(fake_uow, permissions):
    resources = fake_uow.resources
    resources.add_resource("folder")
    return resources.add_resource(
        "doc",
        is_public=True,
        public_permissions=frozenset({"read"}),
        public_link_token="tok",
    )


# --- Lost updates ---


@pytest.mark.asyncio
async def test_move_and_unpublish_both_survive(deps, fake_uow, checker, published_doc) -> None:
    fake_uow.resources.delay = 0.01

    await asyncio.gather(
        SetParentUseCase(**deps).execute(OWNER, "doc", "folder"),
        UnpublishResourceUseCase(**deps).execute(OWNER, "doc"),
    )

    fake_uow.resources.delay = 0.0
    stored = fake_uow.resources.get("doc")
    assert stored.parent_resource_id == "folder"
    assert stored.is_public is False
    assert stored.public_permissions == frozenset()
    assert stored.public_link_token is None
    assert await checker.check_anonymous("doc", "read", TENANT) is False


@pytest.mark.asyncio
async def test_republish_and_move_both_survive(deps, fake_uow, published_doc) -> None:
    fake_uow.resources.delay = 0.01

    await asyncio.gather(
        PublishResourceUseCase(**deps).execute(OWNER, "doc", ["read", "write"]),
        SetParentUseCase(**deps).execute(OWNER, "doc", "folder"),
    )

    stored = fake_uow.resources.get("doc")
    assert stored.parent_resource_id == "folder"
    assert stored.public_permissions == frozenset({"read", "write"})
    assert stored.public_link_token == "tok"


@pytest.mark.asyncio
async def test_mutations_lock_the_row_they_write(deps, fake_uow, published_doc) -> None:
    calls: list[str] = []
    original = fake_uow.resources.get_for_update

    async def recording(resource_id: str):
        calls.append(resource_id)
        return await original(resource_id)

    fake_uow.resources.get_for_update = recording

    await UnpublishResourceUseCase(**deps).execute(OWNER, "doc")
    await SetParentUseCase(**deps).execute(OWNER, "doc", None)

    assert calls == ["doc", "doc"]


# --- Idempotent grants under concurrency ---


@pytest.mark.asyncio
async def test_concurrent_identical_grants_store_one(
    deps, fake_uow, permissions, audit_sink
) -> None:
    fake_uow.resources.add_resource("doc-1", owner_id="owner")
    fake_uow.resources.delay = 0.01
    use_case = GrantPermissionUseCase(**deps)

    first, second = await asyncio.gather(
        use_case.execute(OWNER, SubjectRef.user("bob"), "doc-1", permissions["read"].id),
        use_case.execute(OWNER, SubjectRef.user("bob"), "doc-1", permissions["read"].id),
    )

    assert first.id == second.id
    assert [g.id for g in fake_uow.grants.all() if g.is_valid(NOW)] == [first.id]
    assert len(audit_sink.of(AuditAction.PERMISSION_GRANTED)) == 1


# --- One transaction at a time ---


@pytest.mark.asyncio
async def test_delegated_admin_grant_uses_one_transaction_at_a_time(
    deps, fake_uow, permissions
) -> None:
    fake_uow.resources.add_resource("doc-1", owner_id="owner")
    fake_uow.grants.add_grant("doc-1", permissions["admin"], user_id="mallory")

    await GrantPermissionUseCase(**deps).execute(
        MALLORY, SubjectRef.user("bob"), "doc-1", permissions["read"].id
    )

    assert fake_uow.max_open_transactions == 1
    assert fake_uow.open_transactions == 0


@pytest.mark.asyncio
async def test_delegated_publish_and_move_use_one_transaction_at_a_time(
    deps, fake_uow, permissions, published_doc
) -> None:
    fake_uow.grants.add_grant("doc", permissions["publish"], user_id="mallory")
    fake_uow.grants.add_grant("doc", permissions["admin"], user_id="mallory")

    await UnpublishResourceUseCase(**deps).execute(MALLORY, "doc")
    await SetParentUseCase(**deps).execute(MALLORY, "doc", "folder")

    assert fake_uow.max_open_transactions == 1


def test_owner_check_is_repeated_on_the_locked_row(published_doc) -> None:
    moved_away = replace(published_doc, owner_id="bob")

    ensure_still_authorized(OWNER, published_doc, published_doc)
    ensure_still_authorized(MALLORY, published_doc, moved_away)
    with pytest.raises(PermissionDenied):
        ensure_still_authorized(OWNER, published_doc, moved_away)
