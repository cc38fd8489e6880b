"""Unit tests for ResourceHierarchy, SetParentUseCase and GetChildrenUseCase."""

import pytest

from accessgate.application.services import ResourceHierarchy
from accessgate.application.use_cases.hierarchy.get_children import GetChildrenUseCase
from accessgate.application.use_cases.hierarchy.set_parent import SetParentUseCase
from accessgate.domain.exceptions import CycleDetected, NotFound, PermissionDenied, TenantMismatch
from accessgate.domain.value_objects import ActorContext, AuditAction

from tests.conftest import OTHER_TENANT, TENANT

OWNER = ActorContext(subject_id="owner", tenant_id=TENANT)


@pytest.fixture
def tree(fake_uow):
    """root <- folder <- doc, plus a detached sibling."""
    resources = fake_uow.resources
    resources.add_resource("root")
    resources.add_resource("folder", parent_resource_id="root")
    resources.add_resource("doc", parent_resource_id="folder")
    resources.add_resource("loose")
    return resources


@pytest.fixture
def set_parent(uow_factory, checker, audit_sink, clock) -> SetParentUseCase:
    return SetParentUseCase(
        unit_of_work_factory=uow_factory,
        permission_checker=checker,
        audit_sink=audit_sink,
        clock=clock,
    )


# --- ResourceHierarchy ---


@pytest.mark.asyncio
async def test_resolve_chain_nearest_parent_first(fake_uow, tree) -> None:
    chain = await ResourceHierarchy(fake_uow).resolve_chain("doc")

    assert [r.id for r in chain] == ["folder", "root"]


@pytest.mark.asyncio
async def test_resolve_chain_of_root_and_unknown(fake_uow, tree) -> None:
    hierarchy = ResourceHierarchy(fake_uow)

    assert await hierarchy.resolve_chain("root") == []
    assert await hierarchy.resolve_chain("missing") == []


@pytest.mark.asyncio
async def test_resolve_chain_stops_at_dangling_parent(fake_uow) -> None:
    fake_uow.resources.add_resource("orphan", parent_resource_id="gone")

    assert await ResourceHierarchy(fake_uow).resolve_chain("orphan") == []


@pytest.mark.asyncio
async def test_resolve_chain_raises_on_cycle(fake_uow) -> None:
    fake_uow.resources.add_resource("a", parent_resource_id="b")
    fake_uow.resources.add_resource("b", parent_resource_id="a")

    with pytest.raises(CycleDetected) as exc_info:
        await ResourceHierarchy(fake_uow).resolve_chain("a")
    assert exc_info.value.resource_id == "a"


@pytest.mark.asyncio
async def test_descendants_walks_all_levels(fake_uow, tree) -> None:
    hierarchy = ResourceHierarchy(fake_uow)

    assert await hierarchy.descendants({"root"}, TENANT) == {"folder", "doc"}
    assert await hierarchy.is_descendant("doc", "root") is True
    assert await hierarchy.is_descendant("root", "doc") is False


@pytest.mark.asyncio
async def test_descendants_stop_at_inactive_or_foreign_children(fake_uow, tree) -> None:
    tree.add_resource("archived", parent_resource_id="root", is_active=False)
    tree.add_resource("under-archived", parent_resource_id="archived")
    tree.add_resource("foreign", parent_resource_id="folder", tenant_id=OTHER_TENANT)
    tree.add_resource("under-foreign", parent_resource_id="foreign", tenant_id=OTHER_TENANT)

    assert await ResourceHierarchy(fake_uow).descendants({"root"}, TENANT) == {"folder", "doc"}


# --- SetParentUseCase ---


@pytest.mark.asyncio
async def test_set_parent_moves_resource(set_parent, fake_uow, tree, audit_sink) -> None:
    moved = await set_parent.execute(OWNER, "loose", "folder")

    assert moved.parent_resource_id == "folder"
    assert fake_uow.resources.get("loose").parent_resource_id == "folder"
    assert fake_uow.resources.hierarchy_locks == [TENANT]
    event = audit_sink.of(AuditAction.PARENT_CHANGED)[0]
    assert event.details["parent_id"] == "folder"
    assert event.details["previous_parent_id"] is None


@pytest.mark.asyncio
async def test_set_parent_none_detaches(set_parent, fake_uow, tree) -> None:
    await set_parent.execute(OWNER, "doc", None)

    assert fake_uow.resources.get("doc").parent_resource_id is None
    assert fake_uow.resources.hierarchy_locks == []


@pytest.mark.asyncio
async def test_set_parent_to_self_is_cycle(set_parent, tree) -> None:
    with pytest.raises(CycleDetected):
        await set_parent.execute(OWNER, "folder", "folder")


@pytest.mark.asyncio
async def test_set_parent_to_descendant_is_cycle(set_parent, fake_uow, tree) -> None:
    with pytest.raises(CycleDetected):
        await set_parent.execute(OWNER, "root", "doc")

    assert fake_uow.resources.get("root").parent_resource_id is None


@pytest.mark.asyncio
async def test_set_parent_rejects_parent_in_other_tenant(set_parent, fake_uow, tree) -> None:
    fake_uow.resources.add_resource("foreign", tenant_id=OTHER_TENANT)

    with pytest.raises(TenantMismatch):
        await set_parent.execute(OWNER, "loose", "foreign")


@pytest.mark.asyncio
async def test_set_parent_rejects_missing_or_inactive_parent(set_parent, fake_uow, tree) -> None:
    fake_uow.resources.add_resource("archived", is_active=False)

    with pytest.raises(NotFound):
        await set_parent.execute(OWNER, "loose", "nope")
    with pytest.raises(NotFound):
        await set_parent.execute(OWNER, "loose", "archived")


@pytest.mark.asyncio
async def test_set_parent_requires_owner_or_admin(set_parent, tree) -> None:
    stranger = ActorContext(subject_id="stranger", tenant_id=TENANT)

    with pytest.raises(PermissionDenied):
        await set_parent.execute(stranger, "loose", "folder")


# --- GetChildrenUseCase ---


@pytest.mark.asyncio
async def test_get_children_returns_active_children(
    uow_factory, checker, fake_uow, permissions, tree
) -> None:
    fake_uow.resources.add_resource("deleted", parent_resource_id="root", is_active=False)

    children = await GetChildrenUseCase(uow_factory, checker).execute(OWNER, "root")

    assert [c.id for c in children] == ["folder"]


@pytest.mark.asyncio
async def test_get_children_requires_read(uow_factory, checker, tree) -> None:
    stranger = ActorContext(subject_id="stranger", tenant_id=TENANT)

    with pytest.raises(PermissionDenied):
        await GetChildrenUseCase(uow_factory, checker).execute(stranger, "root")


@pytest.mark.asyncio
async def test_get_children_with_read_grant(uow_factory, checker, fake_uow, permissions, tree) -> None:
    fake_uow.grants.add_grant("folder", permissions["read"], user_id="reader")
    reader = ActorContext(subject_id="reader", tenant_id=TENANT)

    children = await GetChildrenUseCase(uow_factory, checker).execute(reader, "folder")

    assert [c.id for c in children] == ["doc"]
