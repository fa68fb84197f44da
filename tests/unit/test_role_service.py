"""RoleService over the Firestore fake with mocked peer services."""

from unittest.mock import AsyncMock

import pytest

from roles_service.application.dtos.role import ListingParams, RoleCreate
from roles_service.application.services.role_service import RoleService
from roles_service.domain.enums import RoleNameMatch
from roles_service.domain.exceptions import (
    ConflictException,
    InternalException,
    RemoteValidationException,
    ResourceNotFoundException,
    ValidationException,
)
from roles_service.infrastructure.firebase.collections import COLLECTION_ROLES


def _role(name: str = "Admin", permissions: list[str] | None = None, **kwargs) -> RoleCreate:
    return RoleCreate(
        role_name=name,
        description=kwargs.pop("description", "x"),
        permissions=["p1"] if permissions is None else permissions,
        **kwargs,
    )


@pytest.mark.asyncio
async def test_create_role(role_service, permissions_client) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    assert created.id
    assert created.is_active is True
    assert created.permissions == ["p1"]
    assert created.tenant_id == "t1"
    permissions_client.validate_ids.assert_awaited_once_with(["p1"])


@pytest.mark.asyncio
async def test_create_role_with_case_variant_name_conflicts(role_service) -> None:
    await role_service.create_role(_role("Admin"), "t1")
    with pytest.raises(ConflictException) as exc_info:
        await role_service.create_role(_role("admin"), "t1")
    assert exc_info.value.message == "Role Name already exists"


@pytest.mark.asyncio
async def test_create_role_prefix_of_existing_name_conflicts(role_service) -> None:
    await role_service.create_role(_role("Administrator"), "t1")
    with pytest.raises(ConflictException):
        await role_service.create_role(_role("ADMIN"), "t1")


@pytest.mark.asyncio
async def test_create_role_with_distinct_name_succeeds(role_service) -> None:
    await role_service.create_role(_role("Admin"), "t1")
    await role_service.create_role(_role("Administrator"), "t1")
    await role_service.create_role(_role("Editor"), "t1")
    assert (await role_service.list_roles(ListingParams(limit="all"))).total == 3


@pytest.mark.asyncio
async def test_role_name_is_matched_literally(role_service) -> None:
    await role_service.create_role(_role("Admin"), "t1")
    # "A.m" would match "Admin" as a regular expression.
    await role_service.create_role(_role("A.m"), "t1")


@pytest.mark.asyncio
async def test_exact_name_match_mode(role_repo, permissions_client, users_client) -> None:
    service = RoleService(
        role_repo, permissions_client, users_client, name_match=RoleNameMatch.EXACT
    )
    await service.create_role(_role("Admin"), "t1")
    await service.create_role(_role("Adm"), "t1")
    with pytest.raises(ConflictException):
        await service.create_role(_role("ADMIN"), "t1")


@pytest.mark.asyncio
async def test_deleted_role_name_can_be_reused(role_service) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    await role_service.delete_role(created.id)
    await role_service.create_role(_role("Admin"), "t1")


@pytest.mark.asyncio
async def test_create_role_rejected_permissions_writes_nothing(
    role_service, permissions_client, fake_firestore
) -> None:
    permissions_client.validate_ids.return_value = False
    with pytest.raises(RemoteValidationException) as exc_info:
        await role_service.create_role(_role("Admin", ["bad"]), "t1")
    assert exc_info.value.details["command"] == "validate_ids"
    assert fake_firestore.writes == []


@pytest.mark.asyncio
async def test_create_role_peer_error_propagates(
    role_service, permissions_client, fake_firestore
) -> None:
    permissions_client.validate_ids.side_effect = RemoteValidationException(
        "permissions", "validate_ids", "Invalid permission id", status_code=400
    )
    with pytest.raises(RemoteValidationException) as exc_info:
        await role_service.create_role(_role("Admin"), "t1")
    assert exc_info.value.status_code == 400
    assert fake_firestore.writes == []


@pytest.mark.asyncio
async def test_create_role_conflict_skips_permission_check(
    role_service, permissions_client
) -> None:
    await role_service.create_role(_role("Admin"), "t1")
    permissions_client.validate_ids.reset_mock()
    with pytest.raises(ConflictException):
        await role_service.create_role(_role("admin"), "t1")
    permissions_client.validate_ids.assert_not_awaited()


@pytest.mark.asyncio
async def test_create_role_insert_without_result_is_internal_error(
    permissions_client, users_client
) -> None:
    repo = AsyncMock()
    repo.find_one = AsyncMock(return_value=None)
    repo.insert = AsyncMock(return_value=None)
    service = RoleService(repo, permissions_client, users_client)
    with pytest.raises(InternalException):
        await service.create_role(_role("Admin"), "t1")


@pytest.mark.asyncio
async def test_update_role_keeping_own_name_succeeds(role_service) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    updated = await role_service.update_role(
        created.id, _role("Admin", ["p1", "p2"], description="new", is_active=False)
    )
    assert updated.description == "new"
    assert updated.permissions == ["p1", "p2"]
    assert updated.is_active is False
    assert updated.tenant_id == "t1"


@pytest.mark.asyncio
async def test_update_role_to_prefix_of_other_name_conflicts(role_service) -> None:
    admin = await role_service.create_role(_role("Administrator"), "t1")
    await role_service.create_role(_role("Editor"), "t1")
    with pytest.raises(ConflictException):
        await role_service.update_role(admin.id, _role("edit"))


@pytest.mark.asyncio
async def test_update_role_rejected_permissions_leaves_role_unchanged(
    role_service, permissions_client, fake_firestore
) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    permissions_client.validate_ids.return_value = False
    with pytest.raises(RemoteValidationException):
        await role_service.update_role(created.id, _role("Admin", ["bad"]))
    assert fake_firestore.get(COLLECTION_ROLES, created.id)["permissions"] == ["p1"]


@pytest.mark.asyncio
async def test_update_missing_role_is_not_found(role_service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await role_service.update_role("missing", _role("Admin"))


@pytest.mark.asyncio
async def test_list_roles_limit_all(role_service) -> None:
    for name in ("Admin", "Editor", "Viewer"):
        await role_service.create_role(_role(name), "t1")
    page = await role_service.list_roles(ListingParams(limit="all"))
    assert page.total == 3
    assert page.last_page == 1
    assert len(page.items) == 3


@pytest.mark.asyncio
async def test_list_roles_third_page_of_twenty_five(role_service, role_repo) -> None:
    for i in range(1, 26):
        await role_repo.insert(_role(f"role-{i:02d}"), "t1")
    page = await role_service.list_roles(ListingParams(limit="10", page_no="3"))
    assert page.total == 25
    assert page.page == 3
    assert page.last_page == 3
    assert len(page.items) == 5


@pytest.mark.asyncio
async def test_list_roles_search_counts_matches_only(role_service, role_repo) -> None:
    await role_repo.insert(_role("Admin"), "t1")
    await role_repo.insert(_role("Editor", description="edits admin pages"), "t1")
    await role_repo.insert(_role("Viewer"), "t1")
    page = await role_service.list_roles(ListingParams(search="ADMIN", limit="all"))
    assert page.total == 2
    assert {r.role_name for r in page.items} == {"Admin", "Editor"}


@pytest.mark.asyncio
async def test_list_roles_populates_permissions_in_order(
    role_service, role_repo, permissions_client
) -> None:
    await role_repo.insert(_role("beta", ["p2"]), "t1")
    await role_repo.insert(_role("Alpha", ["p1"]), "t1")
    page = await role_service.list_roles(ListingParams(order_by="roleName"))
    assert [r.role_name for r in page.items] == ["Alpha", "beta"]
    assert page.items[0].permissions == [{"id": "p1", "name": "perm-p1"}]
    assert permissions_client.get_permission.await_count == 2


@pytest.mark.asyncio
async def test_list_roles_rejects_bad_limit(role_service) -> None:
    with pytest.raises(ValidationException):
        await role_service.list_roles(ListingParams(limit="-1"))


@pytest.mark.asyncio
async def test_get_role_populates_permissions(role_service) -> None:
    created = await role_service.create_role(_role("Admin", ["p1", "p2"]), "t1")
    role = await role_service.get_role(created.id)
    assert [p["id"] for p in role.permissions] == ["p1", "p2"]


@pytest.mark.asyncio
async def test_get_missing_role_is_not_found(role_service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await role_service.get_role("missing")


@pytest.mark.asyncio
async def test_set_status_flips_only_is_active(role_service, fake_firestore) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    before = fake_firestore.get(COLLECTION_ROLES, created.id)
    toggled = await role_service.set_status(created.id, False)
    after = fake_firestore.get(COLLECTION_ROLES, created.id)
    assert toggled.is_active is False
    assert after["is_active"] is False
    changed = {k for k in after if after[k] != before[k]}
    assert "is_active" in changed
    assert changed <= {"is_active", "updated_at"}


@pytest.mark.asyncio
async def test_set_status_on_missing_or_deleted_role_is_not_found(role_service) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    await role_service.delete_role(created.id)
    with pytest.raises(ResourceNotFoundException):
        await role_service.set_status(created.id, False)
    with pytest.raises(ResourceNotFoundException):
        await role_service.set_status("missing", False)


@pytest.mark.asyncio
async def test_is_permission_assigned_only_for_active_roles(role_service) -> None:
    active = await role_service.create_role(_role("Admin", ["p1"]), "t1")
    await role_service.create_role(_role("Editor", ["p2"], is_active=False), "t1")
    assert await role_service.is_permission_assigned("p1") is True
    assert await role_service.is_permission_assigned("p2") is False
    await role_service.set_status(active.id, False)
    assert await role_service.is_permission_assigned("p1") is False


@pytest.mark.asyncio
async def test_delete_role_assigned_to_user_conflicts(
    role_service, users_client, fake_firestore
) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    users_client.is_role_assigned_user.return_value = True
    with pytest.raises(ConflictException) as exc_info:
        await role_service.delete_role(created.id)
    assert exc_info.value.message == f"{created.id} assigned to User"
    assert fake_firestore.get(COLLECTION_ROLES, created.id)["is_deleted"] is False


@pytest.mark.asyncio
async def test_delete_role_soft_deletes(role_service, users_client) -> None:
    created = await role_service.create_role(_role("Admin"), "t1")
    await role_service.delete_role(created.id)
    users_client.is_role_assigned_user.assert_awaited_once_with(created.id)
    with pytest.raises(ResourceNotFoundException):
        await role_service.get_role(created.id)
    with pytest.raises(ResourceNotFoundException):
        await role_service.delete_role(created.id)
