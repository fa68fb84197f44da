"""Role application service: validated writes, listing and lookups.

Every write runs strictly in order: name uniqueness probe, permission
validation with the Permissions service, then exactly one store write.
Nothing is written when an earlier step fails.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from roles_service.application.dtos.role import (
    ListingParams,
    RoleCreate,
    RoleListPage,
    RoleResult,
)
from roles_service.application.dtos.role_query import FieldPattern, RoleQuery
from roles_service.application.interfaces import (
    IPermissionsClient,
    IRoleRepository,
    IUsersClient,
)
from roles_service.application.services.role_listing import build_role_query, last_page
from roles_service.domain.enums import RoleNameMatch
from roles_service.domain.exceptions import (
    ConflictException,
    InternalException,
    RemoteValidationException,
    ResourceNotFoundException,
)
from roles_service.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

_MSG_DUPLICATE_ROLE_NAME = "Role Name already exists"


class RoleService:
    """Create, update, list, fetch, toggle and delete roles."""

    def __init__(
        self,
        role_repo: IRoleRepository,
        permissions_client: IPermissionsClient,
        users_client: IUsersClient,
        name_match: RoleNameMatch = RoleNameMatch.PREFIX,
        default_page_limit: int = 10,
    ) -> None:
        self._role_repo = role_repo
        self._permissions = permissions_client
        self._users = users_client
        self._name_match = name_match
        self._default_page_limit = default_page_limit

    def name_probe(self, role_name: str, exclude_id: str | None = None) -> RoleQuery:
        """Query for existing roles whose name collides with role_name."""
        if self._name_match is RoleNameMatch.EXACT:
            pattern = FieldPattern.equals("role_name", role_name)
        else:
            pattern = FieldPattern.starts_with("role_name", role_name)
        excluded = frozenset({exclude_id}) if exclude_id else frozenset()
        return RoleQuery(all_of=(pattern,), exclude_ids=excluded)

    async def _ensure_name_available(
        self, role_name: str, exclude_id: str | None = None
    ) -> None:
        existing = await self._role_repo.find_one(self.name_probe(role_name, exclude_id))
        if existing is not None:
            logger.info(
                "roleName %r collides with existing role %s", role_name, existing.id
            )
            raise ConflictException(_MSG_DUPLICATE_ROLE_NAME, role_name=role_name)

    async def _validate_permissions(self, permission_ids: list[str]) -> None:
        logger.info(
            "Validating %d permission id(s) with the Permissions service",
            len(permission_ids),
        )
        if not await self._permissions.validate_ids(list(permission_ids)):
            raise RemoteValidationException(
                "permissions",
                "validate_ids",
                "One or more permission ids are invalid",
            )

    async def _populate_permissions(self, role: RoleResult) -> RoleResult:
        permissions = await self._permissions.get_permission(list(role.permissions))
        return replace(role, permissions=permissions if permissions is not None else [])

    @traced("roles.create")
    async def create_role(self, data: RoleCreate, tenant_id: str | None) -> RoleResult:
        """Create a role owned by tenant_id.

        Raises:
            ConflictException: If the name collides with a non-deleted role.
            RemoteValidationException: If the Permissions service rejects the ids.
            InternalException: If the store returned no document.
        """
        await self._ensure_name_available(data.role_name)
        await self._validate_permissions(data.permissions)
        logger.info("Validation completed without errors. Inserting role.")
        created = await self._role_repo.insert(data, tenant_id)
        if created is None:
            logger.error("Role insert returned no document (roleName=%r)", data.role_name)
            raise InternalException("Unknown error while adding role occurred.")
        logger.info("Role %s created", created.id)
        return created

    @traced("roles.update")
    async def update_role(self, role_id: str, data: RoleCreate) -> RoleResult:
        """Replace name, description, permissions and active flag of a role.

        tenant_id is never changed.

        Raises:
            ConflictException: If the name collides with another non-deleted role.
            RemoteValidationException: If the Permissions service rejects the ids.
            ResourceNotFoundException: If the role is missing or deleted.
        """
        await self._ensure_name_available(data.role_name, exclude_id=role_id)
        await self._validate_permissions(data.permissions)
        updated = await self._role_repo.update_by_id(
            role_id,
            {
                "role_name": data.role_name,
                "description": data.description,
                "permissions": list(data.permissions),
                "is_active": data.is_active,
            },
        )
        if updated is None:
            raise ResourceNotFoundException("role", role_id)
        logger.info("Role %s updated", role_id)
        return updated

    @traced("roles.list")
    async def list_roles(self, params: ListingParams) -> RoleListPage:
        """Return one page of roles with permissions populated, in result order.

        Raises:
            ValidationException: If a listing parameter is malformed.
        """
        query = build_role_query(params, self._default_page_limit)
        total = await self._role_repo.count(query)
        logger.debug(
            "Listing roles: total=%d skip=%d limit=%s", total, query.skip, query.limit
        )
        items: list[RoleResult] = []
        async for role in self._role_repo.find(query):
            items.append(await self._populate_permissions(role))
        add_span_attributes(total=total, returned=len(items))
        return RoleListPage(
            items=items,
            total=total,
            page=query.page,
            last_page=last_page(total, query.limit),
        )

    @traced("roles.get")
    async def get_role(
        self, role_id: str, extra: dict[str, Any] | None = None
    ) -> RoleResult:
        """Return a role with permissions populated.

        Raises:
            ResourceNotFoundException: If the role is missing or deleted.
        """
        role = await self._role_repo.find_by_id(role_id, extra)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        return await self._populate_permissions(role)

    @traced("roles.set_status")
    async def set_status(self, role_id: str, is_active: bool) -> RoleResult:
        """Set is_active on a role and nothing else.

        Raises:
            ResourceNotFoundException: If the role is missing or deleted.
        """
        role = await self._role_repo.update_by_id(role_id, {"is_active": is_active})
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        logger.info("Role %s is_active set to %s", role_id, is_active)
        return role

    async def is_permission_assigned(self, permission_id: str) -> bool:
        """Return True if an active, non-deleted role references permission_id."""
        role = await self._role_repo.find_by_permission(
            permission_id, {"is_active": True}
        )
        return role is not None

    @traced("roles.delete")
    async def delete_role(self, role_id: str) -> RoleResult:
        """Soft-delete a role that no user holds.

        Raises:
            ResourceNotFoundException: If the role is missing or already deleted.
            ConflictException: If the Users service reports the role as assigned.
        """
        role = await self._role_repo.find_by_id(role_id)
        if role is None:
            raise ResourceNotFoundException("role", role_id)
        if await self._users.is_role_assigned_user(role.id):
            raise ConflictException(f"{role_id} assigned to User", role_id=role_id)
        deleted = await self._role_repo.soft_delete(role_id)
        if deleted is None:
            raise ResourceNotFoundException("role", role_id)
        logger.info("Role %s deleted", role_id)
        return deleted
