"""Roles API: create, list, get, replace, toggle status, delete (optional)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from roles_service.api.v1.dependencies import (
    get_role_service,
    get_tenant_id,
    valid_role_id,
)
from roles_service.application.dtos.role import ListingParams
from roles_service.application.services.role_service import RoleService
from roles_service.schemas.role import (
    MessageResponse,
    RoleEnvelope,
    RoleListEnvelope,
    RoleRequest,
    RoleResponse,
    StatusRequest,
)
from roles_service.shared.context import get_current_time_zone

router = APIRouter()
# Mounted only when role deletion is enabled.
deletion_router = APIRouter()

ServiceDep = Annotated[RoleService, Depends(get_role_service)]
RoleIdDep = Annotated[str, Depends(valid_role_id)]


@router.post("", response_model=RoleEnvelope, status_code=201)
async def create_role(
    body: RoleRequest,
    service: ServiceDep,
    tenant_id: Annotated[str | None, Depends(get_tenant_id)],
):
    """Create a role for the caller's tenant."""
    role = await service.create_role(body.to_dto(), tenant_id)
    return RoleEnvelope(
        message="Role has been created successfully",
        data=RoleResponse.from_role(role),
    )


@router.get("", response_model=RoleListEnvelope)
async def list_roles(
    service: ServiceDep,
    search: str | None = None,
    order_by: Annotated[str | None, Query(alias="orderBy")] = None,
    order_type: Annotated[str | None, Query(alias="orderType")] = None,
    page_no: Annotated[str | None, Query(alias="pageNo")] = None,
    limit: str | None = None,
):
    """List roles with search, sort and pagination; limit=all returns everything."""
    page = await service.list_roles(
        ListingParams(
            search=search,
            order_by=order_by,
            order_type=order_type,
            page_no=page_no,
            limit=limit,
        )
    )
    time_zone = get_current_time_zone()
    return RoleListEnvelope(
        data=[RoleResponse.from_role(r, time_zone) for r in page.items],
        total=page.total,
        page=page.page,
        last_page=page.last_page,
    )


@router.get("/{role_id}", response_model=RoleEnvelope)
async def get_role(role_id: RoleIdDep, service: ServiceDep):
    role = await service.get_role(role_id)
    return RoleEnvelope(message="Role Found", data=RoleResponse.from_role(role))


@router.put("/{role_id}", response_model=RoleEnvelope)
async def update_role(role_id: RoleIdDep, body: RoleRequest, service: ServiceDep):
    """Replace name, description, permissions and active flag (tenant unchanged)."""
    role = await service.update_role(role_id, body.to_dto())
    return RoleEnvelope(
        message="Role has been updated successfully",
        data=RoleResponse.from_role(role),
    )


@router.patch("/{role_id}/status", response_model=RoleEnvelope)
async def change_status(role_id: RoleIdDep, body: StatusRequest, service: ServiceDep):
    role = await service.set_status(role_id, body.is_active)
    return RoleEnvelope(
        message="Role status has been changed successfully",
        data=RoleResponse.from_role(role),
    )


@deletion_router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(role_id: RoleIdDep, service: ServiceDep):
    """Soft-delete a role that no user holds."""
    await service.delete_role(role_id)
    return MessageResponse(message="Role deleted successfully")
