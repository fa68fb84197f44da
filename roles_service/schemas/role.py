"""Role API schemas.

Roles travel in camelCase on the wire (roleName, isActive, ...); the
models use snake_case attributes with camel aliases.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from roles_service.application.dtos.role import RoleCreate, RoleResult
from roles_service.shared.utils.datetime import format_in_timezone

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RoleRequest(BaseModel):
    """Request body for creating or replacing a role. tenantId is ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    role_name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    permissions: list[str]
    is_active: bool = True

    def to_dto(self) -> RoleCreate:
        return RoleCreate(
            role_name=self.role_name,
            description=self.description,
            permissions=list(self.permissions),
            is_active=self.is_active,
        )


class StatusRequest(BaseModel):
    """Request body for PATCH /roles/{id}/status."""

    model_config = _CAMEL

    is_active: bool


class RoleResponse(BaseModel):
    """Role as returned to callers (camelCase)."""

    model_config = _CAMEL

    id: str
    role_name: str
    description: str
    tenant_id: str | None = None
    permissions: list[Any] = Field(default_factory=list)
    is_active: bool
    created_at: datetime | str | None = None

    @classmethod
    def from_role(cls, role: RoleResult, time_zone: str | None = None) -> "RoleResponse":
        """Build from a RoleResult; createdAt is localized when time_zone is known."""
        created_at: datetime | str | None = role.created_at
        if role.created_at is not None and time_zone:
            created_at = format_in_timezone(role.created_at, time_zone) or role.created_at
        return cls(
            id=role.id,
            role_name=role.role_name,
            description=role.description,
            tenant_id=role.tenant_id,
            permissions=list(role.permissions),
            is_active=role.is_active,
            created_at=created_at,
        )


class RoleEnvelope(BaseModel):
    """Single-role response: {message, data}."""

    message: str
    data: RoleResponse


class RoleListEnvelope(BaseModel):
    """Listing response: {data, total, page, last_page}."""

    data: list[RoleResponse]
    total: int
    page: int
    last_page: int


class MessageResponse(BaseModel):
    message: str


class RpcPattern(BaseModel):
    cmd: str


class RpcRequest(BaseModel):
    """Message-pattern request: {"pattern": {"cmd": ...}, "data": ...}."""

    pattern: RpcPattern
    data: Any = None


class RpcResponse(BaseModel):
    """Message-pattern reply envelope (isError, data, message, statusCode, error)."""

    model_config = _CAMEL

    is_error: bool = False
    data: Any = None
    message: str | None = None
    status_code: int | None = None
    error: str | None = None
