"""DTOs for role use cases (no dependency on Firestore or HTTP)."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class RoleCreate:
    """Role write payload (create and full update). tenant_id is never part of it."""

    role_name: str
    description: str
    permissions: list[str] = field(default_factory=list)
    is_active: bool = True


@dataclass(frozen=True)
class RoleResult:
    """Role read-model. permissions holds ids, or permission objects once populated."""

    id: str
    role_name: str
    description: str
    tenant_id: str | None
    permissions: list[Any]
    is_active: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class ListingParams:
    """Raw listing query parameters, exactly as received (untyped)."""

    search: str | None = None
    order_by: str | None = None
    order_type: str | int | None = None
    page_no: str | int | None = None
    limit: str | int | None = None


@dataclass(frozen=True)
class RoleListPage:
    """One page of roles with populated permissions and paging totals."""

    items: list[RoleResult]
    total: int
    page: int
    last_page: int
