"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from roles_service.application.dtos.role import RoleCreate, RoleResult
    from roles_service.application.dtos.role_query import RoleQuery


class IRoleRepository(Protocol):
    """Protocol for the role store. Soft-deleted roles are invisible to every method."""

    def find(self, query: RoleQuery | None = None) -> AsyncIterator[RoleResult]:
        """Yield non-deleted roles matching query, sorted and paginated."""

    async def find_one(self, query: RoleQuery) -> RoleResult | None:
        """Return the first non-deleted role matching query, or None."""

    async def count(self, query: RoleQuery | None = None) -> int:
        """Return the number of non-deleted roles matching query (no pagination)."""

    async def find_by_id(
        self, role_id: str, extra: dict[str, Any] | None = None
    ) -> RoleResult | None:
        """Return the role if it exists, is not deleted and matches extra equalities."""

    async def find_by_permission(
        self, permission_id: str, extra: dict[str, Any] | None = None
    ) -> RoleResult | None:
        """Return a non-deleted role referencing permission_id and matching extra, or None."""

    async def insert(self, data: RoleCreate, tenant_id: str | None) -> RoleResult:
        """Persist a new role; assigns id and timestamps."""

    async def update_by_id(
        self, role_id: str, patch: dict[str, Any]
    ) -> RoleResult | None:
        """Apply patch (stored field names) to a non-deleted role; None if absent."""

    async def soft_delete(self, role_id: str) -> RoleResult | None:
        """Mark a non-deleted role as deleted; None if absent."""
