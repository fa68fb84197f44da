"""Application DTOs (plain dataclasses shared by services and adapters)."""

from roles_service.application.dtos.role import (
    ListingParams,
    RoleCreate,
    RoleListPage,
    RoleResult,
)

__all__ = ["ListingParams", "RoleCreate", "RoleListPage", "RoleResult"]
