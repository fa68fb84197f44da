"""Application services: role orchestration and the listing pipeline."""

from roles_service.application.services.role_listing import build_role_query, last_page
from roles_service.application.services.role_service import RoleService

__all__ = ["RoleService", "build_role_query", "last_page"]
