"""Presentation-layer dependency injection (composition root).

Routes depend on these, never on infrastructure directly. The role
service is built per request from clients created in the lifespan.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request

from roles_service.application.services.role_service import RoleService
from roles_service.core.config import Settings, get_settings
from roles_service.domain.exceptions import StoreNotConfiguredException, ValidationException
from roles_service.infrastructure.firebase.repositories import FirestoreRoleRepository
from roles_service.shared.context import get_caller_context, get_current_tenant_id
from roles_service.shared.utils.generators import is_valid_identifier

logger = logging.getLogger(__name__)


def get_role_repo(request: Request) -> FirestoreRoleRepository:
    """Role store over the app's Firestore client; 503 when not configured."""
    client = getattr(request.app.state, "firestore_client", None)
    if client is None:
        raise StoreNotConfiguredException()
    return FirestoreRoleRepository(client)


def get_role_service(
    request: Request,
    role_repo: Annotated[FirestoreRoleRepository, Depends(get_role_repo)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> RoleService:
    return RoleService(
        role_repo,
        request.app.state.permissions_client,
        request.app.state.users_client,
        name_match=settings.role_name_match,
        default_page_limit=settings.default_page_limit,
    )


def valid_role_id(role_id: str) -> str:
    """Path role id, rejected with 400 unless it has the shape of a role id."""
    role_id = role_id.strip()
    if not is_valid_identifier(role_id):
        raise ValidationException(f"Invalid role id: {role_id!r}", field="id")
    return role_id


async def get_tenant_id() -> str | None:
    """Tenant forwarded by the gateway for this request, if any."""
    return get_current_tenant_id()


async def log_request(request: Request) -> None:
    """Log method, client, path and caller for every role request."""
    client = request.client.host if request.client else "-"
    caller = get_caller_context()
    logger.info(
        "%s %s %s user=%s tenant=%s",
        request.method,
        client,
        request.url.path,
        caller.user_id or "-",
        caller.tenant_id or "-",
    )
