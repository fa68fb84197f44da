"""API v1 router aggregation.

Includes endpoint modules with consistent prefix and tags. The delete
route is included only when role deletion is enabled.
"""

from fastapi import APIRouter, Depends

from roles_service.api.v1.dependencies import log_request
from roles_service.api.v1.endpoints import health, roles


def build_api_router(enable_role_deletion: bool = False) -> APIRouter:
    api_router = APIRouter()
    api_router.include_router(health.router, prefix="/health", tags=["health"])
    api_router.include_router(
        roles.router,
        prefix="/roles",
        tags=["roles"],
        dependencies=[Depends(log_request)],
    )
    if enable_role_deletion:
        api_router.include_router(
            roles.deletion_router,
            prefix="/roles",
            tags=["roles"],
            dependencies=[Depends(log_request)],
        )
    return api_router
