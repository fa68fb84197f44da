"""Message-pattern RPC endpoint for peer services.

POST /rpc with {"pattern": {"cmd": ...}, "data": ...}. Every failure is
returned as an isError envelope instead of an HTTP error; unexpected ones
are logged and reported as 500 INTERNAL_ERROR.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import APIRouter, Depends

from roles_service.api.v1.dependencies import get_role_service, valid_role_id
from roles_service.application.services.role_service import RoleService
from roles_service.core.exception_handlers import status_for
from roles_service.domain.exceptions import RolesServiceException, ValidationException
from roles_service.schemas.role import RoleResponse, RpcRequest, RpcResponse

logger = logging.getLogger(__name__)

router = APIRouter()

_Handler = Callable[[RoleService, Any], Awaitable[Any]]


def _require_id(data: Any) -> str:
    if not isinstance(data, str) or not data.strip():
        raise ValidationException("data must be a non-empty id string", field="data")
    return data.strip()


async def _get_role_by_id(service: RoleService, data: Any) -> dict[str, Any]:
    role = await service.get_role(valid_role_id(_require_id(data)))
    return RoleResponse.from_role(role).model_dump(mode="json", by_alias=True)


async def _get_permission_assign_role(service: RoleService, data: Any) -> bool:
    return await service.is_permission_assigned(_require_id(data))


_HANDLERS: dict[str, _Handler] = {
    "get_role_by_id": _get_role_by_id,
    "get_permission_assign_role": _get_permission_assign_role,
}


@router.post(
    "/rpc",
    response_model=RpcResponse,
    response_model_exclude_none=True,
    tags=["rpc"],
)
async def handle_message(
    body: RpcRequest,
    service: Annotated[RoleService, Depends(get_role_service)],
) -> RpcResponse:
    """Dispatch one command and wrap its result (or domain error) in an envelope."""
    cmd = body.pattern.cmd
    handler = _HANDLERS.get(cmd)
    if handler is None:
        logger.warning("Unknown RPC command %r", cmd)
        return RpcResponse(
            is_error=True,
            status_code=400,
            message=f"Unknown command: {cmd}",
            error="UNKNOWN_COMMAND",
        )
    try:
        data = await handler(service, body.data)
    except RolesServiceException as exc:
        logger.error("RPC %s failed (data=%r): %s", cmd, body.data, exc.message)
        return RpcResponse(
            is_error=True,
            status_code=status_for(exc),
            message=exc.message,
            error=exc.error_code,
        )
    except Exception:
        logger.exception("RPC %s failed unexpectedly (data=%r)", cmd, body.data)
        return RpcResponse(
            is_error=True,
            status_code=500,
            message="Internal server error",
            error="INTERNAL_ERROR",
        )
    return RpcResponse(data=data)
