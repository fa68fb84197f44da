"""Caller context middleware.

The gateway authenticates callers and forwards tenant id, user id and
timezone as headers; they are placed in contextvars for the request's
duration. Raw ASGI so the context is set in the same task as the route.
"""

from typing import Callable

from roles_service.middleware._headers import get_header
from roles_service.shared.context import clear_caller, set_caller


def CallerContextMiddleware(
    app: Callable,
    tenant_header: str = "X-Tenant-ID",
    user_header: str = "X-User-ID",
    timezone_header: str = "X-Timezone",
) -> Callable:
    """Set caller context from gateway headers before the route runs."""

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return
        set_caller(
            user_id=(get_header(scope, user_header) or "").strip(),
            tenant_id=(get_header(scope, tenant_header) or "").strip(),
            time_zone=(get_header(scope, timezone_header) or "").strip(),
        )
        try:
            await app(scope, receive, send)
        finally:
            clear_caller()

    return asgi_app
