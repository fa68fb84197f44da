"""Shared utilities: caller context, telemetry, and cross-cutting helpers.

Used by application, infrastructure and presentation. No business logic.
"""

from roles_service.shared.context import (
    CallerContext,
    clear_caller,
    get_caller_context,
    get_current_tenant_id,
    get_current_time_zone,
    get_current_user_id,
    set_caller,
)
from roles_service.shared.utils import generate_cuid, utc_now

__all__ = [
    "CallerContext",
    "set_caller",
    "clear_caller",
    "get_caller_context",
    "get_current_tenant_id",
    "get_current_time_zone",
    "get_current_user_id",
    "generate_cuid",
    "utc_now",
]
