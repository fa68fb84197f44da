"""Request context management using contextvars.

Provides async-safe storage for request-scoped caller data forwarded by
the gateway (user id, tenant id, timezone).

Usage:
    set_caller(user_id="user123", tenant_id="tenant456", time_zone="UTC")
    tenant_id = get_current_tenant_id()
"""

from contextvars import ContextVar
from dataclasses import dataclass

_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)
_current_tenant_id: ContextVar[str | None] = ContextVar(
    "current_tenant_id", default=None
)
_current_time_zone: ContextVar[str | None] = ContextVar(
    "current_time_zone", default=None
)


@dataclass(frozen=True)
class CallerContext:
    """Immutable snapshot of the current caller."""

    user_id: str | None
    tenant_id: str | None
    time_zone: str | None = None


def set_caller(
    user_id: str | None,
    tenant_id: str | None,
    time_zone: str | None = None,
) -> None:
    """Set the caller context for this request.

    Call in middleware before the route runs. Context is scoped to the
    current async task.
    """
    _current_user_id.set(user_id or None)
    _current_tenant_id.set(tenant_id or None)
    _current_time_zone.set(time_zone or None)


def clear_caller() -> None:
    """Clear the caller context."""
    _current_user_id.set(None)
    _current_tenant_id.set(None)
    _current_time_zone.set(None)


def get_current_user_id() -> str | None:
    """Return the caller's user ID, or None if not forwarded."""
    return _current_user_id.get()


def get_current_tenant_id() -> str | None:
    """Return the caller's tenant ID, or None if not forwarded."""
    return _current_tenant_id.get()


def get_current_time_zone() -> str | None:
    """Return the caller's IANA timezone name, or None."""
    return _current_time_zone.get()


def get_caller_context() -> CallerContext:
    """Return a snapshot of the current caller context."""
    return CallerContext(
        user_id=_current_user_id.get(),
        tenant_id=_current_tenant_id.get(),
        time_zone=_current_time_zone.get(),
    )
