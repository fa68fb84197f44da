"""Peer-service interfaces (ports) for the application layer.

The HTTP-backed RPC clients in roles_service.infrastructure.rpc implement
these; tests substitute in-process doubles.
"""

from __future__ import annotations

from typing import Any, Protocol


class IPermissionsClient(Protocol):
    """Protocol for the Permissions service."""

    async def get_permission(self, ids: list[str]) -> list[Any]:
        """Return permission objects for ids (order as returned by the peer)."""

    async def validate_ids(self, ids: list[str]) -> bool:
        """Return the peer's verdict on ids (True if every id is valid).

        Raises RemoteValidationException (or ResourceNotFoundException) when the
        peer answers with an error.
        """


class IUsersClient(Protocol):
    """Protocol for the Users service."""

    async def is_role_assigned_user(self, role_id: str) -> bool:
        """Return True if any active user holds role_id."""
