"""Users service client (is_role_assigned_user)."""

from __future__ import annotations

from roles_service.infrastructure.rpc.client import MessagePatternClient
from roles_service.shared.telemetry.tracing import traced


class UsersClient(MessagePatternClient):
    """Implements IUsersClient over message-pattern RPC."""

    service = "users"
    resource = "user"

    @traced("rpc.users.is_role_assigned_user")
    async def is_role_assigned_user(self, role_id: str) -> bool:
        return bool(await self.send("is_role_assigned_user", role_id))
