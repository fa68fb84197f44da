"""Permissions service client (get_permission, validate_ids)."""

from __future__ import annotations

import logging
from typing import Any

from roles_service.infrastructure.rpc.client import MessagePatternClient
from roles_service.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


class PermissionsClient(MessagePatternClient):
    """Implements IPermissionsClient over message-pattern RPC."""

    service = "permissions"
    resource = "permission"

    @traced("rpc.permissions.get_permission")
    async def get_permission(self, ids: list[str]) -> list[Any]:
        data = await self.send("get_permission", list(ids))
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(
                "get_permission reply from %s service is %s, not a list (ids=%r)",
                self.service, type(data).__name__, ids,
            )
            raise self._call_failed(
                "get_permission", f"expected a list, got {type(data).__name__}"
            )
        return data

    @traced("rpc.permissions.validate_ids")
    async def validate_ids(self, ids: list[str]) -> bool:
        # Peers may answer with no data on success; only an explicit False rejects.
        data = await self.send("validate_ids", list(ids))
        return data is not False
