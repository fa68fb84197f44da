"""Request/response RPC client for peer services.

A call is POST {base_url}/rpc with {"pattern": {"cmd": ...}, "data": ...};
the peer answers {"isError": bool, "data": ..., "message": ..., "statusCode": ...}.
Error envelopes and transport failures become domain exceptions; nothing is
retried.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from roles_service.domain.exceptions import (
    RemoteValidationException,
    ResourceNotFoundException,
    RolesServiceException,
)

logger = logging.getLogger(__name__)

RPC_PATH = "/rpc"


def _error_message(envelope: dict[str, Any]) -> str:
    message = envelope.get("message") or envelope.get("error") or "Remote service error"
    if isinstance(message, list):
        return "; ".join(str(m) for m in message)
    return str(message)


def map_error_response(
    service: str,
    resource: str,
    command: str,
    payload: Any,
    envelope: dict[str, Any],
) -> RolesServiceException:
    """Translate an isError envelope into the matching domain exception."""
    status = envelope.get("statusCode", envelope.get("status"))
    try:
        status = int(status) if status is not None else None
    except (TypeError, ValueError):
        status = None
    message = _error_message(envelope)
    if status == 404:
        resource_id = ",".join(payload) if isinstance(payload, list) else str(payload)
        return ResourceNotFoundException(resource, resource_id, message=message)
    return RemoteValidationException(service, command, message, status_code=status)


class MessagePatternClient:
    """HTTP transport for message-pattern RPC to one peer service."""

    service = "remote"
    resource = "resource"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._http = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(base_url=base_url, timeout=timeout)
        )
        self._owns_http = http_client is None

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it."""
        if self._owns_http:
            await self._http.aclose()

    def _call_failed(
        self, command: str, reason: str, status: int | None = None
    ) -> RemoteValidationException:
        return RemoteValidationException(
            self.service,
            command,
            f"{self.service} service call failed: {reason}",
            status_code=status,
            error_code="REMOTE_CALL_FAILED",
        )

    async def send(self, command: str, payload: Any) -> Any:
        """Send one command and return the envelope's data.

        Raises:
            ResourceNotFoundException: If the peer reports 404.
            RemoteValidationException: On any other error envelope, non-2xx
                response without an envelope, timeout or connection failure.
        """
        body = {"pattern": {"cmd": command}, "data": payload}
        try:
            resp = await self._http.post(RPC_PATH, json=body)
        except httpx.HTTPError as exc:
            logger.error(
                "RPC %s to %s service failed (payload=%r): %s",
                command, self.service, payload, exc,
            )
            raise self._call_failed(command, str(exc) or type(exc).__name__) from exc

        try:
            envelope = resp.json()
        except ValueError:
            envelope = None

        if isinstance(envelope, dict) and envelope.get("isError"):
            error = map_error_response(
                self.service, self.resource, command, payload, envelope
            )
            logger.error(
                "Error occurred in %s message pattern of %s service (payload=%r): %s",
                command, self.service, payload, error.message,
            )
            raise error

        if not resp.is_success or not isinstance(envelope, dict):
            reason = f"HTTP {resp.status_code}" if not resp.is_success else "invalid response body"
            logger.error(
                "RPC %s to %s service returned %s (payload=%r)",
                command, self.service, reason, payload,
            )
            raise self._call_failed(
                command, reason, resp.status_code if not resp.is_success else None
            )

        return envelope.get("data")
