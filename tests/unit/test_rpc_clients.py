"""Peer RPC clients over httpx.MockTransport."""

import json

import httpx
import pytest

from roles_service.domain.exceptions import (
    RemoteValidationException,
    ResourceNotFoundException,
)
from roles_service.infrastructure.rpc import PermissionsClient, UsersClient


def _transport(reply, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return reply(request) if callable(reply) else reply

    return httpx.MockTransport(handler)


def _permissions(reply, seen: list | None = None) -> PermissionsClient:
    http = httpx.AsyncClient(transport=_transport(reply, seen), base_url="http://permissions")
    return PermissionsClient("http://permissions", http_client=http)


def _users(reply) -> UsersClient:
    http = httpx.AsyncClient(transport=_transport(reply), base_url="http://users")
    return UsersClient("http://users", http_client=http)


@pytest.mark.asyncio
async def test_send_posts_message_pattern_envelope() -> None:
    seen: list[httpx.Request] = []
    client = _permissions(
        httpx.Response(200, json={"isError": False, "data": [{"id": "p1"}]}), seen
    )
    assert await client.get_permission(["p1"]) == [{"id": "p1"}]
    (request,) = seen
    assert request.method == "POST"
    assert request.url.path == "/rpc"
    assert json.loads(request.content) == {"pattern": {"cmd": "get_permission"}, "data": ["p1"]}


@pytest.mark.asyncio
async def test_get_permission_without_data_is_empty() -> None:
    client = _permissions(httpx.Response(200, json={"isError": False, "data": None}))
    assert await client.get_permission(["p1"]) == []


@pytest.mark.asyncio
async def test_get_permission_non_list_data_is_remote_call_failure() -> None:
    client = _permissions(
        httpx.Response(200, json={"isError": False, "data": {"p1": {"name": "read"}}})
    )
    with pytest.raises(RemoteValidationException) as exc_info:
        await client.get_permission(["p1"])
    assert exc_info.value.error_code == "REMOTE_CALL_FAILED"
    assert exc_info.value.details["command"] == "get_permission"


@pytest.mark.asyncio
@pytest.mark.parametrize(("data", "expected"), [(True, True), (False, False), (None, True)])
async def test_validate_ids_verdict(data, expected) -> None:
    client = _permissions(httpx.Response(200, json={"isError": False, "data": data}))
    assert await client.validate_ids(["p1"]) is expected


@pytest.mark.asyncio
async def test_error_envelope_404_is_not_found() -> None:
    client = _permissions(
        httpx.Response(
            200, json={"isError": True, "statusCode": 404, "message": "Permission not found"}
        )
    )
    with pytest.raises(ResourceNotFoundException) as exc_info:
        await client.get_permission(["p1", "p2"])
    assert exc_info.value.message == "Permission not found"
    assert exc_info.value.details == {"resource_type": "permission", "resource_id": "p1,p2"}


@pytest.mark.asyncio
async def test_error_envelope_is_remote_validation_failure() -> None:
    client = _permissions(
        httpx.Response(
            400,
            json={"isError": True, "statusCode": 400, "message": ["id must be a string", "bad"]},
        )
    )
    with pytest.raises(RemoteValidationException) as exc_info:
        await client.validate_ids(["p1"])
    exc = exc_info.value
    assert exc.error_code == "REMOTE_VALIDATION_FAILED"
    assert exc.status_code == 400
    assert exc.message == "id must be a string; bad"
    assert exc.details["command"] == "validate_ids"


@pytest.mark.asyncio
async def test_connection_failure_is_remote_call_failure() -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _users(refuse)
    with pytest.raises(RemoteValidationException) as exc_info:
        await client.is_role_assigned_user("r1")
    assert exc_info.value.error_code == "REMOTE_CALL_FAILED"
    assert exc_info.value.details["service"] == "users"


@pytest.mark.asyncio
async def test_non_2xx_without_envelope_is_remote_call_failure() -> None:
    client = _users(httpx.Response(503, text="unavailable"))
    with pytest.raises(RemoteValidationException) as exc_info:
        await client.is_role_assigned_user("r1")
    assert exc_info.value.error_code == "REMOTE_CALL_FAILED"
    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_undecodable_body_is_remote_call_failure() -> None:
    client = _users(httpx.Response(200, text="not json"))
    with pytest.raises(RemoteValidationException) as exc_info:
        await client.is_role_assigned_user("r1")
    assert exc_info.value.error_code == "REMOTE_CALL_FAILED"
    assert exc_info.value.status_code is None


@pytest.mark.asyncio
async def test_is_role_assigned_user() -> None:
    client = _users(httpx.Response(200, json={"isError": False, "data": True}))
    assert await client.is_role_assigned_user("r1") is True


@pytest.mark.asyncio
async def test_aclose_leaves_injected_client_open() -> None:
    http = httpx.AsyncClient(transport=_transport(httpx.Response(200, json={})))
    client = UsersClient("http://users", http_client=http)
    await client.aclose()
    assert not http.is_closed
    await http.aclose()
