"""Peer-service RPC clients (Permissions and Users services)."""

from roles_service.infrastructure.rpc.client import MessagePatternClient, map_error_response
from roles_service.infrastructure.rpc.permissions_client import PermissionsClient
from roles_service.infrastructure.rpc.users_client import UsersClient

__all__ = [
    "MessagePatternClient",
    "PermissionsClient",
    "UsersClient",
    "map_error_response",
]
