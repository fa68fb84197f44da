"""Ports implemented by infrastructure (store adapter and peer RPC clients)."""

from roles_service.application.interfaces.repositories import IRoleRepository
from roles_service.application.interfaces.services import (
    IPermissionsClient,
    IUsersClient,
)

__all__ = ["IPermissionsClient", "IRoleRepository", "IUsersClient"]
