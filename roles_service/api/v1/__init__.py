"""API version 1."""

from roles_service.api.v1.router import build_api_router

__all__ = ["build_api_router"]
