"""Pytest configuration and fixtures for the roles service.

Store-backed fixtures run against the in-memory Firestore REST fake in
fakes.py; peer services are AsyncMock doubles.
"""

from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from fakes import FakeFirestore
from roles_service.api.v1.dependencies import get_role_service
from roles_service.application.services.role_service import RoleService
from roles_service.core.config import get_settings
from roles_service.infrastructure.firebase.repositories import FirestoreRoleRepository
from roles_service.main import create_app


def permission_objects(ids: list[str]) -> list[dict]:
    return [{"id": pid, "name": f"perm-{pid}"} for pid in ids]


@pytest.fixture
def fake_firestore() -> FakeFirestore:
    return FakeFirestore()


@pytest.fixture
async def firestore_client(fake_firestore: FakeFirestore):
    """FirestoreRESTClient backed by the in-memory fake."""
    client, http = fake_firestore.client()
    yield client
    await http.aclose()


@pytest.fixture
def role_repo(firestore_client) -> FirestoreRoleRepository:
    return FirestoreRoleRepository(firestore_client)


@pytest.fixture
def permissions_client() -> AsyncMock:
    """Permissions service double: every id is valid and resolves to an object."""
    client = AsyncMock()
    client.validate_ids = AsyncMock(return_value=True)
    client.get_permission = AsyncMock(side_effect=permission_objects)
    return client


@pytest.fixture
def users_client() -> AsyncMock:
    """Users service double: no role is assigned to a user."""
    client = AsyncMock()
    client.is_role_assigned_user = AsyncMock(return_value=False)
    return client


@pytest.fixture
def role_service(role_repo, permissions_client, users_client) -> RoleService:
    return RoleService(role_repo, permissions_client, users_client)


def _build_app(role_service: RoleService | None):
    app = create_app()
    if role_service is not None:
        app.dependency_overrides[get_role_service] = lambda: role_service
    return app


@pytest.fixture
async def client(role_service: RoleService) -> AsyncClient:
    """Async HTTP client against the app (ASGI), with the role service overridden."""
    transport = ASGITransport(app=_build_app(role_service))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def client_with_deletion(monkeypatch, role_service: RoleService) -> AsyncClient:
    """Like client, but with ENABLE_ROLE_DELETION=true."""
    monkeypatch.setenv("ENABLE_ROLE_DELETION", "true")
    get_settings.cache_clear()
    try:
        app = _build_app(role_service)
    finally:
        get_settings.cache_clear()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def unconfigured_client() -> AsyncClient:
    """Client against an app whose lifespan never ran (no Firestore client)."""
    transport = ASGITransport(app=_build_app(None))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
