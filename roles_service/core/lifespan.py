"""Application lifespan: startup and shutdown.

Wiring of infrastructure only: logging, Firestore client, peer RPC
clients, telemetry.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from roles_service.core.config import get_settings
from roles_service.infrastructure.firebase.client import (
    close_firebase,
    get_firestore_client,
    init_firebase,
)
from roles_service.infrastructure.rpc import PermissionsClient, UsersClient
from roles_service.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: logging, Firestore, peer clients, telemetry (if enabled).
    Shutdown runs in reverse.
    """
    settings = get_settings()
    setup_logging()

    # ---- Startup ----
    init_firebase()
    app.state.firestore_client = get_firestore_client()

    app.state.permissions_client = PermissionsClient(
        settings.permissions_service_url, timeout=settings.rpc_timeout_seconds
    )
    app.state.users_client = UsersClient(
        settings.users_service_url, timeout=settings.rpc_timeout_seconds
    )
    logger.info(
        "Peer clients ready: permissions=%s users=%s",
        settings.permissions_service_url,
        settings.users_service_url,
    )

    if settings.telemetry_enabled:
        from roles_service.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(
            app, excluded_urls=settings.telemetry_excluded_urls
        )
        telemetry.instrument_logging()
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    from roles_service.shared.telemetry.telemetry import get_telemetry, set_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        set_telemetry(None)

    for name in ("users_client", "permissions_client"):
        client = getattr(app.state, name, None)
        if client is not None:
            await client.aclose()
            setattr(app.state, name, None)
    logger.info("Peer clients closed")

    await close_firebase()
    app.state.firestore_client = None
