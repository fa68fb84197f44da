"""FastAPI application entry point.

Wiring only: lifespan, exception handlers, middleware, routers.
See roles_service.core.lifespan and roles_service.core.exception_handlers.

Settings are loaded inside create_app() so that tests can set env (and
clear the get_settings cache) before calling create_app().
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roles_service.api import rpc
from roles_service.api.v1 import build_api_router
from roles_service.core.config import get_settings
from roles_service.core.exception_handlers import register_exception_handlers
from roles_service.core.lifespan import create_lifespan
from roles_service.middleware import CallerContextMiddleware, RequestIDMiddleware


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )

    register_exception_handlers(app)

    # Last added = outermost: request ID → CORS → caller context.
    app.add_middleware(
        CallerContextMiddleware,
        tenant_header=settings.tenant_header_name,
        user_header=settings.user_header_name,
        timezone_header=settings.timezone_header_name,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.allowed_origins.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    app.include_router(
        build_api_router(enable_role_deletion=settings.enable_role_deletion),
        prefix="/api/v1",
    )
    app.include_router(rpc.router)

    return app


app = create_app()
