"""Health check endpoint. No dependencies; used for liveness probes."""

from fastapi import APIRouter, Request

from roles_service.schemas.health import HealthResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check(request: Request) -> HealthResponse:
    """Return ok, and whether the document store is configured."""
    store = getattr(request.app.state, "firestore_client", None)
    return HealthResponse(store_configured=store is not None)
