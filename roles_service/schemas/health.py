"""Health check API schemas."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for GET /health (liveness)."""

    status: str = Field(default="ok", description="Service status")
    store_configured: bool = Field(
        default=False, description="Whether the Firestore client is initialized"
    )
