"""Control API routes."""

from fastapi import APIRouter
from pydantic import BaseModel


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_control_router() -> APIRouter:
    """Create control router."""
    router = APIRouter(prefix="/api", tags=["control"])

    @router.get("/health", response_model=StatusResponse)
    async def health() -> dict:
        """Liveness probe."""
        return {"status": "ok"}

    return router
