"""Telegram webhook routes."""

from typing import Any

from fastapi import APIRouter, Body, Header, HTTPException
from pydantic import BaseModel

from ...app import Application
from ...logging_config import get_logger
from ...messenger import parse_update

logger = get_logger(__name__)


class StatusResponse(BaseModel):
    """Response model for status."""

    status: str


def create_telegram_router(app: Application) -> APIRouter:
    """Create telegram webhook router."""
    router = APIRouter(prefix="/api/telegram", tags=["telegram"])

    @router.post("/webhook", response_model=StatusResponse)
    async def receive_update(
        payload: dict[str, Any] = Body(...),
        x_telegram_bot_api_secret_token: str | None = Header(None),
    ) -> dict:
        """Dispatch one Telegram update to the command router."""
        secret = app.settings.webhook_secret
        if secret and x_telegram_bot_api_secret_token != secret:
            raise HTTPException(status_code=403, detail="Invalid secret token")

        try:
            event = parse_update(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid update: {e}")

        if event is None:
            logger.debug("Ignoring unsupported update %s", payload.get("update_id"))
            return {"status": "ok"}

        await app.router.dispatch(event)
        return {"status": "ok"}

    return router
