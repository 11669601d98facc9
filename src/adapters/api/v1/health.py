"""Health check endpoint."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    version: str
    services: Dict[str, Any]
    timestamp: datetime


@router.get("", response_model=HealthResponse)
async def health_check(request: Request):
    """Report the database connectivity and the number of live sessions."""
    state = request.app.state
    config = state.settings
    db_healthy = await state.database.check_health()

    return HealthResponse(
        status="ok" if db_healthy else "degraded",
        env=config.APP_ENV,
        version=config.VERSION,
        services={
            "database": {"status": "healthy" if db_healthy else "unhealthy"},
            "session_store": {"status": "healthy", "sessions": len(state.session_store)},
        },
        timestamp=datetime.now(timezone.utc),
    )
