from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from pydantic import BaseModel

from src.core.config.settings import settings
from src.core.logging import logger
from src.infrastructure.database import check_database_health
from src.utils.i18n import get_translated_message

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    env: str
    message: str
    services: Dict[str, Any]
    timestamp: datetime


async def check_database_health_async() -> Dict[str, Any]:
    """Check database connection health."""
    is_healthy = await check_database_health()
    if not is_healthy:
        logger.warning("database_health_check_degraded")
    return {"status": "healthy" if is_healthy else "unhealthy"}


@router.get("/", response_model=HealthResponse)
async def health_check(request: Request):
    """
    Health check endpoint reporting the reachability of the session store.
    """
    language = getattr(request.state, "language", settings.DEFAULT_LANGUAGE)
    status_message = get_translated_message("health_status_ok", language)

    db_health = await check_database_health_async()
    overall_status = "ok" if db_health["status"] == "healthy" else "degraded"

    return HealthResponse(
        status=overall_status,
        env=settings.APP_ENV,
        message=status_message,
        services={"database": db_health},
        timestamp=datetime.now(timezone.utc),
    )
