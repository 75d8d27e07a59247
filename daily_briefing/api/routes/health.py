from typing import Dict, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from daily_briefing import __version__
from daily_briefing.api.dependencies import get_cache
from daily_briefing.core.logging import get_logger
from daily_briefing.infrastructure.cache import BriefingCache

# Initialize router and logger
health_router = APIRouter()
logger = get_logger(__name__)


class CacheEntryStatus(BaseModel):
    """Freshness of a single cache entry."""
    populated: bool
    valid: bool
    age_seconds: Optional[float] = None


class HealthStatus(BaseModel):
    """Health status response model."""
    status: str
    version: str = __version__
    service: str = "Daily Briefing Service"
    cache: Dict[str, CacheEntryStatus]


@health_router.get(
    "",
    response_model=HealthStatus,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    description="Returns service health and the freshness of each cache entry."
)
async def get_health(cache: BriefingCache = Depends(get_cache)) -> HealthStatus:
    """
    Health check endpoint.

    Returns:
        HealthStatus: Service health with per-category cache status
    """
    logger.debug("Health check requested")
    return HealthStatus(status="ok", cache=cache.snapshot())
