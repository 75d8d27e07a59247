from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict

from daily_briefing.api.dependencies import get_briefing_service
from daily_briefing.core.exceptions import (
    APIException,
    BadRequestError,
    InvalidActionError,
    OperationFailedError,
)
from daily_briefing.core.logging import get_logger
from daily_briefing.services import BriefingService

# Initialize router and logger
briefing_router = APIRouter()
logger = get_logger(__name__)


class BriefingRequest(BaseModel):
    """Body of a briefing request; ``action`` selects the operation."""
    model_config = ConfigDict(extra="allow")

    action: Optional[str] = None
    apiKey: Optional[str] = None
    category: Optional[str] = None


async def _get_weather(service: BriefingService, body: BriefingRequest) -> Dict[str, Any]:
    weather, cached = await service.get_weather()
    return {"success": True, "weather": weather, "cached": cached}


async def _get_stocks(service: BriefingService, body: BriefingRequest) -> Dict[str, Any]:
    stocks, cached = await service.get_stocks()
    return {"success": True, "stocks": stocks, "cached": cached}


async def _get_news(service: BriefingService, body: BriefingRequest) -> Dict[str, Any]:
    if not body.apiKey:
        raise BadRequestError("Anthropic API key required")

    stories, cached = await service.get_news(body.apiKey, body.category)
    return {"success": True, "stories": stories, "cached": cached}


BRIEFING_ACTIONS: Dict[str, Callable[[BriefingService, BriefingRequest], Awaitable[Dict[str, Any]]]] = {
    "getWeather": _get_weather,
    "getStocks": _get_stocks,
    "getNews": _get_news,
}


@briefing_router.options("", include_in_schema=False)
async def briefing_preflight() -> Response:
    """CORS preflight without the browser headers the middleware answers."""
    return Response(status_code=status.HTTP_200_OK)


@briefing_router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Briefing data",
    description="Weather, index quotes or news stories, served from cache when fresh."
)
async def handle_briefing(
    body: BriefingRequest,
    service: BriefingService = Depends(get_briefing_service),
) -> Dict[str, Any]:
    """
    Dispatch a briefing request by its ``action``.

    Client errors propagate with their own status. Any other failure is
    logged and reported as ``{"error": "Briefing operation failed", "details": ...}``.
    """
    handler = BRIEFING_ACTIONS.get(body.action)
    if handler is None:
        logger.info(f"Invalid briefing action: {body.action}")
        raise InvalidActionError(body.action)

    try:
        return await handler(service, body)
    except APIException:
        raise
    except Exception as e:
        logger.error(f"Briefing API error: {str(e)}", extra={"action": body.action}, exc_info=True)
        raise OperationFailedError("Briefing", details=str(e)) from e
