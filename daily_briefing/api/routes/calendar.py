from typing import Any, Awaitable, Callable, Dict, Optional

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, ConfigDict

from daily_briefing.adapters.implementations import CalendarAdaptor
from daily_briefing.api.dependencies import get_calendar_adaptor
from daily_briefing.core.exceptions import (
    APIException,
    InvalidActionError,
    OperationFailedError,
)
from daily_briefing.core.logging import get_logger

# Initialize router and logger
calendar_router = APIRouter()
logger = get_logger(__name__)


class CalendarParams(BaseModel):
    model_config = ConfigDict(extra="allow")

    timeMin: Optional[str] = None
    timeMax: Optional[str] = None
    maxResults: Optional[int] = None
    eventId: Optional[str] = None


class CalendarRequest(BaseModel):
    """Body of a calendar request; ``action`` selects the operation."""
    model_config = ConfigDict(extra="allow")

    action: Optional[str] = None
    params: Optional[CalendarParams] = None


async def _list_events(adaptor: CalendarAdaptor, params: CalendarParams) -> Dict[str, Any]:
    events = await adaptor.list_events(
        time_min=params.timeMin,
        time_max=params.timeMax,
        max_results=params.maxResults,
    )
    return {"success": True, "events": events}


async def _get_event(adaptor: CalendarAdaptor, params: CalendarParams) -> Dict[str, Any]:
    event = await adaptor.get_event(params.eventId)
    return {"success": True, "event": event}


async def _find_free_time(adaptor: CalendarAdaptor, params: CalendarParams) -> Dict[str, Any]:
    freebusy = await adaptor.find_free_time(time_min=params.timeMin, time_max=params.timeMax)
    return {"success": True, "freebusy": freebusy}


CALENDAR_ACTIONS: Dict[str, Callable[[CalendarAdaptor, CalendarParams], Awaitable[Dict[str, Any]]]] = {
    "listEvents": _list_events,
    "getEvent": _get_event,
    "findFreeTime": _find_free_time,
}


@calendar_router.options("", include_in_schema=False)
async def calendar_preflight() -> Response:
    """CORS preflight without the browser headers the middleware answers."""
    return Response(status_code=status.HTTP_200_OK)


@calendar_router.post(
    "",
    status_code=status.HTTP_200_OK,
    summary="Calendar data",
    description="Events, a single event or busy intervals from the primary calendar."
)
async def handle_calendar(
    body: CalendarRequest,
    adaptor: CalendarAdaptor = Depends(get_calendar_adaptor),
) -> Dict[str, Any]:
    """
    Dispatch a calendar request by its ``action``.

    Client errors propagate with their own status. Any other failure is
    logged and reported as ``{"error": "Calendar operation failed", "details": ...}``.
    """
    handler = CALENDAR_ACTIONS.get(body.action)
    if handler is None:
        logger.info(f"Invalid calendar action: {body.action}")
        raise InvalidActionError(body.action)

    try:
        return await handler(adaptor, body.params or CalendarParams())
    except APIException:
        raise
    except Exception as e:
        logger.error(f"Calendar API error: {str(e)}", extra={"action": body.action}, exc_info=True)
        raise OperationFailedError("Calendar", details=str(e)) from e
