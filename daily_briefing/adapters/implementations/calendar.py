import asyncio
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from daily_briefing.core.exceptions import BadRequestError, ConfigurationError, UpstreamError
from daily_briefing.core.logging import get_logger

logger = get_logger(__name__)

CALENDAR_READONLY_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_rfc3339(value: datetime) -> str:
    """Format a datetime the way the Calendar API expects, e.g. ``2024-01-15T10:30:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def load_service_account_credentials(raw_credentials: Optional[str]) -> service_account.Credentials:
    """
    Build read-only calendar credentials from a service-account JSON blob.

    Only ``client_email`` and ``private_key`` are required; the token URI
    falls back to Google's default.

    Raises:
        ConfigurationError: If the blob is missing, not JSON or incomplete.
    """
    if not raw_credentials:
        raise ConfigurationError("GOOGLE_CREDENTIALS is not configured")

    try:
        info = json.loads(raw_credentials)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"GOOGLE_CREDENTIALS is not valid JSON: {e.msg}") from e

    if not isinstance(info, dict):
        raise ConfigurationError("GOOGLE_CREDENTIALS must be a JSON object")

    missing = [key for key in ("client_email", "private_key") if not info.get(key)]
    if missing:
        raise ConfigurationError(f"GOOGLE_CREDENTIALS is missing: {', '.join(missing)}")

    info.setdefault("token_uri", GOOGLE_TOKEN_URI)
    try:
        return service_account.Credentials.from_service_account_info(
            info, scopes=[CALENDAR_READONLY_SCOPE]
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid service account credentials: {str(e)}") from e


class CalendarAdaptor:
    """
    Read-only access to a Google Calendar through a service account.

    Results are not cached; every call goes to the provider. The Google
    client is blocking, so requests are executed in a worker thread.
    """

    provider_name = "google_calendar"

    def __init__(
        self,
        service_factory: Callable[[], Any],
        calendar_id: str = "primary",
        default_max_results: int = 50,
        free_time_window_days: int = 7,
        clock: Callable[[], datetime] = _utcnow
    ):
        """
        Initialize the adaptor.

        Args:
            service_factory: Returns a Calendar v3 service resource; called
                lazily on the first operation
            calendar_id: Calendar to read, the service account's primary by default
            default_max_results: Page size for ``list_events``
            free_time_window_days: Length of the default ``find_free_time`` window
            clock: Returns the current UTC time
        """
        self._service_factory = service_factory
        self._service = None
        self.calendar_id = calendar_id
        self.default_max_results = default_max_results
        self.free_time_window_days = free_time_window_days
        self._clock = clock

    @classmethod
    def from_credentials(cls, raw_credentials: Optional[str], **kwargs) -> "CalendarAdaptor":
        """Build an adaptor whose service is created from service-account JSON."""
        def service_factory():
            credentials = load_service_account_credentials(raw_credentials)
            return build("calendar", "v3", credentials=credentials, cache_discovery=False)

        return cls(service_factory, **kwargs)

    @property
    def service(self) -> Any:
        if self._service is None:
            self._service = self._service_factory()
        return self._service

    async def _execute(self, request: Any, operation: str) -> Dict[str, Any]:
        try:
            return await asyncio.to_thread(request.execute)
        except HttpError as e:
            reason = getattr(e, "reason", None) or str(e)
            logger.error(
                f"Calendar {operation} failed: {reason}",
                extra={"provider": self.provider_name, "status_code": e.resp.status}
            )
            raise UpstreamError(
                reason,
                provider=self.provider_name,
                status_code=e.resp.status,
                original_exception=e
            ) from e

    async def list_events(
        self,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None,
        max_results: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        List events ordered by start time with recurring events expanded.

        Args:
            time_min: RFC 3339 lower bound, defaults to now
            time_max: RFC 3339 upper bound, unbounded when omitted
            max_results: Maximum number of events to return

        Returns:
            Event resources as returned by the provider
        """
        params = {
            "calendarId": self.calendar_id,
            "timeMin": time_min or to_rfc3339(self._clock()),
            "maxResults": max_results or self.default_max_results,
            "singleEvents": True,
            "orderBy": "startTime",
        }
        if time_max:
            params["timeMax"] = time_max

        logger.debug("Listing calendar events", extra={"time_min": params["timeMin"], "time_max": time_max})
        response = await self._execute(self.service.events().list(**params), "listEvents")
        return response.get("items") or []

    async def get_event(self, event_id: Optional[str]) -> Dict[str, Any]:
        """
        Fetch a single event.

        Raises:
            BadRequestError: If ``event_id`` is missing.
        """
        if not event_id:
            raise BadRequestError("eventId required")

        request = self.service.events().get(calendarId=self.calendar_id, eventId=event_id)
        return await self._execute(request, "getEvent")

    async def find_free_time(
        self,
        time_min: Optional[str] = None,
        time_max: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Query busy intervals for the calendar.

        Args:
            time_min: RFC 3339 window start, defaults to now
            time_max: RFC 3339 window end, defaults to now plus the configured window

        Returns:
            The provider's free/busy entry for the calendar, e.g. ``{"busy": [...]}``
        """
        now = self._clock()
        body = {
            "timeMin": time_min or to_rfc3339(now),
            "timeMax": time_max or to_rfc3339(now + timedelta(days=self.free_time_window_days)),
            "items": [{"id": self.calendar_id}],
        }

        response = await self._execute(self.service.freebusy().query(body=body), "findFreeTime")
        calendars = response.get("calendars") or {}
        if self.calendar_id not in calendars:
            raise UpstreamError(
                "Calendar free/busy response did not include the requested calendar",
                provider=self.provider_name
            )
        return calendars[self.calendar_id]
