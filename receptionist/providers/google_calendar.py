"""
Google Calendar provider.

API-key access to a single calendar. Service-account auth is accepted in
configuration but token exchange is left to a dedicated client, so only
read operations are available here.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any
from urllib.parse import quote

import httpx

from .base import ProviderType
from .errors import ProviderAuthenticationError
from .rest import HttpProvider

logger = logging.getLogger(__name__)

GOOGLE_CALENDAR_API_URL = "https://www.googleapis.com/calendar/v3"


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.isoformat()


class GoogleCalendarProvider(HttpProvider):
    provider_type = ProviderType.CALENDAR

    def __init__(
        self,
        calendar_id: str,
        api_key: str,
        *,
        base_url: str = GOOGLE_CALENDAR_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout, transport=transport)
        self.calendar_id = calendar_id
        self._api_key = api_key
        self._base_url = base_url

    @property
    def name(self) -> str:
        return "google_calendar"

    @property
    def base_url(self) -> str:
        return self._base_url

    def _calendar_path(self, calendar_id: str | None = None) -> str:
        return f"/calendars/{quote(calendar_id or self.calendar_id, safe='')}"

    async def health_check(self) -> bool:
        try:
            await self._request("GET", self._calendar_path(), params={"key": self._api_key})
        except ProviderAuthenticationError:
            return False
        return True

    async def list_events(
        self,
        time_min: datetime,
        time_max: datetime,
        *,
        calendar_id: str | None = None,
        max_results: int = 250,
    ) -> list[dict[str, Any]]:
        """
        List events overlapping [time_min, time_max), ordered by start.

        Naive datetimes are taken as UTC. Recurring events are expanded
        into single instances.

        Returns:
            Google Calendar event resources (id, summary, start, end, ...)
        """
        response = await self._request(
            "GET",
            f"{self._calendar_path(calendar_id)}/events",
            params={
                "key": self._api_key,
                "timeMin": _rfc3339(time_min),
                "timeMax": _rfc3339(time_max),
                "singleEvents": "true",
                "orderBy": "startTime",
                "maxResults": max_results,
            },
        )
        events = response.json().get("items", [])
        logger.debug(f"[google_calendar] Listed {len(events)} events")
        return events
