"""
MLB Stats API provider connector.
Fetches the day's schedule and normalizes in-progress games to Game models.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

import httpx

from shared.config import Settings, get_settings
from shared.models.domain import Game
from shared.utils.http_client import ProviderHTTPClient
from shared.utils.logging import get_logger

from ingest.normalization.normalizer import SCHEDULE_PROVIDER, parse_schedule
from ingest.providers.base import BaseProvider

logger = get_logger(__name__)

TODAY = "today"
DATE_FORMAT = "%Y-%m-%d"


def resolve_date(date_str: str, today: Optional[date] = None) -> str:
    """Map the literal "today" to the local calendar date; pass anything else through."""
    if date_str == TODAY:
        return (today or datetime.now().date()).strftime(DATE_FORMAT)
    return date_str


class MLBScheduleProvider(BaseProvider):
    """Schedule fetcher backed by ``/schedule?sportId=..&hydrate=team,linescore``."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        http_client = ProviderHTTPClient(
            provider_name=SCHEDULE_PROVIDER,
            base_url=self._settings.schedule_base_url,
            timeout_s=self._settings.request_timeout_s,
            transport=transport,
        )
        super().__init__(SCHEDULE_PROVIDER, http_client)

    @property
    def excluded_codes(self) -> Iterable[str]:
        return self._settings.excluded_game_codes

    async def fetch_schedule(self, date_str: str, today: Optional[date] = None) -> list[Game]:
        """
        Fetch one day's schedule and return its in-progress games in API order.

        Args:
            date_str: ``YYYY-MM-DD`` or ``"today"``. Not validated locally.
            today: Reference date used to resolve ``"today"``.

        Raises:
            httpx.HTTPError: On network failure or non-2xx.
            MalformedPayloadError: On a non-JSON body or missing team fields.
        """
        resolved = resolve_date(date_str, today)
        params = {
            "sportId": self._settings.schedule_sport_id,
            "hydrate": self._settings.schedule_hydrate,
            "date": resolved,
        }
        payload = await self._http.get_json("/schedule", params=params)
        games = parse_schedule(payload, self.excluded_codes)
        logger.info("schedule_fetched", date=resolved, games=len(games))
        return games
