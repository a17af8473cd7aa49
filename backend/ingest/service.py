"""
Stream lookup service.
Ties the schedule and streamed providers together: loads today's games with a
one-day fallback, resolves sources for a game, and yields its streams in order.
"""
from __future__ import annotations

import asyncio
from datetime import date, datetime, timedelta
from typing import AsyncIterator, Optional, Sequence

from shared.config import Settings, get_settings
from shared.models.domain import Game, SourceDescriptor, StreamRecord
from shared.utils.logging import get_logger

from ingest.providers.mlb_statsapi import DATE_FORMAT, MLBScheduleProvider
from ingest.providers.streamed import StreamedProvider

logger = get_logger(__name__)


class StreamLookupService:
    """
    Sequential orchestration of the three lookup stages.

    The providers must already be started (``async with``) by the caller.
    """

    def __init__(
        self,
        schedule: MLBScheduleProvider,
        streamed: StreamedProvider,
        settings: Settings | None = None,
    ) -> None:
        self._schedule = schedule
        self._streamed = streamed
        self._settings = settings or get_settings()

    async def load_games(self, today: Optional[date] = None) -> list[Game]:
        """
        Today's in-progress games, or yesterday's when today has none.

        Only one fallback request is ever made; an empty list is a valid result.
        """
        today = today or datetime.now().date()
        games = await self._schedule.fetch_schedule(today.strftime(DATE_FORMAT))
        if games:
            return games

        yesterday = (today - timedelta(days=1)).strftime(DATE_FORMAT)
        logger.info("schedule_fallback_yesterday", date=yesterday)
        return await self._schedule.fetch_schedule(yesterday)

    async def resolve_sources(self, game: Game) -> list[SourceDescriptor]:
        logger.info("game_selected", title=game.title, key=game.correlation_key, game_pk=game.game_pk)
        return await self._streamed.find_sources(game.correlation_key)

    async def iter_streams(self, sources: Sequence[SourceDescriptor]) -> AsyncIterator[StreamRecord]:
        """
        Yield stream records in source-list order, then per-source response order.

        Sequential by default; with ``stream_fanout`` all sources are fetched
        concurrently and results are still yielded in source order.
        """
        if self._settings.stream_fanout and len(sources) > 1:
            results = await asyncio.gather(
                *(self._fetch_one(source) for source in sources),
                return_exceptions=self._settings.isolate_source_failures,
            )
            for source, result in zip(sources, results):
                if isinstance(result, BaseException):
                    self._log_source_failure(source, result)
                    continue
                for stream in result:
                    yield stream
            return

        for source in sources:
            try:
                streams = await self._fetch_one(source)
            except Exception as exc:
                if not self._settings.isolate_source_failures:
                    raise
                self._log_source_failure(source, exc)
                continue
            for stream in streams:
                yield stream

    async def _fetch_one(self, source: SourceDescriptor) -> list[StreamRecord]:
        return await self._streamed.fetch_streams(source)

    @staticmethod
    def _log_source_failure(source: SourceDescriptor, exc: BaseException) -> None:
        logger.warning(
            "stream_source_failed",
            source=source.source,
            source_id=source.id,
            error=str(exc) or type(exc).__name__,
        )
