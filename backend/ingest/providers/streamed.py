"""
Streamed API provider connector.
Resolves a correlation key to source descriptors and sources to embed URLs.
"""
from __future__ import annotations

from urllib.parse import quote

import httpx

from shared.config import Settings, get_settings
from shared.models.domain import SourceDescriptor, StreamRecord
from shared.utils.http_client import ProviderHTTPClient
from shared.utils.logging import get_logger

from ingest.normalization.normalizer import STREAMS_PROVIDER, find_match, parse_streams
from ingest.providers.base import BaseProvider

logger = get_logger(__name__)


def stream_path(source: SourceDescriptor) -> str:
    """``/stream/{source}/{id}`` with both tokens path-escaped."""
    return f"/stream/{quote(source.source, safe='')}/{quote(source.id, safe='')}"


class StreamedProvider(BaseProvider):
    """Matches + stream endpoints of the streamed API."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        http_client = ProviderHTTPClient(
            provider_name=STREAMS_PROVIDER,
            base_url=self._settings.streams_base_url,
            timeout_s=self._settings.request_timeout_s,
            transport=transport,
        )
        super().__init__(STREAMS_PROVIDER, http_client)

    @property
    def matches_path(self) -> str:
        return f"/matches/{self._settings.matches_category}"

    async def find_sources(self, key: str) -> list[SourceDescriptor]:
        """
        Return the sources of the first match titled exactly `key`.

        A missing match is not an error: the result is an empty list.
        """
        print(f"Getting sources for {key}...")
        logger.info("source_lookup_started", key=key, category=self._settings.matches_category)

        payload = await self._http.get_json(self.matches_path)
        match = find_match(payload, key)
        if match is None:
            logger.info("sources_not_found", key=key)
            return []

        logger.info("sources_found", key=key, sources=len(match.sources))
        return list(match.sources)

    async def fetch_streams(self, source: SourceDescriptor) -> list[StreamRecord]:
        """Fetch and parse the stream list for one source descriptor."""
        payload = await self._http.get_json(stream_path(source))
        streams = parse_streams(payload)
        logger.debug(
            "streams_fetched",
            source=source.source,
            source_id=source.id,
            streams=len(streams),
        )
        return streams
