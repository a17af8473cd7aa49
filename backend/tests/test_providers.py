"""
Provider tests against fake upstream APIs (httpx.MockTransport).

Run: pytest backend/tests/test_providers.py -v
"""
from __future__ import annotations

from datetime import date

import httpx
import pytest

from conftest import MATCHES_PATH, SCHEDULE_PATH, FakeUpstream, make_game, make_schedule
from ingest.providers.mlb_statsapi import MLBScheduleProvider, resolve_date
from ingest.providers.streamed import StreamedProvider, stream_path
from shared.config import Settings
from shared.models.domain import SourceDescriptor
from shared.utils.errors import MalformedPayloadError

KEY = "New York Yankees vs Boston Red Sox"


# ── resolve_date ────────────────────────────────────────────────────────

def test_resolve_date_today() -> None:
    assert resolve_date("today", today=date(2026, 10, 17)) == "2026-10-17"


def test_resolve_date_passthrough() -> None:
    assert resolve_date("2026-04-01") == "2026-04-01"


# ── MLBScheduleProvider ─────────────────────────────────────────────────

@pytest.mark.asyncio
async def test_fetch_schedule_sends_query(settings: Settings) -> None:
    upstream = FakeUpstream(schedules={"2026-10-17": make_schedule([make_game()])})
    async with MLBScheduleProvider(settings, transport=upstream.transport) as provider:
        games = await provider.fetch_schedule("2026-10-17")

    assert [g.title for g in games] == ["NYY (3) vs BOS (2) | Bottom of 7th"]
    request = upstream.requests[0]
    assert request.url.host == "statsapi.mlb.com"
    assert request.url.path == SCHEDULE_PATH
    assert request.url.params["sportId"] == "1"
    assert request.url.params["hydrate"] == "team,linescore"
    assert request.url.params["date"] == "2026-10-17"


@pytest.mark.asyncio
async def test_fetch_schedule_today_literal(settings: Settings) -> None:
    upstream = FakeUpstream()
    async with MLBScheduleProvider(settings, transport=upstream.transport) as provider:
        games = await provider.fetch_schedule("today", today=date(2026, 10, 17))
    assert games == []
    assert upstream.schedule_dates() == ["2026-10-17"]


@pytest.mark.asyncio
async def test_fetch_schedule_non_2xx_raises(settings: Settings) -> None:
    upstream = FakeUpstream(schedules={"2026-10-17": httpx.Response(503)})
    async with MLBScheduleProvider(settings, transport=upstream.transport) as provider:
        with pytest.raises(httpx.HTTPStatusError):
            await provider.fetch_schedule("2026-10-17")


@pytest.mark.asyncio
async def test_fetch_schedule_invalid_json_raises(settings: Settings) -> None:
    upstream = FakeUpstream(schedules={"2026-10-17": httpx.Response(200, content=b"<html>")})
    async with MLBScheduleProvider(settings, transport=upstream.transport) as provider:
        with pytest.raises(MalformedPayloadError):
            await provider.fetch_schedule("2026-10-17")


@pytest.mark.asyncio
async def test_fetch_schedule_network_error_raises(settings: Settings) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with MLBScheduleProvider(settings, transport=httpx.MockTransport(refuse)) as provider:
        with pytest.raises(httpx.ConnectError):
            await provider.fetch_schedule("2026-10-17")


@pytest.mark.asyncio
async def test_provider_requires_start(settings: Settings) -> None:
    provider = MLBScheduleProvider(settings, transport=FakeUpstream().transport)
    with pytest.raises(RuntimeError):
        await provider.fetch_schedule("2026-10-17")


# ── StreamedProvider ────────────────────────────────────────────────────

def test_stream_path_escapes_tokens() -> None:
    assert stream_path(SourceDescriptor(id="nyy/bos 1", source="alpha")) == "/stream/alpha/nyy%2Fbos%201"


@pytest.mark.asyncio
async def test_find_sources_match(settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
    upstream = FakeUpstream(routes={
        MATCHES_PATH: [
            {"title": "Chicago Cubs vs St. Louis Cardinals", "sources": []},
            {"title": KEY, "sources": [{"id": "nyy-bos", "source": "alpha"}]},
        ],
    })
    async with StreamedProvider(settings, transport=upstream.transport) as provider:
        sources = await provider.find_sources(KEY)

    assert sources == [SourceDescriptor(id="nyy-bos", source="alpha")]
    assert upstream.requests[0].url.host == "streamed.su"
    assert capsys.readouterr().out == f"Getting sources for {KEY}...\n"


@pytest.mark.asyncio
async def test_find_sources_not_found_is_empty(settings: Settings) -> None:
    upstream = FakeUpstream(routes={MATCHES_PATH: [{"title": "Other vs Teams", "sources": []}]})
    async with StreamedProvider(settings, transport=upstream.transport) as provider:
        assert await provider.find_sources(KEY) == []


@pytest.mark.asyncio
async def test_find_sources_idempotent(settings: Settings) -> None:
    upstream = FakeUpstream(routes={
        MATCHES_PATH: [{"title": KEY, "sources": [{"id": "1", "source": "alpha"}, {"id": "2", "source": "bravo"}]}],
    })
    async with StreamedProvider(settings, transport=upstream.transport) as provider:
        first = await provider.find_sources(KEY)
        second = await provider.find_sources(KEY)
    assert first == second
    assert len(upstream.requests) == 2


@pytest.mark.asyncio
async def test_find_sources_uses_configured_category() -> None:
    settings = Settings(_env_file=None, matches_category="hockey")
    upstream = FakeUpstream(routes={"/api/matches/hockey": []})
    async with StreamedProvider(settings, transport=upstream.transport) as provider:
        assert await provider.find_sources(KEY) == []
    assert upstream.paths() == ["/api/matches/hockey"]


@pytest.mark.asyncio
async def test_find_sources_http_error_raises(settings: Settings) -> None:
    upstream = FakeUpstream(routes={MATCHES_PATH: httpx.Response(500)})
    async with StreamedProvider(settings, transport=upstream.transport) as provider:
        with pytest.raises(httpx.HTTPStatusError):
            await provider.find_sources(KEY)


@pytest.mark.asyncio
async def test_fetch_streams(settings: Settings) -> None:
    upstream = FakeUpstream(routes={
        "/api/stream/alpha/nyy-bos": [
            {"id": "nyy-bos", "streamNo": 1, "language": "English", "hd": True,
             "embedUrl": "https://embedsports.example/embed/alpha/nyy-bos/1", "source": "alpha"},
        ],
    })
    async with StreamedProvider(settings, transport=upstream.transport) as provider:
        streams = await provider.fetch_streams(SourceDescriptor(id="nyy-bos", source="alpha"))
    assert [s.embed_url for s in streams] == ["https://embedsports.example/embed/alpha/nyy-bos/1"]
    assert streams[0].stream_no == 1
