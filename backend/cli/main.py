"""
Live Stream Finder entrypoint.
Lists in-progress MLB games, reads a selection from stdin, and prints the
embed URLs of the selected game's streams.
"""
from __future__ import annotations

import asyncio
import sys
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

# Ensure backend root is on path when run as python backend/cli/main.py
_backend = Path(__file__).resolve().parent.parent
if str(_backend) not in sys.path:
    sys.path.insert(0, str(_backend))

import httpx

from shared.config import Settings, get_settings
from shared.models.domain import Game
from shared.utils.errors import MalformedPayloadError
from shared.utils.logging import get_logger, setup_logging

from ingest.providers.mlb_statsapi import MLBScheduleProvider
from ingest.providers.streamed import StreamedProvider
from ingest.service import StreamLookupService

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_INTERRUPTED = 130


class FlowState(str, Enum):
    AWAITING_SCHEDULE = "awaiting_schedule"
    AWAITING_SELECTION = "awaiting_selection"
    RESOLVING = "resolving"
    DONE = "done"


def parse_selection(raw: Optional[str], count: int) -> Optional[int]:
    """
    Map a 1-based menu choice to a 0-based index.

    Returns None for anything that is not a base-10 integer in [1, count].
    """
    if raw is None:
        return None
    text = raw.strip()
    if not text.isascii() or "_" in text:
        return None
    try:
        number = int(text)
    except ValueError:
        return None
    if 1 <= number <= count:
        return number - 1
    return None


def render_games(games: Sequence[Game]) -> None:
    print("\nAvailable games:")
    for i, game in enumerate(games, start=1):
        print(f"{i}. {game.title}")


def describe_error(exc: Exception) -> str:
    """One-line, user-facing summary of a fatal lookup error."""
    if isinstance(exc, httpx.HTTPStatusError):
        return f"HTTP {exc.response.status_code} from {exc.request.url}"
    text = str(exc).strip()
    return text.splitlines()[0] if text else type(exc).__name__


def read_line(prompt_fn: Callable[[], str] = input) -> Optional[str]:
    try:
        return prompt_fn()
    except EOFError:
        return None


async def run_flow(
    service: StreamLookupService,
    prompt_fn: Callable[[], str] = input,
) -> int:
    """Drive the selection state machine; returns the process exit code."""
    state = FlowState.AWAITING_SCHEDULE
    games: list[Game] = []
    selected: Optional[Game] = None

    while state is not FlowState.DONE:
        logger.debug("flow_state", state=state.value)

        if state is FlowState.AWAITING_SCHEDULE:
            games = await service.load_games()
            state = FlowState.AWAITING_SELECTION

        elif state is FlowState.AWAITING_SELECTION:
            render_games(games)
            print("\nSelect a game number:")
            index = parse_selection(read_line(prompt_fn), len(games))
            if index is None:
                print("Invalid selection")
                logger.info("invalid_selection", games=len(games))
                return EXIT_OK
            selected = games[index]
            state = FlowState.RESOLVING

        elif state is FlowState.RESOLVING:
            assert selected is not None
            print(f"\nSelected game: {selected.title}")
            print("")
            sources = await service.resolve_sources(selected)
            print("")
            print("Streams: ")
            print("")
            async for stream in service.iter_streams(sources):
                print(stream.embed_url)
            state = FlowState.DONE

    return EXIT_OK


async def main(
    settings: Settings | None = None,
    prompt_fn: Callable[[], str] = input,
    schedule_transport: httpx.AsyncBaseTransport | None = None,
    streams_transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    settings = settings or get_settings()
    schedule = MLBScheduleProvider(settings, transport=schedule_transport)
    streamed = StreamedProvider(settings, transport=streams_transport)

    try:
        async with schedule, streamed:
            service = StreamLookupService(schedule, streamed, settings)
            return await run_flow(service, prompt_fn)
    except (httpx.HTTPError, MalformedPayloadError) as exc:
        logger.error("lookup_failed", error=str(exc), error_type=type(exc).__name__)
        print(f"Error: {describe_error(exc)}")
        return EXIT_ERROR


def run() -> None:
    """Console script entry point."""
    setup_logging("cli")
    try:
        code = asyncio.run(main())
    except KeyboardInterrupt:
        code = EXIT_INTERRUPTED
    sys.exit(code)


if __name__ == "__main__":
    run()
