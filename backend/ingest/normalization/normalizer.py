"""
Normalization layer for provider payloads.
Turns raw MLB Stats API and streamed API JSON into canonical domain models.
All functions here are pure: no I/O.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from shared.models.domain import Game, MatchRecord, SourceDescriptor, StreamRecord
from shared.models.enums import AbstractGameCode, InningHalf
from shared.utils.errors import MalformedPayloadError

SCHEDULE_PROVIDER = "mlb_statsapi"
STREAMS_PROVIDER = "streamed"

DEFAULT_INNING = "N/A"
DEFAULT_EXCLUDED_CODES: frozenset[str] = frozenset(
    {AbstractGameCode.FINAL.value, AbstractGameCode.PREVIEW.value}
)


def _safe_int(val: Any) -> int | None:
    if val is None or isinstance(val, bool):
        return None
    try:
        return int(val)
    except (ValueError, TypeError):
        return None


def _optional_str(val: Any) -> str | None:
    return val if isinstance(val, str) else None


def _require_str(obj: Any, *path: str, provider: str = SCHEDULE_PROVIDER) -> str:
    """Walk `path` through nested dicts and return the string found there."""
    node = obj
    for key in path:
        if not isinstance(node, dict) or key not in node:
            raise MalformedPayloadError(provider, "missing required field", ".".join(path))
        node = node[key]
    if not isinstance(node, str):
        raise MalformedPayloadError(provider, "expected a string", ".".join(path))
    return node


def _require_list(obj: Any, key: str, provider: str) -> list[Any]:
    if not isinstance(obj, dict):
        raise MalformedPayloadError(provider, "expected an object", key)
    value = obj.get(key)
    if not isinstance(value, list):
        raise MalformedPayloadError(provider, "expected an array", key)
    return value


# ── Schedule ────────────────────────────────────────────────────────────

def format_title(
    away_abbr: str,
    away_score: int,
    home_abbr: str,
    home_score: int,
    inning_half: InningHalf | str,
    inning: str,
) -> str:
    """e.g. ``NYY (3) vs BOS (2) | Bottom of 7th``."""
    half = inning_half if isinstance(inning_half, InningHalf) else InningHalf.parse(inning_half)
    return f"{away_abbr} ({away_score}) vs {home_abbr} ({home_score}) | {half.label} {inning}"


def correlation_key(away_full_name: str, home_full_name: str) -> str:
    """Key matched verbatim against a streamed match title."""
    return f"{away_full_name} vs {home_full_name}"


def is_excluded(game: dict[str, Any], excluded_codes: Iterable[str] = DEFAULT_EXCLUDED_CODES) -> bool:
    """True when the game's abstractGameCode marks it finished or not yet started."""
    status = game.get("status")
    code = status.get("abstractGameCode") if isinstance(status, dict) else None
    return isinstance(code, str) and code in set(excluded_codes)


def inning_state(game: dict[str, Any]) -> tuple[InningHalf, str]:
    """Current (half, ordinal) with defaults when the linescore is absent."""
    linescore = game.get("linescore")
    if not isinstance(linescore, dict):
        linescore = {}
    inning = linescore.get("currentInningOrdinal")
    if not isinstance(inning, str):
        inning = DEFAULT_INNING
    return InningHalf.parse(linescore.get("inningHalf")), inning


def parse_schedule_game(game: dict[str, Any]) -> Game:
    """Build a Game from one `dates[].games[]` entry."""
    away_abbr = _require_str(game, "teams", "away", "team", "abbreviation")
    home_abbr = _require_str(game, "teams", "home", "team", "abbreviation")
    away_name = _require_str(game, "teams", "away", "team", "name")
    home_name = _require_str(game, "teams", "home", "team", "name")

    teams = game["teams"]
    away_score = _safe_int(teams["away"].get("score")) or 0
    home_score = _safe_int(teams["home"].get("score")) or 0
    half, inning = inning_state(game)

    return Game(
        title=format_title(away_abbr, away_score, home_abbr, home_score, half, inning),
        correlation_key=correlation_key(away_name, home_name),
        game_pk=_safe_int(game.get("gamePk")),
    )


def parse_schedule(
    payload: Any,
    excluded_codes: Iterable[str] = DEFAULT_EXCLUDED_CODES,
) -> list[Game]:
    """
    Flatten `dates[].games[]` into in-progress Games, preserving API order.

    Raises:
        MalformedPayloadError: If the structure or any kept game's required
            team fields are missing. No partial list is returned.
    """
    excluded = frozenset(excluded_codes)
    games: list[Game] = []
    for date in _require_list(payload, "dates", SCHEDULE_PROVIDER):
        for raw in _require_list(date, "games", SCHEDULE_PROVIDER):
            if not isinstance(raw, dict):
                raise MalformedPayloadError(SCHEDULE_PROVIDER, "expected an object", "dates[].games[]")
            if is_excluded(raw, excluded):
                continue
            games.append(parse_schedule_game(raw))
    return games


# ── Matches / sources ───────────────────────────────────────────────────

def _parse_source(raw: Any) -> SourceDescriptor:
    source_id = _require_str(raw, "id", provider=STREAMS_PROVIDER)
    source = _require_str(raw, "source", provider=STREAMS_PROVIDER)
    return SourceDescriptor(id=source_id, source=source)


def find_match(payload: Any, key: str) -> Optional[MatchRecord]:
    """
    Scan the matches array for the first title equal to `key`.

    Entries after the first hit are not inspected. Comparison is exact and
    case-sensitive.
    """
    if not isinstance(payload, list):
        raise MalformedPayloadError(STREAMS_PROVIDER, "expected an array of matches")
    for raw in payload:
        if _require_str(raw, "title", provider=STREAMS_PROVIDER) != key:
            continue
        sources = raw.get("sources")
        if not isinstance(sources, list):
            raise MalformedPayloadError(STREAMS_PROVIDER, "expected an array", "sources")
        return MatchRecord(
            title=key,
            sources=[_parse_source(s) for s in sources],
            id=_optional_str(raw.get("id")),
            category=_optional_str(raw.get("category")),
            date=_safe_int(raw.get("date")),
        )
    return None


def parse_streams(payload: Any) -> list[StreamRecord]:
    """Parse the stream endpoint's array; every entry must carry an embedUrl."""
    if not isinstance(payload, list):
        raise MalformedPayloadError(STREAMS_PROVIDER, "expected an array of streams")
    streams: list[StreamRecord] = []
    for raw in payload:
        hd = raw.get("hd") if isinstance(raw, dict) else None
        streams.append(
            StreamRecord(
                embed_url=_require_str(raw, "embedUrl", provider=STREAMS_PROVIDER),
                stream_no=_safe_int(raw.get("streamNo")),
                language=_optional_str(raw.get("language")),
                hd=hd if isinstance(hd, bool) else None,
                source=_optional_str(raw.get("source")),
            )
        )
    return streams
