"""Shared fixtures: default settings, payload builders and fake upstream APIs."""
from __future__ import annotations

import json
from typing import Any, Optional

import httpx
import pytest

from shared.config import Settings
from shared.utils.logging import setup_logging

SCHEDULE_PATH = "/api/v1/schedule"
MATCHES_PATH = "/api/matches/baseball"


@pytest.fixture(scope="session", autouse=True)
def _configure_logging() -> None:
    """Route structlog through stdlib on stderr so stdout carries only program output."""
    setup_logging("test")


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


def make_game(
    away_abbr: str = "NYY",
    away_name: str = "New York Yankees",
    away_score: Optional[int] = 3,
    home_abbr: str = "BOS",
    home_name: str = "Boston Red Sox",
    home_score: Optional[int] = 2,
    code: Optional[str] = "L",
    inning: Optional[str] = "7th",
    half: Optional[str] = "Bottom",
    with_linescore: bool = True,
    game_pk: int = 745001,
) -> dict[str, Any]:
    """One `dates[].games[]` entry shaped like the MLB Stats API."""
    away: dict[str, Any] = {"team": {"abbreviation": away_abbr, "name": away_name}}
    home: dict[str, Any] = {"team": {"abbreviation": home_abbr, "name": home_name}}
    if away_score is not None:
        away["score"] = away_score
    if home_score is not None:
        home["score"] = home_score

    game: dict[str, Any] = {"gamePk": game_pk, "teams": {"away": away, "home": home}}
    if code is not None:
        game["status"] = {"abstractGameCode": code}
    if with_linescore:
        linescore: dict[str, Any] = {}
        if inning is not None:
            linescore["currentInningOrdinal"] = inning
        if half is not None:
            linescore["inningHalf"] = half
        game["linescore"] = linescore
    return game


def make_schedule(*dates: list[dict[str, Any]]) -> dict[str, Any]:
    return {"dates": [{"games": games} for games in dates]}


def json_response(payload: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode())


class FakeUpstream:
    """
    Routes requests by URL path to canned responses and records every request.

    Values may be a payload (served as JSON) or an ``httpx.Response``.
    Schedule responses may be keyed by date via ``schedules``; other dates get
    ``default_schedule`` (an empty schedule unless given).
    """

    def __init__(
        self,
        schedules: Optional[dict[str, Any]] = None,
        routes: Optional[dict[str, Any]] = None,
        default_schedule: Optional[Any] = None,
    ) -> None:
        self.schedules = schedules or {}
        self.default_schedule = default_schedule if default_schedule is not None else make_schedule()
        self.routes = routes or {}
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == SCHEDULE_PATH:
            body = self.schedules.get(request.url.params.get("date", ""), self.default_schedule)
        elif path in self.routes:
            body = self.routes[path]
        else:
            return httpx.Response(404, content=b"not found")
        if isinstance(body, httpx.Response):
            return body
        return json_response(body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def schedule_dates(self) -> list[Optional[str]]:
        return [r.url.params.get("date") for r in self.requests if r.url.path == SCHEDULE_PATH]
