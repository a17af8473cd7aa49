"""
Pydantic v2 domain models shared across Live Stream Finder.
These are the canonical internal representations of provider payloads.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# ── Base ────────────────────────────────────────────────────────────────
class DomainModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


# ── Schedule ────────────────────────────────────────────────────────────
class Game(DomainModel):
    """One in-progress schedule entry as presented to the user."""
    title: str
    correlation_key: str
    game_pk: Optional[int] = None


# ── Streams ─────────────────────────────────────────────────────────────
class SourceDescriptor(DomainModel):
    """Opaque (source, id) pair identifying one streaming backend for a match."""
    id: str
    source: str


class MatchRecord(DomainModel):
    """Entry of the matches endpoint; `title` is compared against Game.correlation_key."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    title: str
    sources: list[SourceDescriptor] = Field(default_factory=list)
    id: Optional[str] = None
    category: Optional[str] = None
    date: Optional[int] = None


class StreamRecord(DomainModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    embed_url: str = Field(alias="embedUrl")
    stream_no: Optional[int] = Field(default=None, alias="streamNo")
    language: Optional[str] = None
    hd: Optional[bool] = None
    source: Optional[str] = None
