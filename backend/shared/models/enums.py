"""Domain enumerations for Live Stream Finder."""
from __future__ import annotations

from enum import Enum


class AbstractGameCode(str, Enum):
    """MLB Stats API `status.abstractGameCode`."""
    PREVIEW = "P"
    LIVE = "L"
    FINAL = "F"


class InningHalf(str, Enum):
    TOP = "Top"
    BOTTOM = "Bottom"

    @property
    def label(self) -> str:
        return "Bottom of" if self == InningHalf.BOTTOM else "Top of"

    @classmethod
    def parse(cls, raw: object) -> "InningHalf":
        """Anything other than an exact "Bottom" renders as the top half."""
        return cls.BOTTOM if raw == cls.BOTTOM.value else cls.TOP
