"""Errors raised when a provider answers with something we cannot use."""
from __future__ import annotations

from typing import Optional


class MalformedPayloadError(Exception):
    """Raised when a provider body is not JSON or lacks a required field."""

    def __init__(self, provider: str, detail: str, path: Optional[str] = None):
        self.provider = provider
        self.detail = detail
        self.path = path
        where = f" at {path}" if path else ""
        super().__init__(f"{provider}: malformed payload{where}: {detail}")
