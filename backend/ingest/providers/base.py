"""
Abstract base class for upstream data providers.
Owns the HTTP client lifecycle; subclasses implement the fetch methods.
"""
from __future__ import annotations

import abc
from typing import Any

from shared.utils.http_client import ProviderHTTPClient
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class BaseProvider(abc.ABC):
    """
    Base class for providers.

    The base class handles the HTTP lifecycle so a provider can be used as
    ``async with provider: ...``.
    """

    def __init__(self, name: str, http_client: ProviderHTTPClient) -> None:
        self._name = name
        self._http = http_client

    @property
    def name(self) -> str:
        return self._name

    async def start(self) -> None:
        """Initialize the provider HTTP client."""
        await self._http.start()

    async def close(self) -> None:
        """Shutdown the provider HTTP client."""
        await self._http.close()

    async def __aenter__(self) -> "BaseProvider":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()
