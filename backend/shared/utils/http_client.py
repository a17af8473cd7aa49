"""
Async HTTP client wrapper for provider requests.
Single attempt per call: failures propagate to the caller unchanged.
"""
from __future__ import annotations

import time
from typing import Any, Optional

import httpx

from shared.config import get_settings
from shared.utils.errors import MalformedPayloadError
from shared.utils.logging import get_logger

logger = get_logger(__name__)


class ProviderHTTPClient:
    """
    Async JSON client for one provider base URL.
    Usable as an async context manager or via explicit start()/close().
    """

    def __init__(
        self,
        provider_name: str,
        base_url: str,
        headers: dict[str, str] | None = None,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._provider = provider_name
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_s or settings.request_timeout_s
        self._connect_timeout = min(settings.connect_timeout_s, self._timeout)
        self._default_headers = {
            "Accept": "application/json",
            "User-Agent": settings.user_agent,
            **(headers or {}),
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def provider(self) -> str:
        return self._provider

    async def start(self) -> None:
        """Initialize the underlying httpx client."""
        if self._client is not None:
            return
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._default_headers,
            timeout=httpx.Timeout(self._timeout, connect=self._connect_timeout),
            follow_redirects=True,
            transport=self._transport,
        )

    async def close(self) -> None:
        """Close the underlying httpx client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ProviderHTTPClient":
        await self.start()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        """
        Perform a GET request and raise on non-2xx.

        Args:
            path: API path relative to base_url.
            params: Query parameters.

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPStatusError: On non-2xx responses.
            httpx.TransportError: On network failures and timeouts.
        """
        if not self._client:
            raise RuntimeError("ProviderHTTPClient not started. Call start() first.")

        start_time = time.perf_counter()
        try:
            resp = await self._client.get(path, params=params)
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.error(
                "provider_http_error",
                provider=self._provider,
                path=path,
                status=exc.response.status_code,
            )
            raise
        except httpx.TransportError as exc:
            logger.error(
                "provider_request_error",
                provider=self._provider,
                path=path,
                error=str(exc) or type(exc).__name__,
            )
            raise

        logger.debug(
            "provider_request_success",
            provider=self._provider,
            path=path,
            status=resp.status_code,
            latency_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return resp

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET `path` and decode the body as JSON."""
        resp = await self.get(path, params=params)
        try:
            return resp.json()
        except ValueError as exc:
            logger.error("provider_invalid_json", provider=self._provider, path=path)
            raise MalformedPayloadError(self._provider, f"invalid JSON body ({exc})", path) from exc
