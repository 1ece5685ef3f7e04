"""HTTP client helper."""

from __future__ import annotations

import json
from typing import Any

import aiohttp

from ..core.exceptions import DecodeError, ProviderError, RateLimitError, TransportError


class HTTPClient:
    """Async HTTP client wrapper.

    Maps aiohttp failures onto the library's error taxonomy: non-2xx statuses
    become ProviderError (RateLimitError for 429), connection problems and
    timeouts become TransportError, unparseable bodies become DecodeError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/") if base_url else None
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.headers = dict(headers or {})
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    def resolve(self, url: str) -> str:
        """Prefix relative URLs with ``base_url``."""
        if self.base_url and not url.startswith("http"):
            return f"{self.base_url}/{url.lstrip('/')}"
        return url

    async def request(
        self,
        method: str,
        url: str,
        params: list[tuple[str, str]] | dict[str, Any] | None = None,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            RateLimitError: On HTTP 429
            ProviderError: On any other non-2xx status
            TransportError: On connection failures and timeouts
            DecodeError: If the body is not valid JSON
        """
        url = self.resolve(url)
        try:
            async with self.session.request(
                method, url, params=params, data=data, headers=headers
            ) as response:
                body = await response.text()
                if response.status >= 400:
                    raise _status_error(response.status, response.reason, body, response.headers)
        except aiohttp.ClientError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        except TimeoutError as e:
            raise TransportError(f"{method} {url} timed out") from e

        if not body:
            return None
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise DecodeError(f"invalid JSON from {url}: {e}", body=body) from e

    async def get(
        self,
        url: str,
        params: list[tuple[str, str]] | dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET request."""
        return await self.request("GET", url, params=params, headers=headers)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def _status_error(status: int, reason: str | None, body: str, headers: Any) -> ProviderError:
    try:
        payload: Any = json.loads(body) if body else None
    except json.JSONDecodeError:
        payload = body
    message = f"HTTP {status}: {reason or 'error'}"
    if status == 429:
        retry_after = headers.get("Retry-After") if headers else None
        try:
            seconds = int(retry_after) if retry_after is not None else 60
        except ValueError:
            seconds = 60
        return RateLimitError(message, retry_after=seconds, payload=payload)
    return ProviderError(message, status_code=status, payload=payload)
