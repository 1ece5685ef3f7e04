"""High-level client facade.

Architecture:
    PacerClient turns an EndpointSpec plus caller params into a seed Request
    and hands it to a fresh PaginationDriver, one queue per call. The client
    owns the HTTP session; executors and pacers can be injected for testing
    or for APIs that need a custom transport.

Example:
    >>> async with PacerClient("https://api.example.com/2") as client:
    ...     stream = client.stream(USER_TWEETS, {"id": "42"}, query={"max_results": 100})
    ...     async for page in stream:
    ...         ...
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ..core.request import Request
from ..io.executor import Executor, HTTPExecutor
from ..io.http import HTTPClient
from ..runtime.cancellation import CancelToken
from ..runtime.pacing import Pacer
from ..runtime.paginator import PageStream, PaginationDriver
from .endpoint import EndpointSpec


class PacerClient:
    """Issue paced, auto-paginated calls against one REST API."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        http: HTTPClient | None = None,
        executor: Executor | None = None,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize client.

        Args:
            base_url: Prefix for endpoint paths
            http: HTTP client override (defaults to a new HTTPClient)
            executor: Executor override (defaults to HTTPExecutor over ``http``)
            headers: Default headers sent with every request
            timeout: Total HTTP timeout in seconds
        """
        self._http = http or HTTPClient(base_url, timeout=timeout, headers=headers)
        self._executor: Executor = executor or HTTPExecutor(self._http)

    @property
    def executor(self) -> Executor:
        return self._executor

    def build_request(
        self,
        spec: EndpointSpec,
        params: dict[str, Any] | None = None,
        query: Mapping[str, Any] | None = None,
    ) -> Request:
        """Seed request for ``spec``; ``query`` is layered over the built query."""
        params = dict(params or {})
        request = Request.create(
            spec.method,
            spec.build_path(params),
            params=spec.build_query(params) if spec.build_query else None,
            body=spec.build_body(params) if spec.build_body else None,
        )
        if query:
            request = request.merge_query(query)
        return request

    def stream(
        self,
        spec: EndpointSpec,
        params: dict[str, Any] | None = None,
        *,
        query: Mapping[str, Any] | None = None,
        auto: bool = True,
        pacer: Pacer | None = None,
        cancel_token: CancelToken | None = None,
        **overrides: Any,
    ) -> PageStream:
        """Start a call and return its page stream immediately.

        Args:
            spec: Endpoint to call
            params: Values for the path and query builders
            query: Extra query parameters (filters, field selections)
            auto: Follow continuation tokens automatically
            pacer: Pacing strategy override
            cancel_token: Token to abort the call; may be shared across calls
            **overrides: QueueConfig field overrides (error_policy, max_pages, ...)
        """
        request = self.build_request(spec, params, query)
        driver = PaginationDriver(
            request,
            self._executor,
            config=spec.queue_config(auto=auto, **overrides),
            pacer=pacer,
            paginated=spec.paginated,
            cancel_token=cancel_token,
            queue_id=spec.id,
        )
        return driver.start()

    async def fetch_all(
        self,
        spec: EndpointSpec,
        params: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> tuple[list[Any], list[Exception]]:
        """Run a call to completion and return ``(pages, errors)``."""
        return await self.stream(spec, params, **kwargs).collect()

    async def fetch_one(
        self,
        spec: EndpointSpec,
        params: dict[str, Any] | None = None,
        *,
        query: Mapping[str, Any] | None = None,
    ) -> Any:
        """Fetch a single page, never following continuation tokens.

        Raises:
            PacerError: The first error reported for the call
        """
        pages, errors = await self.stream(spec, params, query=query, auto=False).collect()
        if errors:
            raise errors[0]
        return pages[0]

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> PacerClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
