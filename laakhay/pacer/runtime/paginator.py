"""Per-call pagination driver.

Architecture:
    A PaginationDriver ties one RequestQueue to one seed Request and to the
    two caller-facing channels. ``start()`` returns a PageStream immediately;
    an orchestration task then:

    1. starts the queue worker and submits the seed request
    2. relays every response: payload on ``data``, error on ``errors``
    3. when auto-pagination is on and the payload carries a continuation
       token, derives the next round from the executed request and resubmits
    4. closes ``data`` and ``errors`` exactly once, on every exit path

Design Decisions:
    - Requests are immutable; the next round is derived, never mutated in place
    - Caller-facing channels are unbounded so a consumer that drains only one
      of them cannot stall the session
    - Errors do not stop pagination unless ErrorPolicy.HALT is configured
    - Single-ID endpoints run with ``paginated=False`` and never consult the
      continuation token
    - The caller CancelToken aborts the pacing wait, the in-flight call and the
      receive loop; the driver only ever cancels its own child of that token
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from ..core.config import QueueConfig
from ..core.enums import ErrorPolicy
from ..core.exceptions import ChannelClosedError, OperationCancelledError
from ..core.request import Request, Response
from ..io.executor import Executor
from ..models.page import continuation_token
from .cancellation import CancelToken
from .channels import Channel
from .pacing import Pacer
from .queue import RequestQueue
from .telemetry import (
    log_page_emitted,
    log_pagination_cancelled,
    log_pagination_complete,
    log_pagination_continued,
)

logger = logging.getLogger(__name__)

TokenGetter = Callable[[Any], "str | None"]


class PageStream:
    """Caller-facing handle of one pagination session.

    ``data`` yields one payload per page and ``errors`` yields zero or more
    errors; both close together when the session ends.
    """

    def __init__(
        self,
        data: Channel[Any],
        errors: Channel[Exception],
        cancel_token: CancelToken,
        task: asyncio.Task[None],
    ) -> None:
        self.data = data
        self.errors = errors
        self._cancel_token = cancel_token
        self._task = task

    @property
    def cancelled(self) -> bool:
        return self._cancel_token.cancelled

    @property
    def done(self) -> bool:
        return self._task.done()

    def cancel(self, reason: str | None = None) -> None:
        """Abort this session only; both channels close shortly after."""
        self._cancel_token.cancel(reason)

    async def wait(self) -> None:
        """Wait until the session has ended and its queue worker has exited."""
        await self._task

    async def collect(self) -> tuple[list[Any], list[Exception]]:
        """Drain both channels concurrently and return ``(pages, errors)``."""

        async def drain(channel: Channel[Any]) -> list[Any]:
            return [item async for item in channel]

        pages, errors = await asyncio.gather(drain(self.data), drain(self.errors))
        await self.wait()
        return pages, errors

    def __aiter__(self) -> Channel[Any]:
        return self.data


class PaginationDriver:
    """Runs one paginated call through a dedicated RequestQueue."""

    def __init__(
        self,
        request: Request,
        executor: Executor,
        *,
        config: QueueConfig | None = None,
        pacer: Pacer | None = None,
        paginated: bool = True,
        cancel_token: CancelToken | None = None,
        token_getter: TokenGetter = continuation_token,
        queue_id: str | None = None,
    ) -> None:
        """Initialize pagination driver.

        Args:
            request: Seed request (first page)
            executor: Async callable performing the HTTP call
            config: Queue configuration (auto flag, pacing, error policy)
            pacer: Pacing strategy override
            paginated: False for endpoints that cannot paginate (lookups by ID)
            cancel_token: Caller token; cancelling it aborts the session. The driver
                only ever cancels its own child of this token
            token_getter: Extracts the continuation token from a payload
            queue_id: Identifier used in log records
        """
        self.request = request
        self.executor = executor
        self.config = config or QueueConfig()
        self.paginated = paginated
        self.cancel_token = cancel_token or CancelToken()
        self.session_token = self.cancel_token.child()
        self.token_getter = token_getter
        self.queue = RequestQueue(
            self.config,
            pacer=pacer,
            cancel_token=self.session_token,
            queue_id=queue_id,
        )
        self.data: Channel[Any] = Channel(name=f"{self.queue.queue_id}.data")
        self.errors: Channel[Exception] = Channel(name=f"{self.queue.queue_id}.errors")
        self.pages = 0
        self.error_count = 0
        self._task: asyncio.Task[None] | None = None

    def start(self) -> PageStream:
        """Spawn the session and return its stream without waiting.

        Raises:
            RuntimeError: If the driver was already started
        """
        if self._task is not None:
            raise RuntimeError("PaginationDriver already started")
        self._task = asyncio.create_task(self._run(), name=f"{self.queue.queue_id}-driver")
        return PageStream(self.data, self.errors, self.session_token, self._task)

    async def _run(self) -> None:
        finished = False
        self.queue.start(self.executor)
        try:
            reason = await self._paginate()
            finished = True
            log_pagination_complete(
                queue_id=self.queue.queue_id,
                pages=self.pages,
                errors=self.error_count,
                reason=reason,
            )
        except OperationCancelledError:
            log_pagination_cancelled(
                queue_id=self.queue.queue_id,
                pages=self.pages,
                reason=self.session_token.reason,
            )
        except Exception as e:
            logger.exception("pagination_failed", extra={"queue_id": self.queue.queue_id})
            await self.errors.send(e)
            self.error_count += 1
        finally:
            self.data.close()
            self.errors.close()
            self.queue.stop()
            if not finished:
                self.session_token.cancel("pagination ended")
            await self.queue.join()

    async def _paginate(self) -> str:
        await self.queue.submit(self.request)
        while True:
            try:
                response = await self.queue.next_response()
            except ChannelClosedError:
                if self.queue.failure is not None:
                    raise self.queue.failure from None
                return "closed"

            await self._emit(response)

            if not self.paginated:
                return "single_page"
            if response.error is not None and self.config.error_policy is ErrorPolicy.HALT:
                return "halted"
            if not self.config.auto:
                return "auto_disabled"
            token = response.continuation_token(self.token_getter)
            if not token:
                return "exhausted"
            if self.config.max_pages is not None and response.request.round + 1 >= self.config.max_pages:
                return "max_pages"

            next_request = response.request.next_round(token, self.config.token_param)
            log_pagination_continued(
                queue_id=self.queue.queue_id,
                round=next_request.round,
                token=token,
            )
            await self.queue.submit(next_request)

    async def _emit(self, response: Response) -> None:
        if response.payload is not None:
            await self.data.send(response.payload)
            self.pages += 1
        if response.error is not None:
            await self.errors.send(response.error)
            self.error_count += 1
        log_page_emitted(
            queue_id=self.queue.queue_id,
            round=response.request.round,
            has_error=response.error is not None,
        )


def paginate(
    request: Request,
    executor: Executor,
    *,
    config: QueueConfig | None = None,
    pacer: Pacer | None = None,
    paginated: bool = True,
    cancel_token: CancelToken | None = None,
    token_getter: TokenGetter = continuation_token,
) -> PageStream:
    """Start a pagination session for ``request`` and return its stream.

    Must be called from a running event loop.
    """
    driver = PaginationDriver(
        request,
        executor,
        config=config,
        pacer=pacer,
        paginated=paginated,
        cancel_token=cancel_token,
        token_getter=token_getter,
    )
    return driver.start()
