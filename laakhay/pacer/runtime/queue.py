"""Rate-limited request queue.

Architecture:
    A RequestQueue owns one worker task and two bounded channels. The worker
    takes requests from ``inbound`` in order, waits on the pacer, invokes the
    executor and publishes exactly one Response per request on ``outbound``.
    With a single worker there is no reordering, which the pagination driver
    relies on: round N+1 is only submitted after round N has been observed.

    The queue knows nothing about pagination and never retries. Whatever the
    pacer or the executor raises is attached to the Response verbatim. Any
    other worker fault is kept on ``failure`` before ``outbound`` closes.

Lifecycle:
    start(executor) -> submit()* -> stop() -> join()
    The worker also stops when its cancel token fires. ``outbound`` is closed
    on every worker exit path.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import AsyncIterator
from time import perf_counter
from typing import Any

from ..core.config import QueueConfig
from ..core.exceptions import APIError, ChannelClosedError, DecodeError, OperationCancelledError
from ..core.request import Request, Response
from ..io.executor import Executor
from .cancellation import CancelToken
from .channels import Channel
from .pacing import Pacer, pacer_for
from .telemetry import log_queue_started, log_request_dispatched, log_request_failed

logger = logging.getLogger(__name__)

_queue_ids = itertools.count(1)


class RequestQueue:
    """Paces and executes requests for a single top-level call."""

    def __init__(
        self,
        config: QueueConfig | None = None,
        *,
        pacer: Pacer | None = None,
        cancel_token: CancelToken | None = None,
        queue_id: str | None = None,
    ) -> None:
        """Initialize request queue.

        Args:
            config: Pacing and buffering configuration (defaults to QueueConfig())
            pacer: Pacing strategy override (defaults to fixed interval pacing)
            cancel_token: Cancel token shared with the driver (defaults to a new token)
            queue_id: Identifier used in log records
        """
        self.config = config or QueueConfig()
        self.pacer = pacer or pacer_for(self.config)
        self.cancel_token = cancel_token or CancelToken()
        self.queue_id = queue_id or f"queue-{next(_queue_ids)}"
        self.inbound: Channel[Request] = Channel(self.config.buffer_size, name=f"{self.queue_id}.inbound")
        self.outbound: Channel[Response] = Channel(self.config.buffer_size, name=f"{self.queue_id}.outbound")
        self._worker: asyncio.Task[None] | None = None
        # set when the worker stops on an unexpected fault
        self.failure: Exception | None = None

    @property
    def auto(self) -> bool:
        return self.config.auto

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self, executor: Executor) -> asyncio.Task[None]:
        """Spawn the worker task.

        Raises:
            RuntimeError: If the queue was already started
        """
        if self._worker is not None:
            raise RuntimeError(f"{self.queue_id} already started")
        self._worker = asyncio.create_task(self._run(executor), name=f"{self.queue_id}-worker")
        log_queue_started(
            queue_id=self.queue_id,
            interval=self.config.interval,
            window=self.config.window,
        )
        return self._worker

    async def submit(self, request: Request) -> None:
        """Hand a request to the worker, waiting while the inbound queue is full."""
        await self.cancel_token.guard(self.inbound.send(request))

    def stop(self) -> None:
        """Stop accepting requests; the worker exits once inbound is drained."""
        if not self.inbound.closed:
            self.inbound.close()

    async def join(self) -> None:
        """Wait for the worker to exit."""
        if self._worker is not None:
            await self._worker

    async def next_response(self) -> Response:
        """Receive the next response.

        Raises:
            ChannelClosedError: Once the worker has exited and all responses were read
            OperationCancelledError: If the cancel token fires while waiting
        """
        return await self.cancel_token.guard(self.outbound.receive())

    async def responses(self) -> AsyncIterator[Response]:
        """Iterate responses until the outbound channel closes."""
        while True:
            try:
                yield await self.next_response()
            except ChannelClosedError:
                return

    async def _run(self, executor: Executor) -> None:
        try:
            while True:
                try:
                    request = await self.cancel_token.guard(self.inbound.receive())
                except ChannelClosedError:
                    break
                try:
                    await self.cancel_token.guard(self.pacer.acquire())
                except OperationCancelledError:
                    raise
                except Exception as e:
                    response = self._failed(request, e)
                else:
                    response = await self.cancel_token.guard(self._execute(executor, request))
                await self.cancel_token.guard(self.outbound.send(response))
        except OperationCancelledError:
            logger.debug("queue_worker_cancelled", extra={"queue_id": self.queue_id})
        except Exception as e:
            self.failure = e
            logger.exception("queue_worker_failed", extra={"queue_id": self.queue_id})
        finally:
            if not self.outbound.closed:
                self.outbound.close()

    async def _execute(self, executor: Executor, request: Request) -> Response:
        start = perf_counter()
        payload: Any = None
        error: Exception | None = None
        try:
            payload = await executor(request)
        except Exception as e:
            # partial results travel with the error
            payload = e.payload if isinstance(e, APIError) else None
            error = e
            log_request_failed(
                queue_id=self.queue_id,
                request=request,
                error_type=type(e).__name__,
                error_message=str(e),
            )
        else:
            if payload is None:
                error = DecodeError("executor returned no payload")
        log_request_dispatched(
            queue_id=self.queue_id,
            request=request,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        return Response(
            request=request.with_outcome(payload, error),
            payload=payload,
            error=error,
        )

    def _failed(self, request: Request, error: Exception) -> Response:
        log_request_failed(
            queue_id=self.queue_id,
            request=request,
            error_type=type(error).__name__,
            error_message=str(error),
        )
        return Response(request=request.with_outcome(None, error), error=error)
