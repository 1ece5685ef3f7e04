"""Cooperative cancellation shared by a queue worker and its driver."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from ..core.exceptions import OperationCancelledError

T = TypeVar("T")


class CancelToken:
    """One-shot cancellation signal.

    ``guard`` races any awaitable against the signal so that a pacing sleep,
    an in-flight HTTP call or a blocked receive can all be abandoned the
    moment ``cancel()`` is called.

    A token created with ``child()`` also fires when its parent fires, while
    cancelling the child leaves the parent untouched.
    """

    def __init__(self, parent: CancelToken | None = None) -> None:
        self._event = asyncio.Event()
        self._parent = parent
        self._reason: str | None = None

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._parent is not None and self._parent.cancelled

    @property
    def reason(self) -> str | None:
        if self._event.is_set():
            return self._reason
        if self._parent is not None:
            return self._parent.reason
        return None

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    def child(self) -> CancelToken:
        """Return a token linked to this one."""
        return CancelToken(parent=self)

    async def wait(self) -> None:
        """Suspend until the token (or one of its parents) is cancelled."""
        if self._parent is None:
            await self._event.wait()
            return
        waiters = {
            asyncio.ensure_future(self._event.wait()),
            asyncio.ensure_future(self._parent.wait()),
        }
        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise OperationCancelledError(self.reason or "operation cancelled")

    async def guard(self, aw: Awaitable[T]) -> T:
        """Await ``aw`` unless the token fires first.

        Raises:
            OperationCancelledError: If cancelled before ``aw`` completes; the
                underlying work is cancelled too
        """
        if self.cancelled:
            if asyncio.iscoroutine(aw):
                aw.close()
            self.raise_if_cancelled()

        work = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self.wait())
        try:
            done, _ = await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            waiter.cancel()
            raise

        if work in done:
            waiter.cancel()
            return work.result()

        work.cancel()
        # collect the outcome so a late failure is not reported as unretrieved
        await asyncio.gather(work, return_exceptions=True)
        raise OperationCancelledError(self.reason or "operation cancelled")
