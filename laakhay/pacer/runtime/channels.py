"""Closable async channels.

Architecture:
    ``asyncio.Queue`` has no notion of "closed", which is the only termination
    signal the queue worker and the pagination driver share. A Channel wraps an
    unbounded queue, enforces its bound with a semaphore, and marks closure
    with a sentinel that every receiver observes after the buffered items.
"""

from __future__ import annotations

import asyncio
from typing import Any, Generic, TypeVar

from ..core.exceptions import ChannelClosedError

T = TypeVar("T")

_CLOSED: Any = object()


class Channel(Generic[T]):
    """FIFO channel with explicit close.

    Args:
        maxsize: Items buffered before ``send`` suspends (0 = unbounded)
        name: Label used in error messages
    """

    def __init__(self, maxsize: int = 0, name: str = "channel") -> None:
        if maxsize < 0:
            raise ValueError("Channel maxsize cannot be negative")
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._slots = asyncio.Semaphore(maxsize) if maxsize else None
        self._closed = False
        self.maxsize = maxsize
        self.name = name

    @property
    def closed(self) -> bool:
        return self._closed

    def qsize(self) -> int:
        """Number of buffered items."""
        size = self._queue.qsize()
        return size - 1 if self._closed and size else size

    async def send(self, item: T) -> None:
        """Enqueue ``item``, waiting for room when the channel is bounded.

        Raises:
            ChannelClosedError: If the channel is (or becomes) closed
        """
        if self._closed:
            raise ChannelClosedError(f"send on closed {self.name}")
        if self._slots is not None:
            await self._slots.acquire()
            if self._closed:
                self._slots.release()
                raise ChannelClosedError(f"send on closed {self.name}")
        self._queue.put_nowait(item)

    async def receive(self) -> T:
        """Next item in FIFO order.

        Raises:
            ChannelClosedError: Once the channel is closed and drained
        """
        item = await self._queue.get()
        if item is _CLOSED:
            # leave the marker for other receivers
            self._queue.put_nowait(_CLOSED)
            raise ChannelClosedError(f"{self.name} closed")
        if self._slots is not None:
            self._slots.release()
        return item

    def close(self) -> None:
        """Close the channel. Buffered items stay receivable.

        Raises:
            ChannelClosedError: If the channel was already closed
        """
        if self._closed:
            raise ChannelClosedError(f"close of closed {self.name}")
        self._closed = True
        self._queue.put_nowait(_CLOSED)
        if self._slots is not None:
            # wake senders blocked on a full channel
            self._slots.release()

    def __aiter__(self) -> Channel[T]:
        return self

    async def __anext__(self) -> T:
        try:
            return await self.receive()
        except ChannelClosedError:
            raise StopAsyncIteration from None

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"Channel(name={self.name!r}, maxsize={self.maxsize}, {state})"
