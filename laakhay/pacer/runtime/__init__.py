"""Runtime: channels, pacing, the request queue and the pagination driver.

Architecture:
    - channels.py: closable async channels connecting the tasks
    - cancellation.py: CancelToken threaded through every suspension point
    - pacing.py: dispatch pacing strategies
    - queue.py: RequestQueue, the single-worker pacer/executor
    - paginator.py: PaginationDriver and the caller-facing PageStream
    - telemetry.py: structured logging
"""

from .cancellation import CancelToken
from .channels import Channel
from .pacing import FixedIntervalPacer, Pacer, SlidingWindowPacer, pacer_for
from .paginator import PageStream, PaginationDriver, paginate
from .queue import RequestQueue

__all__ = [
    "Channel",
    "CancelToken",
    "Pacer",
    "FixedIntervalPacer",
    "SlidingWindowPacer",
    "pacer_for",
    "RequestQueue",
    "PaginationDriver",
    "PageStream",
    "paginate",
]
