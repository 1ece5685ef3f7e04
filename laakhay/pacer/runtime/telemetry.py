"""Structured logging for queue and pagination operations.

Every helper emits one event name as the message and its fields in ``extra``
so that JSON formatters can index them.
"""

from __future__ import annotations

import logging

from ..core.request import Request

logger = logging.getLogger(__name__)


def log_queue_started(*, queue_id: str, interval: float, window: float) -> None:
    """Log start of a queue worker.

    Args:
        queue_id: Queue identifier
        interval: Minimum seconds between dispatches
        window: Rate-limit horizon in seconds
    """
    logger.debug(
        "queue_started",
        extra={"queue_id": queue_id, "interval": interval, "window": window},
    )


def log_request_dispatched(
    *,
    queue_id: str,
    request: Request,
    latency_ms: float | None = None,
) -> None:
    """Log one executed request.

    Args:
        queue_id: Queue identifier
        request: Request that was executed
        latency_ms: Executor latency in milliseconds (optional)
    """
    logger.debug(
        "request_dispatched",
        extra={
            "queue_id": queue_id,
            "method": request.method.value,
            "url": request.url,
            "round": request.round,
            "latency_ms": latency_ms,
        },
    )


def log_request_failed(
    *,
    queue_id: str,
    request: Request,
    error_type: str,
    error_message: str,
) -> None:
    """Log an executor error that is being relayed as a response.

    Args:
        queue_id: Queue identifier
        request: Request whose execution failed
        error_type: Type of error (e.g., "TransportError", "DecodeError")
        error_message: Error message
    """
    logger.warning(
        "request_failed",
        extra={
            "queue_id": queue_id,
            "url": request.url,
            "round": request.round,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_page_emitted(*, queue_id: str, round: int, has_error: bool) -> None:
    logger.debug(
        "page_emitted",
        extra={"queue_id": queue_id, "round": round, "has_error": has_error},
    )


def log_pagination_continued(*, queue_id: str, round: int, token: str) -> None:
    logger.debug(
        "pagination_continued",
        extra={"queue_id": queue_id, "round": round, "token": token},
    )


def log_pagination_complete(*, queue_id: str, pages: int, errors: int, reason: str) -> None:
    """Log the end of a pagination session.

    Args:
        queue_id: Queue identifier
        pages: Pages emitted on the data channel
        errors: Errors emitted on the error channel
        reason: Why the session ended ("exhausted", "single_page", "halted", ...)
    """
    logger.info(
        "pagination_complete",
        extra={"queue_id": queue_id, "pages": pages, "errors": errors, "reason": reason},
    )


def log_pagination_cancelled(*, queue_id: str, pages: int, reason: str | None) -> None:
    logger.info(
        "pagination_cancelled",
        extra={"queue_id": queue_id, "pages": pages, "reason": reason},
    )
