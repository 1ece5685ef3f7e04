"""Rate budgets and per-call queue configuration.

This module centralizes the pacing defaults and the knobs a single paginated
call can override, so the runtime modules can stay small and focused.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .enums import ErrorPolicy

# Default rate window: 1500 requests per 15 minutes
DEFAULT_WINDOW = 15 * 60.0
DEFAULT_REQUESTS = 1500
DEFAULT_TOKEN_PARAM = "pagination_token"
DEFAULT_BUFFER_SIZE = 16


@dataclass(frozen=True)
class RateBudget:
    """Number of requests allowed per rolling window.

    Attributes:
        requests: Requests allowed inside one window
        window: Window length in seconds
    """

    requests: int = DEFAULT_REQUESTS
    window: float = DEFAULT_WINDOW

    def __post_init__(self) -> None:
        if self.requests <= 0:
            raise ValueError("RateBudget requests must be positive")
        if self.window <= 0:
            raise ValueError("RateBudget window must be positive")

    @property
    def interval(self) -> float:
        """Minimum spacing between dispatches that keeps within the budget."""
        return self.window / self.requests


@dataclass(frozen=True)
class QueueConfig:
    """Configuration of one request queue and the driver that feeds it.

    Attributes:
        interval: Minimum seconds between two dispatches
        window: Rate-limit horizon in seconds (informational)
        auto: Follow continuation tokens automatically
        error_policy: Keep paginating after an errored page or stop
        token_param: Query parameter that carries the continuation token
        buffer_size: Bound of the inbound and outbound queues
        max_pages: Stop after this many pages (None = unlimited)
    """

    interval: float = DEFAULT_WINDOW / DEFAULT_REQUESTS
    window: float = DEFAULT_WINDOW
    auto: bool = True
    error_policy: ErrorPolicy = ErrorPolicy.CONTINUE
    token_param: str = DEFAULT_TOKEN_PARAM
    buffer_size: int = DEFAULT_BUFFER_SIZE
    max_pages: int | None = None

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError("QueueConfig interval cannot be negative")
        if self.window <= 0:
            raise ValueError("QueueConfig window must be positive")
        if self.buffer_size < 1:
            raise ValueError("QueueConfig buffer_size must be at least 1")
        if self.max_pages is not None and self.max_pages < 1:
            raise ValueError("QueueConfig max_pages must be at least 1")
        if not self.token_param:
            raise ValueError("QueueConfig token_param cannot be empty")
        if not isinstance(self.error_policy, ErrorPolicy):
            object.__setattr__(self, "error_policy", ErrorPolicy(self.error_policy))

    @classmethod
    def from_budget(cls, budget: RateBudget, **overrides: Any) -> QueueConfig:
        """Build a config whose interval spreads ``budget`` evenly over its window."""
        fields: dict[str, Any] = {"interval": budget.interval, "window": budget.window}
        fields.update(overrides)
        return cls(**fields)

    def with_overrides(self, **overrides: Any) -> QueueConfig:
        """Return a copy with the given fields replaced."""
        if not overrides:
            return self
        return replace(self, **overrides)
