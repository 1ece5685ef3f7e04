"""Laakhay Pacer - rate-paced, auto-paginating REST client runtime."""

from .api import EndpointSpec, PacerClient, path
from .core import (
    DEFAULT_REQUESTS,
    DEFAULT_TOKEN_PARAM,
    DEFAULT_WINDOW,
    APIError,
    ChannelClosedError,
    DecodeError,
    ErrorPolicy,
    HTTPMethod,
    OperationCancelledError,
    PacerError,
    ProviderError,
    QueueConfig,
    RateBudget,
    RateLimitError,
    Request,
    Response,
    TransportError,
)
from .io import Executor, HTTPClient, HTTPExecutor
from .models import APIErrorDetail, Page, PageMeta, continuation_token
from .runtime import (
    CancelToken,
    Channel,
    FixedIntervalPacer,
    Pacer,
    PageStream,
    PaginationDriver,
    RequestQueue,
    SlidingWindowPacer,
    paginate,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "PacerClient",
    "EndpointSpec",
    "path",
    # Core
    "Request",
    "Response",
    "HTTPMethod",
    "ErrorPolicy",
    "QueueConfig",
    "RateBudget",
    "DEFAULT_REQUESTS",
    "DEFAULT_WINDOW",
    "DEFAULT_TOKEN_PARAM",
    # Errors
    "PacerError",
    "TransportError",
    "DecodeError",
    "ProviderError",
    "RateLimitError",
    "APIError",
    "ChannelClosedError",
    "OperationCancelledError",
    # Models
    "Page",
    "PageMeta",
    "APIErrorDetail",
    "continuation_token",
    # Runtime
    "Channel",
    "CancelToken",
    "Pacer",
    "FixedIntervalPacer",
    "SlidingWindowPacer",
    "RequestQueue",
    "PaginationDriver",
    "PageStream",
    "paginate",
    # Transport
    "HTTPClient",
    "Executor",
    "HTTPExecutor",
]
