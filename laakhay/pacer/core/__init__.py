"""Core components."""

from .config import (
    DEFAULT_REQUESTS,
    DEFAULT_TOKEN_PARAM,
    DEFAULT_WINDOW,
    QueueConfig,
    RateBudget,
)
from .enums import ErrorPolicy, HTTPMethod
from .exceptions import (
    APIError,
    ChannelClosedError,
    DecodeError,
    OperationCancelledError,
    PacerError,
    ProviderError,
    RateLimitError,
    TransportError,
)
from .request import Request, Response, normalize_params

__all__ = [
    "HTTPMethod",
    "ErrorPolicy",
    "QueueConfig",
    "RateBudget",
    "DEFAULT_REQUESTS",
    "DEFAULT_WINDOW",
    "DEFAULT_TOKEN_PARAM",
    "Request",
    "Response",
    "normalize_params",
    "PacerError",
    "TransportError",
    "DecodeError",
    "ProviderError",
    "RateLimitError",
    "APIError",
    "ChannelClosedError",
    "OperationCancelledError",
]
