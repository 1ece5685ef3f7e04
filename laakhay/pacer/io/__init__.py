"""HTTP transport and executors."""

from .executor import Executor, HTTPExecutor
from .http import HTTPClient

__all__ = [
    "HTTPClient",
    "Executor",
    "HTTPExecutor",
]
