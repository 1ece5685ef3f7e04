"""Client facade and endpoint descriptions."""

from .client import PacerClient
from .endpoint import EndpointSpec, path

__all__ = [
    "PacerClient",
    "EndpointSpec",
    "path",
]
