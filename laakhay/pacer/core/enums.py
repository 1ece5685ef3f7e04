"""Core enumerations shared by the queue, driver and transports.

Design Decisions:
    - String enums: serialise directly into HTTP verbs and log payloads
    - Small surface: only values the runtime actually branches on
"""

from enum import Enum
from typing import Optional


class HTTPMethod(str, Enum):
    """HTTP verbs a Request may carry."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @classmethod
    def from_str(cls, method: str) -> Optional["HTTPMethod"]:
        """Get method from a case-insensitive string. Returns None if no match."""
        try:
            return cls(method.upper())
        except ValueError:
            return None


class ErrorPolicy(str, Enum):
    """What the pagination driver does with a page that carries an error.

    CONTINUE relays the error and keeps following the continuation token.
    HALT relays the error and stops after that page.
    """

    CONTINUE = "continue"
    HALT = "halt"
