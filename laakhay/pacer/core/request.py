"""Request and Response value objects.

Architecture:
    A Request describes one HTTP call. It is immutable: every operation the
    pagination driver needs (merging query parameters, clearing the previous
    round's outcome, advancing to the next round) returns a new Request, so a
    request can be shared between tasks without aliasing hazards.

    A Response is the outcome of executing one Request: the decoded payload,
    an optional error, and the request as it was executed.

Design Decisions:
    - Query parameters are an ordered ``dict[str, tuple[str, ...]]``; loose
      inputs (scalars, lists) are normalised on construction
    - Outcome fields (``results``, ``error``) are excluded from equality so two
      requests for the same call compare equal regardless of round outcome
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any
from urllib.parse import urlencode

from .config import DEFAULT_TOKEN_PARAM
from .enums import HTTPMethod

QueryValues = Mapping[str, Any]


def normalize_params(values: QueryValues | Iterable[tuple[str, Any]] | None) -> dict[str, tuple[str, ...]]:
    """Normalize loose query values into ``{key: (value, ...)}``.

    Scalars (anything that is not a non-string iterable) become one-element
    tuples, sequences are stringified item by item and ``None`` values are
    dropped. Dates and datetimes are rendered in ISO 8601.
    """
    if values is None:
        return {}
    items = values.items() if isinstance(values, Mapping) else values
    out: dict[str, tuple[str, ...]] = {}
    for key, value in items:
        if value is None:
            continue
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            seq: tuple[str, ...] = (_to_str(value),)
        else:
            seq = tuple(_to_str(v) for v in value if v is not None)
        out[str(key)] = seq
    return out


def _to_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


@dataclass(frozen=True)
class Request:
    """One HTTP call, plus the accumulated outcome of its last execution."""

    method: HTTPMethod
    url: str
    params: dict[str, tuple[str, ...]] = field(default_factory=dict)
    body: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)
    round: int = 0
    results: Any = field(default=None, compare=False, repr=False)
    error: Exception | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.url:
            raise ValueError("Request url cannot be empty")
        if not isinstance(self.method, HTTPMethod):
            method = HTTPMethod.from_str(str(self.method))
            if method is None:
                raise ValueError(f"Unsupported HTTP method: {self.method!r}")
            object.__setattr__(self, "method", method)
        object.__setattr__(self, "params", normalize_params(self.params))
        object.__setattr__(self, "headers", dict(self.headers))

    @classmethod
    def create(
        cls,
        method: HTTPMethod | str,
        url: str,
        params: QueryValues | None = None,
        body: bytes | str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> Request:
        """Build a request from loose inputs."""
        if isinstance(body, str):
            body = body.encode()
        return cls(
            method=method,  # type: ignore[arg-type]
            url=url,
            params=params or {},  # type: ignore[arg-type]
            body=body,
            headers=dict(headers or {}),
        )

    def merge_query(self, values: QueryValues) -> Request:
        """Return a copy with ``values`` layered over the existing query.

        Existing keys keep their position; keys present in ``values`` replace
        the old value rather than appending to it. New keys go last.
        """
        merged = dict(self.params)
        merged.update(normalize_params(values))
        return replace(self, params=merged)

    def reset(self) -> Request:
        """Return a copy with the previous round's results and error cleared."""
        if self.results is None and self.error is None:
            return self
        return replace(self, results=None, error=None)

    def with_outcome(self, results: Any, error: Exception | None) -> Request:
        """Return a copy carrying the outcome of executing this request."""
        return replace(self, results=results, error=error)

    def next_round(self, token: str, param: str = DEFAULT_TOKEN_PARAM) -> Request:
        """Derive the request for the page that follows ``token``."""
        advanced = self.merge_query({param: token}).reset()
        return replace(advanced, round=self.round + 1)

    def query_items(self) -> list[tuple[str, str]]:
        """Flatten the query into ``(key, value)`` pairs, preserving order."""
        return [(key, value) for key, values in self.params.items() for value in values]

    def query_string(self) -> str:
        return urlencode(self.query_items())

    def get_param(self, key: str) -> str | None:
        """First value of ``key``, or None."""
        values = self.params.get(key)
        return values[0] if values else None


@dataclass(frozen=True)
class Response:
    """Outcome of executing one Request.

    Attributes:
        request: The request as executed (carrying its outcome)
        payload: Decoded result, None when nothing could be decoded
        error: Transport, decode or protocol error, if any
    """

    request: Request
    payload: Any = None
    error: Exception | None = None

    def __post_init__(self) -> None:
        if self.payload is None and self.error is None:
            raise ValueError("Response needs a payload or an error")

    @property
    def ok(self) -> bool:
        return self.error is None

    def continuation_token(self, getter: Callable[[Any], str | None]) -> str | None:
        """Continuation token extracted from the payload, None when absent or empty."""
        if self.payload is None:
            return None
        return getter(self.payload) or None
