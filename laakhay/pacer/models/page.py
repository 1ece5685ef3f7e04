"""Paged payload models.

The pagination driver only needs one thing from a payload: its optional
continuation token. ``Page`` is the default decode target for JSON APIs that
wrap results as ``{"data": ..., "includes": ..., "meta": {...}, "errors": [...]}``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PageMeta(BaseModel):
    """Pagination metadata returned with each page."""

    result_count: int | None = Field(default=None, ge=0)
    newest_id: str | None = None
    oldest_id: str | None = None
    next_token: str | None = None
    previous_token: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")


class APIErrorDetail(BaseModel):
    """One entry of the ``errors`` array of a partially failed response."""

    title: str | None = None
    detail: str | None = None
    type: str | None = None
    status: int | None = None
    value: Any = None
    parameter: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    def describe(self) -> str:
        return self.detail or self.title or self.type or "unknown error"


class Page(BaseModel):
    """A single decoded page."""

    data: Any = None
    includes: dict[str, Any] | None = None
    meta: PageMeta | None = None
    errors: list[APIErrorDetail] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def next_token(self) -> str | None:
        """Continuation token, None when absent or empty."""
        if self.meta is None:
            return None
        return self.meta.next_token or None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def result_count(self) -> int:
        if self.meta is not None and self.meta.result_count is not None:
            return self.meta.result_count
        if isinstance(self.data, list):
            return len(self.data)
        return 0 if self.data is None else 1


def continuation_token(payload: Any) -> str | None:
    """Extract the continuation token from a payload.

    Accepts a ``Page``, any object with a ``next_token`` attribute, or a
    mapping shaped like ``{"meta": {"next_token": ...}}``.
    """
    if payload is None:
        return None
    if isinstance(payload, Mapping):
        meta = payload.get("meta")
        if isinstance(meta, Mapping):
            token = meta.get("next_token")
            return str(token) if token else None
        return None
    token = getattr(payload, "next_token", None)
    return str(token) if token else None
