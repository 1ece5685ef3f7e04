"""Executors: turn a Request into a decoded payload.

An executor is any ``async (Request) -> payload`` callable. The queue treats
it as an opaque capability: it may be invoked repeatedly with successive
rounds of the same logical request.
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import BaseModel, ValidationError

from ..core.exceptions import APIError, DecodeError
from ..core.request import Request
from ..models.page import Page
from .http import HTTPClient


class Executor(Protocol):
    """Protocol for request executors."""

    async def __call__(self, request: Request) -> Any:
        """Execute ``request`` and return its decoded payload.

        Raises:
            Exception: Any failure; the queue relays it as the response error
        """
        ...


class HTTPExecutor:
    """Execute requests over an HTTPClient and decode JSON into a pydantic model.

    A 2xx payload that carries an ``errors`` array next to its data is raised
    as APIError with the decoded page attached, so the data still reaches the
    caller together with the error.
    """

    def __init__(self, client: HTTPClient, model: type[BaseModel] = Page) -> None:
        self._client = client
        self._model = model

    @property
    def client(self) -> HTTPClient:
        return self._client

    async def __call__(self, request: Request) -> Any:
        raw = await self._client.request(
            request.method.value,
            request.url,
            params=request.query_items() or None,
            data=request.body,
            headers=request.headers or None,
        )
        page = self.decode(raw)
        errors = getattr(page, "errors", None)
        if errors:
            first = errors[0]
            detail = first.describe() if hasattr(first, "describe") else str(first)
            raise APIError(
                f"{request.url} returned {len(errors)} error(s): {detail}",
                payload=page,
            )
        return page

    def decode(self, raw: Any) -> BaseModel:
        """Validate a JSON body into the configured model.

        Raises:
            DecodeError: If the body does not match the model
        """
        if raw is None:
            raise DecodeError("empty response body")
        try:
            return self._model.model_validate(raw)
        except ValidationError as e:
            raise DecodeError(f"could not decode {self._model.__name__}: {e}", body=raw) from e
