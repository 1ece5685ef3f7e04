"""Shared fixtures for unit tests."""

from __future__ import annotations

import time
from typing import Any

import pytest

from laakhay.pacer.core import QueueConfig, Request
from laakhay.pacer.models import Page


class ScriptedExecutor:
    """Executor that replays a fixed script of payloads and exceptions.

    Records every request it receives and the monotonic time of each call.
    Once the script is exhausted the last step repeats.
    """

    def __init__(self, steps: list[Any]) -> None:
        self.steps = list(steps)
        self.requests: list[Request] = []
        self.calls: list[float] = []

    async def __call__(self, request: Request) -> Any:
        self.requests.append(request)
        self.calls.append(time.monotonic())
        step = self.steps[min(len(self.requests), len(self.steps)) - 1]
        if isinstance(step, Exception):
            raise step
        return step


def page(*items: Any, token: str | None = None) -> Page:
    """Page holding ``items`` with an optional continuation token."""
    return Page(data=list(items), meta={"result_count": len(items), "next_token": token})


@pytest.fixture
def scripted():
    """Factory for ScriptedExecutor."""
    return ScriptedExecutor


@pytest.fixture
def make_page():
    return page


@pytest.fixture
def fast_config() -> QueueConfig:
    """Queue config without pacing delay."""
    return QueueConfig(interval=0.0, window=1.0)


@pytest.fixture
def seed_request() -> Request:
    return Request.create(
        "GET",
        "/users/42/tweets",
        params={"max_results": 10, "tweet.fields": ["created_at", "lang"]},
    )
