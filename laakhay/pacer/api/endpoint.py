"""Declarative endpoint descriptions.

An EndpointSpec holds everything call-site specific: how to build the path
and query from caller params, whether the endpoint can paginate, and the rate
budget its queue should respect.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..core.config import QueueConfig, RateBudget
from ..core.enums import HTTPMethod


@dataclass(frozen=True)
class EndpointSpec:
    id: str
    build_path: Callable[[dict[str, Any]], str]
    method: HTTPMethod = HTTPMethod.GET
    build_query: Callable[[dict[str, Any]], dict[str, Any]] | None = None
    build_body: Callable[[dict[str, Any]], bytes | None] | None = None
    # False for lookups by ID: exactly one response is consumed
    paginated: bool = True
    budget: RateBudget = field(default_factory=RateBudget)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("EndpointSpec id cannot be empty")

    def queue_config(self, **overrides: Any) -> QueueConfig:
        """Queue configuration paced by this endpoint's budget."""
        return QueueConfig.from_budget(self.budget, **overrides)


def path(template: str) -> Callable[[dict[str, Any]], str]:
    """Path builder that formats ``template`` with the caller params.

    >>> path("/users/{id}/tweets")({"id": "42"})
    '/users/42/tweets'
    """

    def build(params: dict[str, Any]) -> str:
        try:
            return template.format(**params)
        except KeyError as e:
            raise ValueError(f"missing path parameter {e.args[0]!r} for {template!r}") from e

    return build
