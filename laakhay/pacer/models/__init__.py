"""Payload models.

Architecture:
    Pydantic v2 models, frozen so a page handed to the caller cannot be
    modified by a later round. Extra fields are allowed because the pacer is
    agnostic to endpoint-specific payload shapes beyond the continuation token.
"""

from .page import APIErrorDetail, Page, PageMeta, continuation_token

__all__ = [
    "Page",
    "PageMeta",
    "APIErrorDetail",
    "continuation_token",
]
