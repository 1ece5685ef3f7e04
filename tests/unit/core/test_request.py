"""Precise unit tests for Request and Response.

Tests focus on normalisation, merge semantics and round derivation.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from laakhay.pacer.core import DecodeError, HTTPMethod, Request, Response
from laakhay.pacer.core.request import normalize_params


class TestNormalizeParams:
    """Test loose query normalisation."""

    def test_scalars_become_single_tuples(self):
        """Test scalars become single tuples."""
        assert normalize_params({"a": "x", "b": 10, "c": True}) == {
            "a": ("x",),
            "b": ("10",),
            "c": ("true",),
        }

    def test_sequences_are_stringified(self):
        """Test sequences are stringified."""
        assert normalize_params({"ids": [1, 2, 3]}) == {"ids": ("1", "2", "3")}

    def test_none_values_dropped(self):
        """Test none values dropped."""
        assert normalize_params({"a": None, "b": "x"}) == {"b": ("x",)}

    def test_accepts_pairs(self):
        """Test accepts pairs."""
        assert normalize_params([("a", "1"), ("b", ["2"])]) == {"a": ("1",), "b": ("2",)}

    def test_none_input(self):
        """Test none input."""
        assert normalize_params(None) == {}

    def test_non_iterable_values_are_stringified(self):
        """Test datetimes and decimals are treated as scalars."""
        params = normalize_params(
            {
                "start_time": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
                "day": date(2024, 1, 2),
                "ratio": Decimal("0.25"),
            }
        )

        assert params == {
            "start_time": ("2024-01-02T03:04:05+00:00",),
            "day": ("2024-01-02",),
            "ratio": ("0.25",),
        }

    def test_create_accepts_datetime_param(self):
        """Test Request.create with a datetime query value."""
        request = Request.create("GET", "/tweets/search", params={"since": datetime(2024, 1, 2)})
        assert request.get_param("since") == "2024-01-02T00:00:00"


class TestRequestConstruction:
    """Test Request creation and validation."""

    def test_create_normalizes_method_and_params(self):
        """Test create normalizes method and params."""
        req = Request.create("get", "/tweets", params={"ids": ["1", "2"]})
        assert req.method == HTTPMethod.GET
        assert req.params == {"ids": ("1", "2")}
        assert req.round == 0
        assert req.results is None
        assert req.error is None

    def test_create_encodes_str_body(self):
        """Test create encodes str body."""
        req = Request.create("POST", "/tweets", body='{"text": "hi"}')
        assert req.body == b'{"text": "hi"}'

    def test_empty_url_rejected(self):
        """Test empty url rejected."""
        with pytest.raises(ValueError, match="url cannot be empty"):
            Request.create("GET", "")

    def test_unknown_method_rejected(self):
        """Test unknown method rejected."""
        with pytest.raises(ValueError, match="Unsupported HTTP method"):
            Request.create("FETCH", "/tweets")

    def test_frozen(self):
        """Test Request is immutable."""
        req = Request.create("GET", "/tweets")
        with pytest.raises(AttributeError):
            req.url = "/other"  # type: ignore[misc]


class TestMergeQuery:
    """Test query merging."""

    def test_merge_keeps_existing_keys(self, seed_request):
        """Test merge keeps existing keys."""
        merged = seed_request.merge_query({"pagination_token": "T1"})
        assert merged.params == {
            "max_results": ("10",),
            "tweet.fields": ("created_at", "lang"),
            "pagination_token": ("T1",),
        }

    def test_merge_overwrites_instead_of_duplicating(self, seed_request):
        """Test merge overwrites instead of duplicating."""
        merged = seed_request.merge_query({"pagination_token": "T1"}).merge_query(
            {"pagination_token": "T2"}
        )
        assert merged.params["pagination_token"] == ("T2",)
        assert list(merged.params) == ["max_results", "tweet.fields", "pagination_token"]

    def test_merge_does_not_modify_original(self, seed_request):
        """Test merge does not modify original."""
        seed_request.merge_query({"pagination_token": "T1"})
        assert "pagination_token" not in seed_request.params

    def test_query_items_flatten_in_order(self, seed_request):
        """Test query items flatten in order."""
        assert seed_request.query_items() == [
            ("max_results", "10"),
            ("tweet.fields", "created_at"),
            ("tweet.fields", "lang"),
        ]
        assert seed_request.query_string() == (
            "max_results=10&tweet.fields=created_at&tweet.fields=lang"
        )

    def test_get_param(self, seed_request):
        """Test reading the first value of a param."""
        assert seed_request.get_param("max_results") == "10"
        assert seed_request.get_param("missing") is None


class TestRoundDerivation:
    """Test outcome reset and next_round."""

    def test_reset_clears_outcome(self, seed_request):
        """Test reset clears outcome."""
        executed = seed_request.with_outcome({"data": []}, DecodeError("bad"))
        assert executed.results == {"data": []}

        cleared = executed.reset()
        assert cleared.results is None
        assert cleared.error is None
        assert cleared == seed_request

    def test_reset_without_outcome_returns_same_object(self, seed_request):
        """Test reset without outcome returns same object."""
        assert seed_request.reset() is seed_request

    def test_outcome_excluded_from_equality(self, seed_request):
        """Test outcome excluded from equality."""
        assert seed_request.with_outcome("payload", None) == seed_request

    def test_next_round_merges_token_and_resets(self, seed_request):
        """Test next round merges token and resets."""
        executed = seed_request.with_outcome("page-1", None)
        nxt = executed.next_round("T1")

        assert nxt.round == 1
        assert nxt.results is None
        assert nxt.get_param("pagination_token") == "T1"
        assert nxt.get_param("max_results") == "10"

    def test_next_round_custom_param(self, seed_request):
        """Test next round custom param."""
        nxt = seed_request.next_round("abc", param="next_token")
        assert nxt.params["next_token"] == ("abc",)
        assert "pagination_token" not in nxt.params


class TestResponse:
    """Test Response construction rules."""

    def test_requires_payload_or_error(self, seed_request):
        """Test requires payload or error."""
        with pytest.raises(ValueError, match="payload or an error"):
            Response(request=seed_request)

    def test_ok(self, seed_request):
        """Test the ok property."""
        assert Response(request=seed_request, payload={"data": 1}).ok
        assert not Response(request=seed_request, error=DecodeError("x")).ok

    def test_continuation_token_uses_getter(self, seed_request):
        """Test continuation token uses getter."""
        response = Response(request=seed_request, payload={"token": "T9"})
        assert response.continuation_token(lambda p: p["token"]) == "T9"

    def test_empty_token_is_absent(self, seed_request):
        """Test empty token is absent."""
        response = Response(request=seed_request, payload={"token": ""})
        assert response.continuation_token(lambda p: p["token"]) is None

    def test_no_payload_no_token(self, seed_request):
        """Test no payload no token."""
        response = Response(request=seed_request, error=DecodeError("x"))
        assert response.continuation_token(lambda p: "T1") is None
