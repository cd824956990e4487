import pytest
from pydantic import ValidationError

from contextpack.models import SearchRequest
from contextpack.stages.normalize import COMPACT_PROFILE, backend_params, backend_query, resolve_limits


def test_compact_defaults():
    lim = resolve_limits(SearchRequest(query="q"))
    assert lim.count == 8
    assert lim.max_snippets_per_url == 2
    assert lim.max_output_chars == 8000
    assert lim.relevance_mode == "strict"


def test_compact_clamps_to_profile():
    lim = resolve_limits(SearchRequest(
        query="why are bananas yellow",
        count=30,
        max_urls=30,
        max_tokens=12000,
        max_snippets=80,
        max_tokens_per_url=4096,
        max_snippets_per_url=10,
    ))
    assert backend_params(lim) == {
        "count": 8,
        "maximum_number_of_urls": 8,
        "maximum_number_of_tokens": 2048,
        "maximum_number_of_snippets": 16,
        "maximum_number_of_tokens_per_url": 512,
        "maximum_number_of_snippets_per_url": 2,
        "context_threshold_mode": "strict",
    }


def test_compact_keeps_smaller_requests():
    lim = resolve_limits(SearchRequest(query="q", max_snippet_chars=90, max_output_chars=140, relevance_mode="lenient"))
    assert lim.max_snippet_chars == 90
    assert lim.max_output_chars == 140
    assert lim.relevance_mode == "lenient"
    assert lim.max_snippets == COMPACT_PROFILE["max_snippets"]


def test_full_mode_is_unclamped():
    lim = resolve_limits(SearchRequest(query="q", response_mode="full", count=30))
    assert lim.count == 30
    assert lim.max_urls == 50
    assert lim.max_tokens == 32768
    assert lim.relevance_mode is None
    assert "context_threshold_mode" not in backend_params(lim)


def test_backend_query_appends_url():
    assert backend_query("bananas", None) == "bananas"
    assert backend_query("bananas", "https://example.com/b") == "bananas https://example.com/b"


def test_request_schema_bounds():
    with pytest.raises(ValidationError):
        SearchRequest(query="x" * 401)
    with pytest.raises(ValidationError):
        SearchRequest(query="q", max_tokens=100)
    with pytest.raises(ValidationError):
        SearchRequest(query="q", response_mode="verbose")
