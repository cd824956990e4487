from __future__ import annotations

from typing import Any, Dict, Optional

from contextpack.models import Limits, SearchRequest
from contextpack.utils import get_logger

logger = get_logger(__name__)

LIMIT_FIELDS = (
    "count",
    "max_urls",
    "max_tokens",
    "max_snippets",
    "max_tokens_per_url",
    "max_snippets_per_url",
    "max_snippet_chars",
    "max_output_chars",
)

# Defaults in compact mode, and ceilings the caller cannot exceed there.
COMPACT_PROFILE: Dict[str, Any] = {
    "count": 8,
    "max_urls": 8,
    "max_tokens": 2048,
    "max_snippets": 16,
    "max_tokens_per_url": 512,
    "max_snippets_per_url": 2,
    "max_snippet_chars": 400,
    "max_output_chars": 8000,
    "relevance_mode": "strict",
}

# Request schema upper bounds, used as full-mode fallbacks.
FULL_UPPER_BOUNDS: Dict[str, int] = {
    "count": 50,
    "max_urls": 50,
    "max_tokens": 32768,
    "max_snippets": 100,
    "max_tokens_per_url": 8192,
    "max_snippets_per_url": 100,
    "max_snippet_chars": 4000,
    "max_output_chars": 200000,
}

# Local name -> search API parameter name. Character caps never leave the process.
_BACKEND_PARAM_NAMES = {
    "count": "count",
    "max_urls": "maximum_number_of_urls",
    "max_tokens": "maximum_number_of_tokens",
    "max_snippets": "maximum_number_of_snippets",
    "max_tokens_per_url": "maximum_number_of_tokens_per_url",
    "max_snippets_per_url": "maximum_number_of_snippets_per_url",
}


def resolve_limits(request: SearchRequest) -> Limits:
    """Resolve the effective limit set for one request.

    compact: ``min(requested or default, default)`` per field.
    full: ``requested or upper bound``; the relevance mode is forwarded only
    when the caller set one.
    """
    compact = request.response_mode == "compact"
    values: Dict[str, Any] = {}
    clamped = []
    for name in LIMIT_FIELDS:
        requested: Optional[int] = getattr(request, name)
        if compact:
            default = COMPACT_PROFILE[name]
            value = default if requested is None else min(requested, default)
            if requested is not None and requested > default:
                clamped.append(name)
        else:
            value = FULL_UPPER_BOUNDS[name] if requested is None else requested
        values[name] = int(value)

    if compact:
        relevance = request.relevance_mode or COMPACT_PROFILE["relevance_mode"]
    else:
        relevance = request.relevance_mode

    if clamped:
        logger.debug("normalize.clamp: fields=%s", ",".join(clamped))
    return Limits(relevance_mode=relevance, response_mode=request.response_mode, **values)


def backend_query(query: str, url: Optional[str]) -> str:
    if url:
        return f"{query} {url}"
    return query


def backend_params(limits: Limits) -> Dict[str, Any]:
    params: Dict[str, Any] = {api: getattr(limits, local) for local, api in _BACKEND_PARAM_NAMES.items()}
    if limits.relevance_mode:
        params["context_threshold_mode"] = limits.relevance_mode
    return params
