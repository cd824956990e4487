from __future__ import annotations

import time
import typing as t
from typing import Any, Dict, List, Optional, Sequence, Tuple

from contextpack.models import CompactionResult, Limits, SearchRequest, SourceRecord
from contextpack.render import join_lines, render_full
from contextpack.stages.dedup import dedup_exact
from contextpack.stages.filters import filter_by_url, keep_snippet
from contextpack.stages.normalize import backend_params, backend_query, resolve_limits
from contextpack.stages.packer import allocate, select_for_source
from contextpack.stages.rerank import query_terms, rerank_candidates
from contextpack.stages.sanitize import sanitize_snippet
from contextpack.utils import get_logger

logger = get_logger(__name__)


class ContextBackend(t.Protocol):
    async def fetch(self, query: str, params: Dict[str, Any]) -> List[SourceRecord]:
        ...


def _clean_snippets(raw: Sequence[str]) -> List[str]:
    out: List[str] = []
    for s in raw:
        text = sanitize_snippet(s)
        if keep_snippet(text):
            out.append(text)
    return out


def _select(records: Sequence[SourceRecord], query: str, limits: Limits) -> List[Tuple[SourceRecord, List[str]]]:
    terms = query_terms(query)
    selected: List[Tuple[SourceRecord, List[str]]] = []
    for rec in records:
        cleaned = _clean_snippets(rec.snippets)
        ranked = rerank_candidates(dedup_exact(cleaned), terms)
        snippets = select_for_source(
            ranked,
            max_snippets=limits.max_snippets_per_url,
            max_chars=limits.max_snippet_chars,
        )
        if snippets:
            selected.append((rec, snippets))
        else:
            logger.debug("select.drop: url=%s raw=%d", rec.url, len(rec.snippets))
    return selected


def compact(request: SearchRequest, records: Sequence[SourceRecord], limits: Optional[Limits] = None) -> CompactionResult:
    """Run the compact pipeline over already-fetched source records."""
    limits = limits or resolve_limits(request)
    candidates = filter_by_url(records, request.url)
    selected = _select(candidates, request.query, limits)
    state = allocate(selected, limits)
    return CompactionResult(records=list(state.records), text=join_lines(state.lines))


def empty_message(request: SearchRequest) -> str:
    if request.url:
        return f'No context snippets found for URL "{request.url}" with query "{request.query}"'
    return f'No context results found for "{request.query}"'


def render_response(request: SearchRequest, records: Sequence[SourceRecord], limits: Optional[Limits] = None) -> str:
    """Model-facing text for one request: JSON lines, or a one-sentence empty result."""
    limits = limits or resolve_limits(request)
    if limits.response_mode == "full":
        # Full mode skips snippet filtering and budgets; an explicit URL filter still applies.
        kept = filter_by_url(records, request.url)
        if not kept:
            logger.info("No context results for query=%r url=%r", request.query, request.url)
            return empty_message(request)
        return render_full(kept)

    result = compact(request, records, limits)
    if not result:
        logger.info("No context results for query=%r url=%r", request.query, request.url)
        return empty_message(request)
    return result.text


async def llm_context_search(request: SearchRequest, backend: ContextBackend) -> str:
    """Fetch source records once through ``backend`` and render them.

    Backend errors propagate unchanged; the caller decides how to surface them.
    """
    limits = resolve_limits(request)
    query = backend_query(request.query, request.url)

    t0 = time.monotonic()
    records = await backend.fetch(query, backend_params(limits))
    logger.info("fetched sources=%d took_ms=%d", len(records), int((time.monotonic() - t0) * 1000))

    t1 = time.monotonic()
    text = render_response(request, records, limits)
    logger.info("rendered mode=%s chars=%d took_ms=%d", limits.response_mode, len(text), int((time.monotonic() - t1) * 1000))
    return text
