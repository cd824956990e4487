from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple

from contextpack.models import Candidate, Limits, OutputRecord, SourceRecord
from contextpack.render import render_compact_line
from contextpack.stages.dedup import is_near_duplicate, normalize_for_compare
from contextpack.utils import get_logger

logger = get_logger(__name__)

ELLIPSIS = "..."


def truncate_snippet(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    if max_chars <= len(ELLIPSIS):
        return text[:max_chars]
    return text[: max_chars - len(ELLIPSIS)].rstrip() + ELLIPSIS


def select_for_source(ranked: Sequence[Candidate], *, max_snippets: int, max_chars: int) -> List[str]:
    """Take best-first candidates for one source, skipping near-duplicates of accepted ones.

    Both the full text and the truncated text are compared, so two distinct
    snippets cannot collapse into the same output after truncation.
    """
    accepted: List[Tuple[str, str]] = []
    out: List[str] = []
    for cand in ranked:
        if len(out) >= max_snippets:
            break
        text = truncate_snippet(cand.text, max_chars)
        norm = normalize_for_compare(text)
        if any(is_near_duplicate(cand.norm, full) or is_near_duplicate(norm, cut) for full, cut in accepted):
            continue
        accepted.append((cand.norm, norm))
        out.append(text)
    return out


@dataclass(frozen=True)
class AllocatorState:
    output_chars: int = 0
    snippet_count: int = 0
    records: Tuple[OutputRecord, ...] = ()
    lines: Tuple[str, ...] = ()
    exhausted: bool = False


def _pack_source(
    state: AllocatorState,
    source: SourceRecord,
    snippets: Sequence[str],
    limits: Limits,
) -> AllocatorState:
    allowed = limits.max_snippets - state.snippet_count
    if allowed <= 0:
        return replace(state, exhausted=True)

    separator = 1 if state.records else 0
    remaining = limits.max_output_chars - state.output_chars - separator

    record = OutputRecord(title=source.title, url=source.url, age=source.age)
    line = ""
    for snippet in snippets[:allowed]:
        trial = OutputRecord(title=record.title, url=record.url, age=record.age, snippets=record.snippets + [snippet])
        trial_line = render_compact_line(trial)
        if len(trial_line) > remaining:
            break
        record, line = trial, trial_line

    if not record.snippets:
        return replace(state, exhausted=True)

    return AllocatorState(
        output_chars=state.output_chars + separator + len(line),
        snippet_count=state.snippet_count + len(record.snippets),
        records=state.records + (record,),
        lines=state.lines + (line,),
    )


def allocate(selected: Sequence[Tuple[SourceRecord, List[str]]], limits: Limits) -> AllocatorState:
    """Ordered greedy walk over sources under the global snippet and character budgets.

    Stops at the first source that cannot contribute a single snippet; later,
    possibly smaller sources are never tried.
    """
    state = AllocatorState()
    for source, snippets in selected:
        state = _pack_source(state, source, snippets, limits)
        if state.exhausted:
            break
    logger.info(
        "packer.allocate: sources=%d/%d snippets=%d chars=%d/%d",
        len(state.records),
        len(selected),
        state.snippet_count,
        state.output_chars,
        limits.max_output_chars,
    )
    return state
