"""Line-oriented JSON rendering for compact and full responses."""

from __future__ import annotations

import json
import math
import typing as t
from dataclasses import dataclass
from typing import Iterable, Sequence, Union

from contextpack.models import OutputRecord, SourceRecord


@dataclass(frozen=True)
class Structured:
    value: t.Any


@dataclass(frozen=True)
class PlainText:
    text: str


SnippetPayload = Union[Structured, PlainText]


def _dumps(obj: t.Any) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), allow_nan=False)


def render_compact_line(record: OutputRecord) -> str:
    return _dumps(record.to_payload())


def _reject_constant(name: str) -> t.Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def _finite_float(raw: str) -> float:
    value = float(raw)
    if not math.isfinite(value):
        raise ValueError(f"non-finite number: {raw}")
    return value


def parse_snippet(raw: str) -> SnippetPayload:
    """Structured when the snippet is strict JSON, otherwise the trimmed text.

    NaN, Infinity and overflowing numbers are not strict JSON and stay text.
    """
    text = (raw or "").strip()
    try:
        return Structured(json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float))
    except (ValueError, RecursionError):
        return PlainText(text)


def _payload_value(p: SnippetPayload) -> t.Any:
    if isinstance(p, Structured):
        return p.value
    return p.text


def render_full_line(source: SourceRecord) -> str:
    record = OutputRecord(
        title=source.title,
        url=source.url,
        age=source.age,
        snippets=[_payload_value(parse_snippet(s)) for s in source.snippets],
    )
    return render_compact_line(record)


def render_full(records: Sequence[SourceRecord]) -> str:
    return join_lines(render_full_line(r) for r in records)


def join_lines(lines: Iterable[str]) -> str:
    return "\n".join(lines)
