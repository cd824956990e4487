from __future__ import annotations

import re
from typing import List

from contextpack.models import Candidate

MIN_TERM_CHARS = 3
# Length bonus stays below 1 so it only breaks ties between equal term counts.
LENGTH_BONUS_CAP = 300
LENGTH_BONUS_SCALE = 1000.0

_SPLIT_RE = re.compile(r"\W+")


def query_terms(query: str) -> List[str]:
    terms: List[str] = []
    for term in _SPLIT_RE.split((query or "").lower()):
        if len(term) >= MIN_TERM_CHARS and term not in terms:
            terms.append(term)
    return terms


def score_snippet(text: str, terms: List[str]) -> float:
    low = text.lower()
    hits = sum(1 for term in terms if term in low)
    return hits + min(len(text), LENGTH_BONUS_CAP) / LENGTH_BONUS_SCALE


def rerank_candidates(candidates: List[Candidate], terms: List[str]) -> List[Candidate]:
    """Score candidates in place and return them best-first (score, then length)."""
    for c in candidates:
        c.score = score_snippet(c.text, terms)
    return sorted(candidates, key=lambda c: (-c.score, -c.length))
