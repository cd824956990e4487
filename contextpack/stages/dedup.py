from __future__ import annotations

import re
from typing import Iterable, List

from contextpack.models import Candidate
from contextpack.utils import get_logger

logger = get_logger(__name__)

# Shorter form must be at least this long before containment counts as a duplicate.
NEAR_DUP_MIN_CHARS = 80

_NON_ALNUM_RE = re.compile(r"[\W_]+")


def normalize_for_compare(text: str) -> str:
    return _NON_ALNUM_RE.sub(" ", (text or "").lower()).strip()


def dedup_exact(texts: Iterable[str]) -> List[Candidate]:
    """Drop snippets whose normalized form was already seen. First occurrence wins."""
    seen = set()
    out: List[Candidate] = []
    total = 0
    for text in texts:
        total += 1
        norm = normalize_for_compare(text)
        if norm in seen:
            continue
        seen.add(norm)
        out.append(Candidate(text=text, norm=norm))
    logger.debug("dedup.exact: kept=%d from=%d", len(out), total)
    return out


def is_near_duplicate(a: str, b: str) -> bool:
    """Compare two normalized forms: equal, or the shorter (>= 80 chars) is inside the longer."""
    if a == b:
        return True
    shorter, longer = (a, b) if len(a) <= len(b) else (b, a)
    return len(shorter) >= NEAR_DUP_MIN_CHARS and shorter in longer
