from __future__ import annotations

from typing import List, Optional, Sequence

from contextpack.models import SourceRecord
from contextpack.utils import get_logger

logger = get_logger(__name__)

# Tuning knobs, kept fixed.
STRUCTURED_MIN_CHARS = 160

_STRUCTURED_KEYS = ('"@graph"', '"@context"', '"@type"')

BOILERPLATE_SIGNALS = (
    "table of contents",
    "related posts",
    "related videos",
    "recommended video",
    "share on facebook",
    "tweet on twitter",
    "pin on pinterest",
    "terms and privacy policy",
    "privacy policy",
    "home »",
    "sources:",
)


# ---------- Result filter ----------

def filter_by_url(records: Sequence[SourceRecord], url: Optional[str]) -> List[SourceRecord]:
    """Keep only records whose URL equals ``url`` exactly. No filter keeps all."""
    if not url:
        return list(records)
    kept = [r for r in records if r.url == url]
    logger.info("filter.url: kept=%d from=%d", len(kept), len(records))
    return kept


# ---------- Content classifier ----------

def is_structured_data(text: str) -> bool:
    """JSON-LD or analytics payloads that leaked into the snippet stream."""
    low = text.lower()
    if any(key in low for key in _STRUCTURED_KEYS):
        return True
    return text[:1] in ("{", "[") and len(text) > STRUCTURED_MIN_CHARS


def is_boilerplate(text: str) -> bool:
    low = text.lower()
    return any(sig in low for sig in BOILERPLATE_SIGNALS)


def keep_snippet(text: str) -> bool:
    return bool(text) and not is_structured_data(text) and not is_boilerplate(text)
