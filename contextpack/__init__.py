"""contextpack: compact, budgeted web-search context for language models.

Heavy collaborators (the HTTP backend) are not imported here so the engine
can be used and tested without network configuration.
"""

from contextpack.models import CompactionResult, OutputRecord, SearchRequest, SourceRecord
from contextpack.orchestrator import compact, llm_context_search, render_response

__all__: list[str] = [
    "CompactionResult",
    "OutputRecord",
    "SearchRequest",
    "SourceRecord",
    "compact",
    "llm_context_search",
    "render_response",
]
