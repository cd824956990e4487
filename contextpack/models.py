"""Data contracts shared by the compaction stages."""

from __future__ import annotations

import typing as t
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, Field

RelevanceMode = Literal["disabled", "strict", "lenient", "balanced"]
ResponseMode = Literal["compact", "full"]


class SearchRequest(BaseModel):
    """Caller-facing request. Bounds are the upstream API's full-mode limits."""

    query: str = Field(..., max_length=400)
    url: Optional[str] = None
    count: Optional[int] = Field(None, ge=1, le=50)
    max_urls: Optional[int] = Field(None, ge=1, le=50)
    max_tokens: Optional[int] = Field(None, ge=1024, le=32768)
    max_snippets: Optional[int] = Field(None, ge=1, le=100)
    max_tokens_per_url: Optional[int] = Field(None, ge=512, le=8192)
    max_snippets_per_url: Optional[int] = Field(None, ge=1, le=100)
    max_snippet_chars: Optional[int] = Field(None, ge=1, le=4000)
    max_output_chars: Optional[int] = Field(None, ge=1, le=200000)
    relevance_mode: Optional[RelevanceMode] = None
    response_mode: ResponseMode = "compact"


@dataclass(frozen=True)
class Limits:
    count: int
    max_urls: int
    max_tokens: int
    max_snippets: int
    max_tokens_per_url: int
    max_snippets_per_url: int
    max_snippet_chars: int
    max_output_chars: int
    relevance_mode: Optional[str]
    response_mode: str = "compact"


@dataclass(frozen=True)
class SourceRecord:
    title: str
    url: str
    age: Optional[str] = None
    snippets: Tuple[str, ...] = ()


@dataclass
class Candidate:
    text: str
    norm: str
    score: float = 0.0

    @property
    def length(self) -> int:
        return len(self.text)


@dataclass
class OutputRecord:
    title: str
    url: str
    age: Optional[str] = None
    snippets: List[t.Any] = field(default_factory=list)

    def to_payload(self) -> dict:
        payload: dict = {"title": self.title, "url": self.url}
        if self.age:
            payload["age"] = self.age
        payload["snippets"] = list(self.snippets)
        return payload


@dataclass
class CompactionResult:
    records: List[OutputRecord] = field(default_factory=list)
    text: str = ""

    @property
    def snippet_count(self) -> int:
        return sum(len(r.snippets) for r in self.records)

    @property
    def output_chars(self) -> int:
        return len(self.text)

    def __bool__(self) -> bool:
        return bool(self.records)
