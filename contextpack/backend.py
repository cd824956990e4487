"""Brave LLM-context API client, the collaborator that supplies source records."""

from __future__ import annotations

import asyncio
import json
import os
from typing import Any, Dict, List, Optional

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from contextpack.models import SourceRecord
from contextpack.utils import get_logger, redact_secrets

logger = get_logger(__name__)

DEFAULT_ENDPOINT = "https://api.search.brave.com/res/v1/llm/context"


class SearchBackendError(RuntimeError):
    pass


class _TransientBackendError(SearchBackendError):
    """Rate limits and upstream 5xx; retried before surfacing."""


def parse_context_response(payload: Dict[str, Any]) -> List[SourceRecord]:
    """Turn an API response into source records, in API order.

    Freshness comes from ``sources[url].age[0]`` when the API supplies it.
    """
    generic = ((payload or {}).get("grounding") or {}).get("generic") or []
    sources = (payload or {}).get("sources") or {}
    out: List[SourceRecord] = []
    for item in generic:
        url = str(item.get("url") or "")
        age_list = (sources.get(url) or {}).get("age") or []
        age = str(age_list[0]) if age_list and age_list[0] else None
        out.append(
            SourceRecord(
                title=str(item.get("title") or ""),
                url=url,
                age=age,
                snippets=tuple(str(s) for s in (item.get("snippets") or []) if s is not None),
            )
        )
    return out


class BraveContextBackend:
    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        endpoint: Optional[str] = None,
        timeout: float = 20.0,
        api_key_env: str = "BRAVE_API_KEY",
    ):
        self.api_key = (api_key or os.environ.get(api_key_env) or "").strip()
        if not self.api_key:
            raise SearchBackendError(f"{api_key_env} not set")
        self.endpoint = endpoint or os.environ.get("BRAVE_CONTEXT_ENDPOINT") or DEFAULT_ENDPOINT
        self.timeout = timeout

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout, _TransientBackendError)),
        reraise=True,
    )
    def _get(self, query: str, params: Dict[str, Any]) -> Dict[str, Any]:
        headers = {
            "Accept": "application/json",
            "X-Subscription-Token": self.api_key,
        }
        r = requests.get(self.endpoint, headers=headers, params={"q": query, **params}, timeout=self.timeout)
        if r.status_code == 429 or r.status_code >= 500:
            raise _TransientBackendError(f"Brave API error {r.status_code}: {redact_secrets(r.text[:300])}")
        if r.status_code != 200:
            raise SearchBackendError(f"Brave API error {r.status_code}: {redact_secrets(r.text[:300])}")
        return r.json()

    def fetch_blocking(self, query: str, params: Dict[str, Any]) -> List[SourceRecord]:
        payload = self._get(query, params)
        records = parse_context_response(payload)
        logger.debug("backend.fetch: query=%r sources=%d", query, len(records))
        return records

    async def fetch(self, query: str, params: Dict[str, Any]) -> List[SourceRecord]:
        return await asyncio.to_thread(self.fetch_blocking, query, params)


class ReplayBackend:
    """Serves a saved API response from disk; used for offline runs."""

    def __init__(self, path: str):
        self.path = path

    async def fetch(self, query: str, params: Dict[str, Any]) -> List[SourceRecord]:
        with open(self.path, "r", encoding="utf-8") as f:
            payload = json.load(f)
        records = parse_context_response(payload)
        logger.debug("backend.replay: path=%s sources=%d", self.path, len(records))
        return records
