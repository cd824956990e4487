#!/usr/bin/env python3
import argparse
import asyncio
import uuid
from typing import Any, Dict, Optional

from contextpack.backend import BraveContextBackend, ReplayBackend
from contextpack.models import SearchRequest
from contextpack.orchestrator import llm_context_search
from contextpack.utils import get_logger, load_config, redact_secrets

logger = get_logger(__name__)

_REQUEST_KEYS = (
    "query",
    "url",
    "count",
    "max_urls",
    "max_tokens",
    "max_snippets",
    "max_tokens_per_url",
    "max_snippets_per_url",
    "max_snippet_chars",
    "max_output_chars",
    "relevance_mode",
    "response_mode",
)


def _build_request(cfg: Dict[str, Any], overrides: Optional[Dict[str, Any]]) -> SearchRequest:
    fields = dict(cfg.get("request") or {})
    if overrides:
        fields.update({k: v for k, v in overrides.items() if k in _REQUEST_KEYS and v is not None})
    if not fields.get("query"):
        raise ValueError("query required (use --query or request.query in the config)")
    return SearchRequest(**fields)


def _build_backend(cfg: Dict[str, Any], input_path: Optional[str]):
    if input_path:
        return ReplayBackend(input_path)
    bcfg = cfg.get("backend") or {}
    return BraveContextBackend(
        endpoint=bcfg.get("endpoint"),
        timeout=float(bcfg.get("timeout", 20.0)),
        api_key_env=bcfg.get("api_key_env", "BRAVE_API_KEY"),
    )


def run_once(
    config_path: Optional[str] = None,
    *,
    input_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> str:
    """Execute one search with the given config file and CLI overrides; return the rendered text."""
    run_id = uuid.uuid4().hex[:8]
    logger.info("=== run start id=%s ===", run_id)

    try:
        cfg = load_config(config_path)
        request = _build_request(cfg, overrides)
        backend = _build_backend(cfg, input_path)
        return asyncio.run(llm_context_search(request, backend))
    except Exception as e:
        logger.error("Search failed: %s", redact_secrets(str(e)))
        raise
    finally:
        logger.info("=== run end id=%s ===", run_id)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Compact LLM context search")
    parser.add_argument("--config", help="Path to YAML config")
    parser.add_argument("--input", dest="input_path", help="Replay a saved API JSON response instead of calling the API")
    parser.add_argument("--query", "-q", help="Search query (max 400 chars)")
    parser.add_argument("--url", help="Keep only the source with exactly this URL")
    parser.add_argument("--count", type=int, help="Search results considered")
    parser.add_argument("--max-urls", dest="max_urls", type=int, help="Max URLs in the response")
    parser.add_argument("--max-tokens", dest="max_tokens", type=int, help="Approximate max tokens requested upstream")
    parser.add_argument("--max-snippets", dest="max_snippets", type=int, help="Max snippets across all URLs")
    parser.add_argument("--max-tokens-per-url", dest="max_tokens_per_url", type=int, help="Max tokens per URL")
    parser.add_argument("--max-snippets-per-url", dest="max_snippets_per_url", type=int, help="Max snippets per URL")
    parser.add_argument("--max-snippet-chars", dest="max_snippet_chars", type=int, help="Max characters per snippet")
    parser.add_argument("--max-output-chars", dest="max_output_chars", type=int, help="Max characters of output")
    parser.add_argument("--relevance-mode", dest="relevance_mode", choices=["disabled", "strict", "lenient", "balanced"], help="Upstream relevance threshold")
    parser.add_argument("--response-mode", dest="response_mode", choices=["compact", "full"], help="compact (default) or full passthrough")
    args = parser.parse_args(argv)

    overrides = {k: getattr(args, k) for k in _REQUEST_KEYS}
    text = run_once(args.config, input_path=args.input_path, overrides=overrides)
    print(text)


if __name__ == "__main__":
    main()
