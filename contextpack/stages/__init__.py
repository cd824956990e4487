"""Pipeline stages: normalize, filter, sanitize, dedup, rerank, pack.

Each stage exposes a small, pure function API over plain strings and the
dataclasses in ``contextpack.models``.
"""
