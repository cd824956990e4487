from __future__ import annotations

import re

# *[Image: alt]*, [Image: alt] and markdown ![alt](src)
_IMAGE_RE = re.compile(r"\*?\[Image:[^\]]*\]\*?|!\[[^\]]*\]\([^)]*\)", re.IGNORECASE)
_NBSP_RE = re.compile("&nbsp;|&#160;|&#xa0;|\u00a0", re.IGNORECASE)
_HEADING_RE = re.compile(r"^[ \t]*#{1,6}(?:[ \t]+|$)", re.MULTILINE)
_WS_RE = re.compile(r"\s+")


def sanitize_snippet(raw: str) -> str:
    """Strip markup artifacts from one raw snippet and collapse whitespace.

    Returns an empty string when nothing readable is left.
    """
    text = _IMAGE_RE.sub(" ", raw or "")
    text = _NBSP_RE.sub(" ", text)
    text = _HEADING_RE.sub("", text)
    text = _WS_RE.sub(" ", text)
    return text.strip()
