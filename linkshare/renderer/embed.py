"""Rewrite shareable document URLs into their embeddable form.

Google Docs, Sheets and Slides links copied from the browser point at the
editor (``.../edit?usp=sharing``), which refuses to load inside an iframe.
:func:`transform_embed_url` rewrites them to the read-only preview (Docs,
Sheets) or embed (Slides) endpoint. URLs that are already embeddable, Google
Forms, other hosts, and anything unparsable pass through unchanged.
"""

from __future__ import annotations

import re
from urllib.parse import urlsplit

GOOGLE_DOCS_HOST = "docs.google.com"
EMBEDDABLE_SEGMENT_PATTERN = re.compile(r"/(pub|preview|embed)(/|$)")
SLIDES_EMBED_QUERY = "start=false&loop=false&delayms=3000"

_DOCUMENT_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"^/document/d/([^/]+)"),
        "https://docs.google.com/document/d/{doc_id}/preview",
    ),
    (
        re.compile(r"^/spreadsheets/d/([^/]+)"),
        "https://docs.google.com/spreadsheets/d/{doc_id}/preview",
    ),
    (
        re.compile(r"^/presentation/d/([^/]+)"),
        "https://docs.google.com/presentation/d/{doc_id}/embed?" + SLIDES_EMBED_QUERY,
    ),
)


def transform_embed_url(url: str) -> str:
    """Return the embeddable variant of ``url``.

    Examples
    --------
    >>> transform_embed_url("https://docs.google.com/document/d/XYZ/edit?usp=sharing")
    'https://docs.google.com/document/d/XYZ/preview'
    >>> transform_embed_url("https://docs.google.com/forms/d/XYZ/edit")
    'https://docs.google.com/forms/d/XYZ/edit'
    >>> transform_embed_url("https://example.com/video")
    'https://example.com/video'
    """
    try:
        parsed = urlsplit(url)
    except ValueError:
        return url
    if parsed.scheme not in ("http", "https") or parsed.hostname != GOOGLE_DOCS_HOST:
        return url
    if EMBEDDABLE_SEGMENT_PATTERN.search(parsed.path):
        return url
    for pattern, template in _DOCUMENT_PATTERNS:
        match = pattern.match(parsed.path)
        if match:
            return template.format(doc_id=match.group(1))
    return url


__all__ = ["transform_embed_url"]
