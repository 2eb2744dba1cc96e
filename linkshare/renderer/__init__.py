"""Turn resolved sections into HTML documents.

The renderer builds per-item template contexts, renders theme templates and
wraps the result in the package's layout shell.
"""

from .content import ContentRenderer, canonical_language
from .embed import transform_embed_url
from .items import build_item_context, resolve_asset_url
from .page import PageRenderer, fallback_style
from .shell import LayoutShell, ShellOptions, font_links

__all__ = [
    "ContentRenderer",
    "LayoutShell",
    "PageRenderer",
    "ShellOptions",
    "build_item_context",
    "canonical_language",
    "fallback_style",
    "font_links",
    "resolve_asset_url",
    "transform_embed_url",
]
