"""Template context for each content item type.

Every item gets the same base fields so theme templates can rely on them; a
closed table keyed by :class:`~linkshare.config.ItemType` then adds the
fields specific to one type. Types outside the table are never rendered.
"""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import typing as typ

from linkshare.config.models import ItemConfig, ItemType

from .content import ContentRenderer
from .embed import transform_embed_url

DEFAULT_EMBED_HEIGHT = 400

ItemContext = dict[str, typ.Any]
ItemContextBuilder = cabc.Callable[[ItemConfig, ItemContext, ContentRenderer], None]


def resolve_asset_url(asset: str, section_path: str) -> str:
    """Resolve an asset reference declared by a section into a URL.

    Absolute ``http(s)`` URLs pass through. Anything else is joined onto the
    section path; ``..`` segments cannot climb above the section.

    Examples
    --------
    >>> resolve_asset_url("slides/deck.pdf", "/work")
    '/work/slides/deck.pdf'
    >>> resolve_asset_url("../../etc/passwd", "/work")
    '/work/etc/passwd'
    >>> resolve_asset_url("logo.png", "/")
    '/logo.png'
    >>> resolve_asset_url("https://example.com/a.png", "/work")
    'https://example.com/a.png'
    """
    if asset.startswith(("http://", "https://")):
        return asset
    relative = posixpath.normpath(asset.lstrip("/"))
    while relative == ".." or relative.startswith("../"):
        relative = relative[3:]
    if relative in (".", ""):
        relative = ""
    base = "" if section_path == "/" else section_path.rstrip("/")
    return f"{base}/{relative}"


def base_item_context(item: ItemConfig, section_path: str) -> ItemContext:
    """Return the fields every item template receives."""
    file_url = (
        resolve_asset_url(item.file, section_path) if item.file else item.url or ""
    )
    return {
        "title": item.title,
        "type": item.type,
        "description": item.description or "",
        "url": item.url or "#",
        "file_url": file_url,
        "content": item.content or "",
        "language": item.language or "",
        "language_class": "",
        "height": item.height or DEFAULT_EMBED_HEIGHT,
        "icon": resolve_asset_url(item.icon, section_path) if item.icon else "",
        "filename": item.filename or item.file or "",
        "css_class": item.css_class or "",
    }


def _embed_fields(
    item: ItemConfig, context: ItemContext, renderer: ContentRenderer
) -> None:
    context["url"] = transform_embed_url(item.url) if item.url else "#"


def _code_fields(
    item: ItemConfig, context: ItemContext, renderer: ContentRenderer
) -> None:
    context["language_class"] = renderer.language_class(item.language)


def _text_fields(
    item: ItemConfig, context: ItemContext, renderer: ContentRenderer
) -> None:
    context["content_html"] = renderer.markdown(item.content)


def _no_extra_fields(
    item: ItemConfig, context: ItemContext, renderer: ContentRenderer
) -> None:
    return None


ITEM_CONTEXT_BUILDERS: dict[ItemType, ItemContextBuilder] = {
    ItemType.LINK: _no_extra_fields,
    ItemType.TEXT: _text_fields,
    ItemType.IMAGE: _no_extra_fields,
    ItemType.FILE: _no_extra_fields,
    ItemType.VIDEO: _no_extra_fields,
    ItemType.AUDIO: _no_extra_fields,
    ItemType.CODE: _code_fields,
    ItemType.EMBED: _embed_fields,
}


def build_item_context(
    item: ItemConfig,
    item_type: ItemType,
    section_path: str,
    renderer: ContentRenderer,
) -> ItemContext:
    """Return the complete template context for one item."""
    context = base_item_context(item, section_path)
    ITEM_CONTEXT_BUILDERS[item_type](item, context, renderer)
    return context


__all__ = [
    "ITEM_CONTEXT_BUILDERS",
    "ItemContext",
    "base_item_context",
    "build_item_context",
    "resolve_asset_url",
]
