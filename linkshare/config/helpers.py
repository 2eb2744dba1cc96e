"""Utility helpers shared by the linkshare configuration loader."""

from __future__ import annotations

import logging
import typing as typ

from .models import CdnOverrides, DarkMode, ItemConfig, ItemType

logger = logging.getLogger("linkshare.config")


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _optional_int(value: object | None) -> int | None:
    """Return ``value`` as an int, or None when missing or not numeric."""
    match value:
        case bool():
            return None
        case int():
            return value
        case float():
            return int(value)
        case str() as text if text.strip().isdigit():
            return int(text.strip())
        case _:
            return None


def _coerce_dark(value: object, default: DarkMode | None) -> DarkMode | None:
    """Coerce a ``dark`` setting into the ``True|False|"auto"`` tri-state.

    Unrecognized values fall back to ``default``.
    """
    match value:
        case bool():
            return value
        case str() as text if text.strip().lower() == "auto":
            return "auto"
        case None:
            return default
        case _:
            logger.warning("Ignoring invalid dark mode value %r", value)
            return default


def _coerce_font_weights(value: object | None) -> tuple[int, ...] | None:
    """Normalize a font weight list into a tuple of ints."""
    if not isinstance(value, list):
        return None
    weights: list[int] = []
    for entry in value:
        weight = _optional_int(entry)
        if weight is not None:
            weights.append(weight)
    return tuple(weights) or None


def _build_cdn_overrides(payload: object | None) -> CdnOverrides:
    """Build the partial CDN override block of a section config."""
    if not isinstance(payload, dict):
        return CdnOverrides()
    return CdnOverrides(
        js=_optional_str(payload.get("js")),
        fonts=_optional_str(payload.get("fonts")),
        font_weights=_coerce_font_weights(payload.get("font_weights")),
        hljs_theme=_optional_str(payload.get("hljs_theme")),
        hljs_theme_dark=_optional_str(payload.get("hljs_theme_dark")),
    )


def _build_item_config(payload: typ.Mapping[str, typ.Any]) -> ItemConfig:
    """Build an ItemConfig from one ``[[items]]`` table."""
    item_type = _optional_str(payload.get("type")) or ItemType.LINK.value
    return ItemConfig(
        title=str(payload.get("title", "")),
        type=item_type.lower(),
        url=_optional_str(payload.get("url")),
        description=_optional_str(payload.get("description")),
        icon=_optional_str(payload.get("icon")),
        content=payload.get("content") or None,
        file=_optional_str(payload.get("file")),
        filename=_optional_str(payload.get("filename")),
        language=_optional_str(payload.get("language")),
        height=_optional_int(payload.get("height")),
        css_class=_optional_str(payload.get("class")),
    )


def _build_items(payload: object | None) -> tuple[ItemConfig, ...]:
    """Build the ordered item tuple, skipping entries that are not tables."""
    if not isinstance(payload, list):
        return ()
    items: list[ItemConfig] = []
    for entry in payload:
        match entry:
            case dict():
                items.append(_build_item_config(entry))
            case _:
                continue
    return tuple(items)


__all__ = [
    "_build_cdn_overrides",
    "_build_item_config",
    "_build_items",
    "_coerce_dark",
    "_coerce_font_weights",
    "_optional_int",
    "_optional_str",
]
