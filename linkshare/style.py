"""Resolve the effective style of a section from its config and its parent.

Style resolution is a pure function of the section's own config, the parent's
already resolved style, and a lookup returning a theme's built-in defaults.
Two rules drive it:

* A section that keeps its parent's theme (and does not opt out through
  ``inherit = false``) starts from the parent's fully resolved style, so
  ancestor overrides flow down the tree.
* A section that switches theme, opts out of inheritance, or is the root
  starts from the new theme's defaults instead.

Individual fields declared in the section config then override the base one
by one. Password protection is not part of the style and is unaffected by
``inherit``.

Examples
--------
>>> from linkshare.config import SectionConfig, ThemeDefaults
>>> root = resolve_style(SectionConfig(title="Home"), None, lambda _: ThemeDefaults())
>>> root.theme, root.color, root.accent_color
('default', 'indigo', '#6366f1')
>>> child = resolve_style(SectionConfig(title="Docs"), root, lambda _: ThemeDefaults())
>>> child == root
True
"""

from __future__ import annotations

import collections.abc as cabc

from ._constants import DEFAULT_ACCENT_COLOR, DEFAULT_LOCALE, DEFAULT_THEME
from .config.models import (
    CdnConfig,
    CdnOverrides,
    ResolvedStyle,
    SectionConfig,
    ThemeDefaults,
)
from .palette import COLOR_500

CDN_DEFAULTS = CdnConfig()

ThemeDefaultsLookup = cabc.Callable[[str], ThemeDefaults]


def resolve_style(
    config: SectionConfig,
    parent_style: ResolvedStyle | None,
    get_defaults: ThemeDefaultsLookup,
) -> ResolvedStyle:
    """Return the :class:`ResolvedStyle` for a section.

    Parameters
    ----------
    config : SectionConfig
        The section's own parsed configuration.
    parent_style : ResolvedStyle or None
        The parent's resolved style, or ``None`` for the content root.
    get_defaults : Callable[[str], ThemeDefaults]
        Lookup returning the built-in defaults of a theme by name.

    Returns
    -------
    ResolvedStyle
        The effective style; never mutated afterwards.
    """
    inherit = config.inherit
    if config.theme:
        theme = config.theme
    elif inherit and parent_style is not None:
        theme = parent_style.theme
    else:
        theme = DEFAULT_THEME

    parent_theme = parent_style.theme if parent_style is not None else None
    theme_changed = bool(config.theme) and config.theme != parent_theme
    if inherit and parent_style is not None and not theme_changed:
        base = parent_style
    else:
        base = _base_from_theme(theme, get_defaults(theme))

    color = config.color or base.color
    if config.accent_color:
        accent_color = config.accent_color
    elif config.color:
        accent_color = COLOR_500.get(color, base.accent_color)
    else:
        accent_color = base.accent_color

    return ResolvedStyle(
        theme=theme,
        color=color,
        dark=base.dark if config.dark is None else config.dark,
        font=config.font or base.font,
        background=config.background or (base.background if inherit else None),
        background_color=config.background_color or base.background_color,
        background_color_dark=base.background_color_dark,
        background_color_light=base.background_color_light,
        logo=config.logo or (base.logo if inherit else None),
        accent_color=accent_color,
        locale=config.locale or base.locale,
        cdn=_merge_cdn(base.cdn, config.cdn),
    )


def _base_from_theme(theme: str, defaults: ThemeDefaults) -> ResolvedStyle:
    """Build a fresh base style from a theme's built-in defaults."""
    return ResolvedStyle(
        theme=theme,
        color=defaults.color,
        dark=defaults.dark,
        font=defaults.font,
        background_color=defaults.background_color,
        background_color_dark=defaults.background_color_dark,
        background_color_light=defaults.background_color_light,
        accent_color=COLOR_500.get(defaults.color, DEFAULT_ACCENT_COLOR),
        locale=DEFAULT_LOCALE,
        cdn=CDN_DEFAULTS,
    )


def _merge_cdn(base: CdnConfig, override: CdnOverrides) -> CdnConfig:
    """Merge a partial CDN override into the base CDN config field by field."""
    return CdnConfig(
        js=override.js or base.js,
        fonts=override.fonts or base.fonts,
        font_weights=override.font_weights or base.font_weights,
        hljs_theme=override.hljs_theme or base.hljs_theme,
        hljs_theme_dark=override.hljs_theme_dark or base.hljs_theme_dark,
    )


__all__ = ["CDN_DEFAULTS", "ThemeDefaultsLookup", "resolve_style"]
