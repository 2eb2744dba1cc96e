"""The HTML document shell wrapped around every rendered page body.

The shell owns everything a theme should not have to repeat: the accent
palette as CSS custom properties, font and highlight.js links from the
configured CDNs, the background treatment, the pre-paint dark mode script for
``dark = "auto"``, theme CSS, and the theme's extra asset tags.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path
from urllib.parse import quote

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from linkshare._constants import DEFAULT_LOCALE
from linkshare.i18n import text_direction
from linkshare.palette import color_css_vars
from linkshare.themes.helpers import TEMPLATE_GLOBALS

if typ.TYPE_CHECKING:
    from linkshare.config.models import ResolvedStyle
    from linkshare.themes import ThemeAssets

HLJS_VERSION = "11.11.1"
SYSTEM_FONT = "system-ui"
FALLBACK_DARK_BACKGROUND = "#0f172a"
FALLBACK_LIGHT_BACKGROUND = "#ffffff"

_HLJS_BASES = {
    "jsdelivr": (
        f"https://cdn.jsdelivr.net/gh/highlightjs/cdn-release@{HLJS_VERSION}/build"
    ),
    "unpkg": f"https://unpkg.com/@highlightjs/cdn-assets@{HLJS_VERSION}",
    "cdnjs": f"https://cdnjs.cloudflare.com/ajax/libs/highlight.js/{HLJS_VERSION}",
}


def hljs_script_url(provider: str) -> str:
    """Return the highlight.js script URL on ``provider`` (cdnjs by default)."""
    base = _HLJS_BASES.get(provider, _HLJS_BASES["cdnjs"])
    return f"{base}/highlight.min.js"


def hljs_style_url(provider: str, theme: str) -> str:
    """Return the URL of a highlight.js stylesheet on ``provider``."""
    base = _HLJS_BASES.get(provider, _HLJS_BASES["cdnjs"])
    return f"{base}/styles/{theme}.min.css"


@dc.dataclass(frozen=True, slots=True)
class FontLinks:
    """Preconnect origins and stylesheet for the page font."""

    family: str
    stylesheet: str | None = None
    preconnect: tuple[dict[str, typ.Any], ...] = ()


def font_links(provider: str, font: str, weights: tuple[int, ...]) -> FontLinks:
    """Return the font links for ``provider`` (``google``, ``bunny`` or ``none``).

    Examples
    --------
    >>> font_links("none", "Inter", (400,)).stylesheet is None
    True
    >>> font_links("bunny", "Fira Sans", (400, 700)).stylesheet
    'https://fonts.bunny.net/css2?family=Fira%20Sans:wght@400;700&display=swap'
    """
    if provider == "none" or font == SYSTEM_FONT:
        return FontLinks(family=font)
    family = quote(font, safe="")
    weight_list = ";".join(str(weight) for weight in weights)
    if provider == "bunny":
        return FontLinks(
            family=font,
            stylesheet=(
                f"https://fonts.bunny.net/css2?family={family}"
                f":wght@{weight_list}&display=swap"
            ),
            preconnect=({"href": "https://fonts.bunny.net", "crossorigin": False},),
        )
    return FontLinks(
        family=font,
        stylesheet=(
            f"https://fonts.googleapis.com/css2?family={family}"
            f":wght@{weight_list}&display=swap"
        ),
        preconnect=(
            {"href": "https://fonts.googleapis.com", "crossorigin": False},
            {"href": "https://fonts.gstatic.com", "crossorigin": True},
        ),
    )


def background_colors(style: ResolvedStyle) -> tuple[str, str]:
    """Return the ``(dark, light)`` background colors for ``style``."""
    dark = (
        style.background_color_dark
        or style.background_color
        or FALLBACK_DARK_BACKGROUND
    )
    light = (
        style.background_color_light
        or style.background_color
        or FALLBACK_LIGHT_BACKGROUND
    )
    return dark, light


@dc.dataclass(slots=True)
class ShellOptions:
    """Everything the shell needs besides the rendered body."""

    title: str
    style: ResolvedStyle
    theme_assets: str
    background_url: str | None = None
    has_code: bool = False
    has_embed: bool = False
    extra_styles: str = ""
    body_class: str | None = None
    container_class: str | None = None
    locale: str = DEFAULT_LOCALE
    assets: ThemeAssets | None = None


class LayoutShell:
    """Render full HTML documents around pre-rendered page bodies."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir or (
            Path(__file__).resolve().parents[1] / "templates"
        )
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.globals.update(TEMPLATE_GLOBALS)
        self.template = self.env.get_template("shell.jinja")

    def render(self, options: ShellOptions, body: str) -> str:
        """Return the complete document for ``body``."""
        html = self.template.render(**self._context(options, body))
        if not html.endswith("\n"):
            html += "\n"
        return html

    def render_fragment(self, name: str, **context: typ.Any) -> str:
        """Render a package template such as ``not_found.jinja``."""
        return self.env.get_template(name).render(**context)

    @staticmethod
    def _context(options: ShellOptions, body: str) -> dict[str, typ.Any]:
        style = options.style
        is_auto = style.dark == "auto"
        bg_dark, bg_light = background_colors(style)

        body_style = ""
        auto_background: dict[str, str] | None = None
        if options.background_url:
            body_style = (
                f"background-image: url('{options.background_url}'); "
                "background-size: cover; background-position: center; "
                "background-attachment: fixed;"
            )
        elif is_auto:
            auto_background = {"dark": bg_dark, "light": bg_light}
        else:
            body_style = f"background-color: {style.background_color};"

        if is_auto:
            text_class = "text-gray-900 dark:text-white"
        else:
            text_class = "text-white" if style.dark else "text-gray-900"
        body_class = f"{text_class} {options.body_class or ''}".strip()

        cdn = style.cdn
        highlight_styles: list[dict[str, str | None]] = []
        if options.has_code:
            if is_auto:
                highlight_styles = [
                    {
                        "href": hljs_style_url(cdn.js, cdn.hljs_theme),
                        "media": "(prefers-color-scheme: light)",
                    },
                    {
                        "href": hljs_style_url(cdn.js, cdn.hljs_theme_dark),
                        "media": "(prefers-color-scheme: dark)",
                    },
                ]
            else:
                theme = cdn.hljs_theme_dark if style.dark else cdn.hljs_theme
                highlight_styles = [
                    {"href": hljs_style_url(cdn.js, theme), "media": None}
                ]

        assets = options.assets
        base = options.theme_assets
        return {
            "title": options.title,
            "lang": options.locale,
            "dir": text_direction(options.locale),
            "dark": style.dark,
            "auto_dark": is_auto,
            "theme_assets": base,
            "font": font_links(cdn.fonts, style.font, cdn.font_weights),
            "highlight_styles": highlight_styles,
            "highlight_script": hljs_script_url(cdn.js),
            "head_css": [f"{base}/{name}" for name in assets.css] if assets else [],
            "head_scripts": [f"{base}/{name}" for name in assets.head_js]
            if assets
            else [],
            "body_scripts": [f"{base}/{name}" for name in assets.js] if assets else [],
            "color_vars": color_css_vars(style.color),
            "accent_color": style.accent_color,
            "auto_background": auto_background,
            "has_code": options.has_code,
            "has_embed": options.has_embed,
            "body_style": body_style,
            "body_class": body_class,
            "background_image": bool(options.background_url),
            "container_class": options.container_class,
            "body": Markup(body),
            "extra_styles": Markup(options.extra_styles),
        }


__all__ = [
    "HLJS_VERSION",
    "FontLinks",
    "LayoutShell",
    "ShellOptions",
    "background_colors",
    "font_links",
    "hljs_script_url",
    "hljs_style_url",
]
