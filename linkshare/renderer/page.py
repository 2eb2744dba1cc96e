"""Render sections, login gates and the fallback 404 into full HTML documents.

:class:`PageRenderer` resolves the section's theme (falling back to
``default``), pre-renders the child cards and items through the theme's
fragment templates, renders the theme's page or login template around them,
and finally wraps the result in the layout shell.

Rendering never raises for a missing theme: without ``default`` either, the
themeless 404 document is returned instead. A theme template that fails
while rendering is logged and leaves an empty body inside the shell.

Examples
--------
>>> from linkshare.renderer import PageRenderer
>>> renderer = PageRenderer(registry, catalogs)  # doctest: +SKIP
>>> html = renderer.render_page(scan.get("/work"))  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ

from jinja2 import TemplateError
from markupsafe import Markup

from linkshare._constants import (
    DEFAULT_ACCENT_COLOR,
    DEFAULT_LOCALE,
    DEFAULT_THEME,
    THEME_ASSET_ROUTE,
)
from linkshare.config.models import ItemType, ResolvedStyle
from linkshare.i18n import create_translator, text_direction
from linkshare.style import CDN_DEFAULTS

from .content import ContentRenderer
from .items import build_item_context, resolve_asset_url
from .shell import LayoutShell, ShellOptions, background_colors

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from linkshare.i18n import Catalogs
    from linkshare.scanner import Section
    from linkshare.themes import CompiledTheme, ThemeRegistry

logger = logging.getLogger("linkshare.renderer")

NOT_FOUND_TEMPLATE = "not_found.jinja"


def fallback_style(locale: str = DEFAULT_LOCALE) -> ResolvedStyle:
    """Return the dark indigo style used by the themeless 404 document."""
    return ResolvedStyle(
        theme=DEFAULT_THEME,
        color="indigo",
        dark=True,
        font="Inter",
        background_color="#0f172a",
        accent_color=DEFAULT_ACCENT_COLOR,
        locale=locale,
        cdn=CDN_DEFAULTS,
    )


class PageRenderer:
    """Render sections through the loaded themes.

    Parameters
    ----------
    themes : ThemeRegistry
        Compiled themes keyed by name.
    catalogs : Catalogs
        Translation catalogs keyed by locale.
    content_renderer : ContentRenderer, optional
        Markdown and code-language helper for item contexts.
    shell : LayoutShell, optional
        Document shell; a shared default is created when omitted.
    """

    def __init__(
        self,
        themes: ThemeRegistry,
        catalogs: Catalogs,
        *,
        content_renderer: ContentRenderer | None = None,
        shell: LayoutShell | None = None,
    ) -> None:
        self.themes = themes
        self.catalogs = catalogs
        self.content = content_renderer or ContentRenderer()
        self.shell = shell or LayoutShell()

    def render_page(self, section: Section) -> str:
        """Render the full page for an authorized ``section``."""
        theme = self.themes.resolve(section.style.theme)
        if theme is None:
            logger.warning(
                "No theme '%s' or '%s' available for %s",
                section.style.theme,
                DEFAULT_THEME,
                section.path,
            )
            return self.render_not_found(section.style.locale)

        style = section.style
        shared = self._shared_context(section, theme)
        children_html = self._render_cards(section, theme, shared)
        items_html = self._render_items(section, theme, shared)
        bg_dark, bg_light = background_colors(style)
        parent = section.parent

        try:
            body = theme.page.render(
                {
                    "title": section.title,
                    "description": section.config.description or "",
                    "path": section.path,
                    "logo": resolve_asset_url(style.logo, section.path)
                    if style.logo
                    else "",
                    "background_color_dark": bg_dark,
                    "background_color_light": bg_light,
                    "parent": {"path": parent.path, "title": parent.title}
                    if parent is not None
                    else None,
                    "is_protected": section.protected,
                    "show_nav": parent is not None or section.protected,
                    "children_html": Markup(children_html),
                    "items_html": Markup(items_html),
                    **shared,
                }
            )
        except TemplateError:
            logger.exception(
                "Theme '%s' failed to render %s", theme.name, section.path
            )
            body = ""

        item_types = {item.item_type for item in section.config.items}
        return self.shell.render(
            self._shell_options(
                section,
                theme,
                title=section.title,
                has_code=ItemType.CODE in item_types,
                has_embed=ItemType.EMBED in item_types,
            ),
            body,
        )

    def render_login(self, section: Section, error: str | None = None) -> str:
        """Render the password form guarding ``section``."""
        theme = self.themes.resolve(section.style.theme)
        if theme is None:
            return self.render_not_found(section.style.locale)

        shared = self._shared_context(section, theme)
        bg_dark, bg_light = background_colors(section.style)
        parent = section.parent
        try:
            body = theme.login.render(
                {
                    "title": section.title,
                    "path": section.path,
                    "background_color_dark": bg_dark,
                    "background_color_light": bg_light,
                    "parent": {"path": parent.path, "title": parent.title}
                    if parent is not None
                    else None,
                    "error": error or "",
                    **shared,
                }
            )
        except TemplateError:
            logger.exception(
                "Theme '%s' failed to render the login for %s",
                theme.name,
                section.path,
            )
            body = ""

        return self.shell.render(
            self._shell_options(section, theme, title=f"{section.title} - Protected"),
            body,
        )

    def render_not_found(self, locale: str | None = None) -> str:
        """Render the themeless 404 document in ``locale``."""
        locale = locale or DEFAULT_LOCALE
        translate = create_translator(self.catalogs, locale)
        style = fallback_style(locale)
        body = self.shell.render_fragment(NOT_FOUND_TEMPLATE, translate=translate)
        options = ShellOptions(
            title=translate("Not Found"),
            style=style,
            theme_assets=THEME_ASSET_ROUTE.format(theme=style.theme),
            locale=locale,
        )
        return self.shell.render(options, body)

    def _shared_context(
        self, section: Section, theme: CompiledTheme
    ) -> dict[str, typ.Any]:
        """Return the context every template of this section receives.

        Theme vars come last so themes can expose any class name they like.
        """
        style = section.style
        is_auto = style.dark == "auto"
        context: dict[str, typ.Any] = {
            "dark": False if is_auto else bool(style.dark),
            "theme_assets": THEME_ASSET_ROUTE.format(theme=theme.directory.name),
            "accent_color": style.accent_color,
            "locale": style.locale,
            "dir": text_direction(style.locale),
            "translate": create_translator(self.catalogs, style.locale),
        }
        if is_auto:
            context["auto_dark"] = True
        context.update(theme.vars.for_mode(style.dark))
        return context

    def _render_cards(
        self,
        section: Section,
        theme: CompiledTheme,
        shared: cabc.Mapping[str, typ.Any],
    ) -> str:
        if theme.section is None:
            return ""
        cards: list[str] = []
        for child in section.children:
            if child.hidden:
                continue
            context = {
                "title": child.title,
                "description": child.config.description or "",
                "path": child.path,
                "has_password": child.has_password,
                **shared,
            }
            try:
                cards.append(theme.section.render(context))
            except TemplateError:
                logger.exception("Cannot render card for %s", child.path)
        return "\n".join(cards)

    def _render_items(
        self,
        section: Section,
        theme: CompiledTheme,
        shared: cabc.Mapping[str, typ.Any],
    ) -> str:
        rendered: list[str] = []
        for item in section.config.items:
            item_type = item.item_type
            if item_type is None:
                logger.debug(
                    "Skipping item '%s' of unknown type '%s'", item.title, item.type
                )
                continue
            template = theme.items.get(item_type)
            if template is None:
                continue
            context = build_item_context(item, item_type, section.path, self.content)
            context.update(shared)
            try:
                rendered.append(template.render(context))
            except TemplateError:
                logger.exception(
                    "Cannot render %s item '%s' in %s",
                    item_type,
                    item.title,
                    section.path,
                )
        return "\n".join(rendered)

    @staticmethod
    def _shell_options(
        section: Section,
        theme: CompiledTheme,
        *,
        title: str,
        has_code: bool = False,
        has_embed: bool = False,
    ) -> ShellOptions:
        style = section.style
        return ShellOptions(
            title=title,
            style=style,
            theme_assets=THEME_ASSET_ROUTE.format(theme=theme.directory.name),
            background_url=resolve_asset_url(style.background, section.path)
            if style.background
            else None,
            has_code=has_code,
            has_embed=has_embed,
            extra_styles=theme.css,
            body_class=theme.options.body_class,
            container_class=theme.options.container_class,
            locale=style.locale,
            assets=theme.assets,
        )


__all__ = ["PageRenderer", "fallback_style"]
