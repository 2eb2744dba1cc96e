"""Load theme packages from a themes directory into compiled Jinja templates.

A theme is a directory holding:

* ``theme.toml`` with ``name``, ``[defaults]`` (font, color, dark,
  background colors), ``[vars.dark]``/``[vars.light]`` class maps,
  ``[options]`` (``body_class``, ``container_class``) and ``[assets]``
  (``css``, ``js``, ``head_js`` file lists under the theme's ``assets/``);
* ``page.html`` and ``login.html`` (both mandatory);
* optionally ``section.html`` (child cards), ``items/<type>.html`` for each
  item type, and ``style.css``.

Themes missing a mandatory file, or with a malformed ``theme.toml`` or
mandatory template, are left out of the registry with a warning. Missing item
templates only make that item type unrenderable for the theme.

Examples
--------
>>> from pathlib import Path
>>> from linkshare.themes import load_themes
>>> registry = load_themes(Path("themes"))  # doctest: +SKIP
>>> registry.resolve("no-such-theme").name  # doctest: +SKIP
'default'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import tomllib
import typing as typ
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    Template,
    TemplateError,
    TemplateNotFound,
    select_autoescape,
)

from linkshare._constants import (
    DEFAULT_THEME,
    THEME_CONFIG_FILENAME,
    THEME_STYLESHEET_FILENAME,
)
from linkshare.config.helpers import _coerce_dark, _optional_str
from linkshare.config.models import DarkMode, ItemType, ThemeConfigError, ThemeDefaults

from .helpers import TEMPLATE_GLOBALS, merge_auto_classes

logger = logging.getLogger("linkshare.themes")

PAGE_TEMPLATE = "page.html"
LOGIN_TEMPLATE = "login.html"
SECTION_TEMPLATES = ("section.html", "items/section.html")
ITEM_TEMPLATE = "items/{type}.html"


@dc.dataclass(frozen=True, slots=True)
class ThemeVars:
    """Class-name variables a theme exposes to its templates per color scheme."""

    dark: dict[str, str] = dc.field(default_factory=dict)
    light: dict[str, str] = dc.field(default_factory=dict)

    def for_mode(self, dark: DarkMode) -> dict[str, str]:
        """Return the variables for ``dark``, merging both sets in auto mode."""
        if dark == "auto":
            light = self.light or self.dark
            merged: dict[str, str] = {}
            for key in {**self.dark, **light}:
                dark_value = self.dark.get(key, "")
                light_value = light.get(key, "")
                if dark_value == light_value:
                    merged[key] = dark_value
                else:
                    merged[key] = merge_auto_classes(dark_value, light_value)
            return merged
        if dark:
            return dict(self.dark)
        return dict(self.light or self.dark)


@dc.dataclass(frozen=True, slots=True)
class ThemeOptions:
    """Body-level layout options declared under ``[options]``."""

    body_class: str | None = None
    container_class: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ThemeAssets:
    """Extra asset files a theme injects into the layout shell."""

    css: tuple[str, ...] = ()
    js: tuple[str, ...] = ()
    head_js: tuple[str, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class CompiledTheme:
    """A loaded theme: metadata, defaults, compiled templates, and CSS."""

    name: str
    directory: Path
    defaults: ThemeDefaults
    vars: ThemeVars
    options: ThemeOptions
    assets: ThemeAssets
    page: Template
    login: Template
    section: Template | None
    items: dict[ItemType, Template]
    css: str = ""


class ThemeRegistry(cabc.Mapping[str, CompiledTheme]):
    """Read-only mapping of theme directory name to :class:`CompiledTheme`."""

    def __init__(self, themes: cabc.Mapping[str, CompiledTheme] | None = None) -> None:
        self._themes = dict(themes or {})

    def __getitem__(self, name: str) -> CompiledTheme:
        return self._themes[name]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._themes)

    def __len__(self) -> int:
        return len(self._themes)

    def resolve(self, name: str) -> CompiledTheme | None:
        """Return the named theme, else the default theme, else None."""
        return self._themes.get(name) or self._themes.get(DEFAULT_THEME)

    def defaults_for(self, name: str) -> ThemeDefaults:
        """Return the style defaults of ``name`` with the same fallbacks."""
        theme = self.resolve(name)
        return theme.defaults if theme is not None else ThemeDefaults()


def load_themes(themes_dir: Path) -> ThemeRegistry:
    """Load every usable theme under ``themes_dir``.

    Parameters
    ----------
    themes_dir : Path
        Directory whose non-hidden subdirectories are theme packages.

    Returns
    -------
    ThemeRegistry
        Themes keyed by directory name. Empty when ``themes_dir`` is missing
        or unreadable.
    """
    themes: dict[str, CompiledTheme] = {}
    try:
        candidates = sorted(
            entry
            for entry in themes_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )
    except OSError as exc:
        logger.warning("Cannot read themes directory '%s': %s", themes_dir, exc)
        return ThemeRegistry()

    for theme_dir in candidates:
        if not (theme_dir / THEME_CONFIG_FILENAME).is_file():
            logger.debug("Ignoring '%s': no %s", theme_dir, THEME_CONFIG_FILENAME)
            continue
        try:
            themes[theme_dir.name] = load_theme(theme_dir)
        except ThemeConfigError as exc:
            logger.warning("Skipping theme '%s': %s", theme_dir.name, exc)
    logger.debug("Loaded %d themes from %s", len(themes), themes_dir)
    return ThemeRegistry(themes)


def load_theme(theme_dir: Path) -> CompiledTheme:
    """Load and compile a single theme directory.

    Raises
    ------
    ThemeConfigError
        If ``theme.toml`` is malformed or a mandatory template is missing or
        does not compile.
    """
    config_path = theme_dir / THEME_CONFIG_FILENAME
    try:
        with config_path.open("rb") as handle:
            raw = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"cannot load {config_path}: {exc}"
        raise ThemeConfigError(msg) from exc

    env = _build_environment(theme_dir)
    page = _compile_required(env, PAGE_TEMPLATE)
    login = _compile_required(env, LOGIN_TEMPLATE)
    section = _compile_first(env, SECTION_TEMPLATES)
    items: dict[ItemType, Template] = {}
    for item_type in ItemType:
        template = _compile_first(env, (ITEM_TEMPLATE.format(type=item_type.value),))
        if template is not None:
            items[item_type] = template

    css = _read_stylesheet(theme_dir / THEME_STYLESHEET_FILENAME)

    return CompiledTheme(
        name=_optional_str(raw.get("name")) or theme_dir.name,
        directory=theme_dir,
        defaults=_build_theme_defaults(_table(raw, "defaults")),
        vars=_build_theme_vars(_table(raw, "vars")),
        options=ThemeOptions(
            body_class=_optional_str(_table(raw, "options").get("body_class")),
            container_class=_optional_str(
                _table(raw, "options").get("container_class")
            ),
        ),
        assets=_build_theme_assets(_table(raw, "assets")),
        page=page,
        login=login,
        section=section,
        items=items,
        css=css,
    )


def _read_stylesheet(path: Path) -> str:
    """Return the theme's inline CSS, or ``""`` when missing or unreadable."""
    if not path.is_file():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring stylesheet '%s': %s", path, exc)
        return ""


def _build_environment(theme_dir: Path) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(theme_dir)),
        autoescape=select_autoescape(["html", "xml"]),
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.globals.update(TEMPLATE_GLOBALS)
    return env


def _compile_required(env: Environment, name: str) -> Template:
    """Compile a mandatory template, raising ThemeConfigError when unusable."""
    try:
        return env.get_template(name)
    except TemplateNotFound as exc:
        msg = f"missing required template '{name}'"
        raise ThemeConfigError(msg) from exc
    except TemplateError as exc:
        msg = f"template '{name}' does not compile: {exc}"
        raise ThemeConfigError(msg) from exc


def _compile_first(env: Environment, names: cabc.Sequence[str]) -> Template | None:
    """Compile the first existing optional template among ``names``."""
    for name in names:
        try:
            return env.get_template(name)
        except TemplateNotFound:
            continue
        except TemplateError as exc:
            logger.warning("Ignoring template '%s': %s", name, exc)
            return None
    return None


def _table(raw: cabc.Mapping[str, typ.Any], key: str) -> dict[str, typ.Any]:
    value = raw.get(key)
    return value if isinstance(value, dict) else {}


def _build_theme_defaults(payload: cabc.Mapping[str, typ.Any]) -> ThemeDefaults:
    """Build ThemeDefaults, coercing ``dark`` to the tri-state (default auto)."""
    base = ThemeDefaults()
    return ThemeDefaults(
        font=_optional_str(payload.get("font")) or base.font,
        color=_optional_str(payload.get("color")) or base.color,
        dark=_coerce_dark(payload.get("dark"), base.dark),
        background_color=_optional_str(payload.get("background_color"))
        or base.background_color,
        background_color_dark=_optional_str(payload.get("background_color_dark")),
        background_color_light=_optional_str(payload.get("background_color_light")),
    )


def _build_theme_vars(payload: cabc.Mapping[str, typ.Any]) -> ThemeVars:
    def _string_map(value: object) -> dict[str, str]:
        if not isinstance(value, dict):
            return {}
        return {str(key): str(item) for key, item in value.items()}

    return ThemeVars(
        dark=_string_map(payload.get("dark")),
        light=_string_map(payload.get("light")),
    )


def _build_theme_assets(payload: cabc.Mapping[str, typ.Any]) -> ThemeAssets:
    def _names(value: object) -> tuple[str, ...]:
        if not isinstance(value, list):
            return ()
        return tuple(text for entry in value if (text := _optional_str(entry)))

    return ThemeAssets(
        css=_names(payload.get("css")),
        js=_names(payload.get("js")),
        head_js=_names(payload.get("head_js")),
    )


__all__ = [
    "CompiledTheme",
    "ThemeAssets",
    "ThemeOptions",
    "ThemeRegistry",
    "ThemeVars",
    "load_theme",
    "load_themes",
]
