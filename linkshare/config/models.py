"""Typed dataclasses describing linkshare section, theme, and site configuration."""

from __future__ import annotations

import dataclasses as dc
import enum
import typing as typ
from pathlib import Path

DarkMode = bool | typ.Literal["auto"]


class SiteConfigError(ValueError):
    """Raised when site, section, or theme configuration is invalid."""


class ConfigParseError(SiteConfigError):
    """Raised when a section ``config.toml`` cannot be parsed.

    A malformed section config aborts the whole scan: a partial tree could
    route a protected folder as if it had no password.
    """

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid section config '{path}': {detail}")


class ThemeConfigError(SiteConfigError):
    """Raised when a theme's ``theme.toml`` is malformed."""


class ItemType(enum.StrEnum):
    """Closed set of content item types a theme can render."""

    LINK = "link"
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    VIDEO = "video"
    AUDIO = "audio"
    CODE = "code"
    EMBED = "embed"


@dc.dataclass(frozen=True, slots=True)
class ItemConfig:
    """A single content entry declared under ``[[items]]``.

    ``type`` stays a plain string so that unknown types survive parsing; the
    renderer skips anything outside :class:`ItemType`.
    """

    title: str
    type: str = ItemType.LINK.value
    url: str | None = None
    description: str | None = None
    icon: str | None = None
    content: str | None = None
    file: str | None = None
    filename: str | None = None
    language: str | None = None
    height: int | None = None
    css_class: str | None = None

    @property
    def item_type(self) -> ItemType | None:
        """Return the matching :class:`ItemType`, or None for unknown types."""
        try:
            return ItemType(self.type)
        except ValueError:
            return None


@dc.dataclass(frozen=True, slots=True)
class CdnConfig:
    """CDN providers and highlight themes used by the layout shell."""

    js: str = "cdnjs"
    fonts: str = "google"
    font_weights: tuple[int, ...] = (300, 400, 500, 600, 700)
    hljs_theme: str = "github"
    hljs_theme_dark: str = "github-dark"


@dc.dataclass(frozen=True, slots=True)
class CdnOverrides:
    """Partial CDN settings declared by a section; unset fields inherit."""

    js: str | None = None
    fonts: str | None = None
    font_weights: tuple[int, ...] | None = None
    hljs_theme: str | None = None
    hljs_theme_dark: str | None = None


@dc.dataclass(frozen=True, slots=True)
class SectionConfig:
    """Parsed contents of one folder's ``config.toml``."""

    title: str
    description: str | None = None
    password: str | None = None
    theme: str | None = None
    dark: DarkMode | None = None
    color: str | None = None
    background: str | None = None
    background_color: str | None = None
    logo: str | None = None
    font: str | None = None
    accent_color: str | None = None
    locale: str | None = None
    inherit: bool = True
    hidden: bool = False
    cdn: CdnOverrides = dc.field(default_factory=CdnOverrides)
    items: tuple[ItemConfig, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class ThemeDefaults:
    """Style defaults a theme declares under ``[defaults]``."""

    font: str = "Inter"
    color: str = "indigo"
    dark: DarkMode = "auto"
    background_color: str = "#0f172a"
    background_color_dark: str | None = None
    background_color_light: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ResolvedStyle:
    """Effective style of a section after inheritance has been applied."""

    theme: str
    color: str
    dark: DarkMode
    font: str
    background_color: str
    accent_color: str
    locale: str
    cdn: CdnConfig
    background: str | None = None
    background_color_dark: str | None = None
    background_color_light: str | None = None
    logo: str | None = None


@dc.dataclass(slots=True)
class SiteSettings:
    """Filesystem roots and runtime mode for a linkshare site."""

    content_dir: Path = Path("content")
    themes_dir: Path = Path("themes")
    locales_dir: Path = Path("locales")
    live_reload: bool = True
    auth_secret: str | None = None


__all__ = [
    "CdnConfig",
    "CdnOverrides",
    "ConfigParseError",
    "DarkMode",
    "ItemConfig",
    "ItemType",
    "ResolvedStyle",
    "SectionConfig",
    "SiteConfigError",
    "SiteSettings",
    "ThemeConfigError",
    "ThemeDefaults",
]
