"""Load section configs and site settings into typed dataclasses."""

from __future__ import annotations

import os
import tomllib
import typing as typ
from pathlib import Path

from .helpers import _build_cdn_overrides, _build_items, _coerce_dark, _optional_str
from .models import ConfigParseError, SectionConfig, SiteSettings

PRODUCTION_ENV = "production"


def load_section_config(path: Path, *, fallback_title: str) -> SectionConfig:
    """Load one folder's ``config.toml`` into a :class:`SectionConfig`.

    Parameters
    ----------
    path : Path
        Filesystem path to the section ``config.toml``.
    fallback_title : str
        Title used when the file does not declare one (the folder slug, or
        ``"Home"`` for the content root).

    Returns
    -------
    SectionConfig
        Parsed, immutable section configuration.

    Raises
    ------
    ConfigParseError
        If the file cannot be read or is not valid TOML.
    """
    try:
        with path.open("rb") as handle:
            raw = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigParseError(path, str(exc)) from exc
    except OSError as exc:
        raise ConfigParseError(path, exc.strerror or str(exc)) from exc
    return parse_section_config(raw, fallback_title=fallback_title)


def parse_section_config(
    raw: typ.Mapping[str, typ.Any], *, fallback_title: str
) -> SectionConfig:
    """Build a SectionConfig from an already parsed TOML mapping."""
    title = _optional_str(raw.get("title")) or fallback_title
    return SectionConfig(
        title=title,
        description=_optional_str(raw.get("description")),
        password=_optional_str(raw.get("password")),
        theme=_optional_str(raw.get("theme")),
        dark=_coerce_dark(raw.get("dark"), None),
        color=_optional_str(raw.get("color")),
        background=_optional_str(raw.get("background")),
        background_color=_optional_str(raw.get("background_color")),
        logo=_optional_str(raw.get("logo")),
        font=_optional_str(raw.get("font")),
        accent_color=_optional_str(raw.get("accent_color")),
        locale=_optional_str(raw.get("locale")),
        inherit=raw.get("inherit") is not False,
        hidden=bool(raw.get("hidden")),
        cdn=_build_cdn_overrides(raw.get("cdn")),
        items=_build_items(raw.get("items")),
    )


def load_site_settings(environ: typ.Mapping[str, str] | None = None) -> SiteSettings:
    """Build :class:`SiteSettings` from environment variables.

    ``CONTENT_DIR``, ``THEMES_DIR`` and ``LOCALES_DIR`` default to
    ``./content``, ``./themes`` and ``./locales``. Live reload is on unless
    ``LINKSHARE_ENV`` is ``production``.
    """
    env = os.environ if environ is None else environ
    mode = env.get("LINKSHARE_ENV", "").strip().lower()
    return SiteSettings(
        content_dir=Path(env.get("CONTENT_DIR", "content")).resolve(),
        themes_dir=Path(env.get("THEMES_DIR", "themes")).resolve(),
        locales_dir=Path(env.get("LOCALES_DIR", "locales")).resolve(),
        live_reload=mode != PRODUCTION_ENV,
        auth_secret=_optional_str(env.get("AUTH_SECRET")),
    )


__all__ = ["load_section_config", "load_site_settings", "parse_section_config"]
