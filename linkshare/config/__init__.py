"""Load and validate linkshare section configuration and site settings.

This subpackage parses each content folder's ``config.toml`` into strongly
typed, immutable dataclasses (:class:`SectionConfig`, :class:`ItemConfig`,
:class:`CdnOverrides`) that the scanner and renderer consume, and reads the
site's filesystem roots and runtime mode from the environment
(:func:`load_site_settings`).

Examples
--------
>>> from pathlib import Path
>>> from linkshare.config import load_section_config
>>> config = load_section_config(
...     Path("content/work/config.toml"), fallback_title="work"
... )  # doctest: +SKIP
>>> config.password is not None  # doctest: +SKIP
True
"""

from .loader import load_section_config, load_site_settings, parse_section_config
from .models import (
    CdnConfig,
    CdnOverrides,
    ConfigParseError,
    DarkMode,
    ItemConfig,
    ItemType,
    ResolvedStyle,
    SectionConfig,
    SiteConfigError,
    SiteSettings,
    ThemeConfigError,
    ThemeDefaults,
)

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
    "load_section_config",
    "load_site_settings",
    "parse_section_config",
]
