"""Theme packages: loading, compiled templates, and template helpers."""

from .helpers import dark_light_classes, translate_message
from .registry import (
    CompiledTheme,
    ThemeAssets,
    ThemeOptions,
    ThemeRegistry,
    ThemeVars,
    load_theme,
    load_themes,
)

__all__ = [
    "CompiledTheme",
    "ThemeAssets",
    "ThemeOptions",
    "ThemeRegistry",
    "ThemeVars",
    "dark_light_classes",
    "load_theme",
    "load_themes",
    "translate_message",
]
