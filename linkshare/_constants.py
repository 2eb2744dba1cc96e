"""Common literal values used across linkshare.

These constants keep filenames, route prefixes, and defaults centralized so
the scanner, renderer, site handlers, and tests can import the same values
without drifting. Intended for internal use within the linkshare package.

Examples
--------
>>> from linkshare import _constants
>>> _constants.SECTION_CONFIG_FILENAME
'config.toml'
>>> _constants.THEME_ASSET_ROUTE.format(theme="carnival")
'/assets/carnival'
"""

SECTION_CONFIG_FILENAME = "config.toml"
THEME_CONFIG_FILENAME = "theme.toml"
THEME_STYLESHEET_FILENAME = "style.css"

DEFAULT_THEME = "default"
DEFAULT_LOCALE = "en"
DEFAULT_ACCENT_COLOR = "#6366f1"

RESERVED_ASSETS_SLUG = "assets"
THEME_ASSET_ROUTE = "/assets/{theme}"

AUTH_COOKIE_NAME = "ls_auth"
AUTH_TOKEN_MAX_AGE = 24 * 60 * 60
AUTH_SECRET_FILENAME = ".linkshare-secret"

CONTEXT_SEPARATOR = "\x04"
RTL_LANGUAGES = frozenset({"ar", "he", "fa", "ur"})
