"""Translation catalogs for theme and page strings.

Catalogs are precompiled JSON objects, one file per locale, mapping a message
id to its translation. Context-qualified entries use the gettext convention
``msgctxt + "\\x04" + msgid`` as their key. English is the source language and
needs no catalog.

Lookups never fail: an unknown locale, a missing key, or an empty translation
all return the original message id.

Examples
--------
>>> catalogs = {"de": {"Go home": "Zur Startseite"}}
>>> translate(catalogs, "de", "Go home")
'Zur Startseite'
>>> translate(catalogs, "de", "Unknown")
'Unknown'
>>> translate(catalogs, "en", "Go home")
'Go home'
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import typing as typ

import msgspec.json as msgspec_json
from msgspec import DecodeError, ValidationError

from ._constants import CONTEXT_SEPARATOR, DEFAULT_LOCALE, RTL_LANGUAGES

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("linkshare.i18n")

COMPILED_DIRNAME = "compiled"

Catalog = dict[str, str]
Catalogs = dict[str, Catalog]
Translator = cabc.Callable[..., str]


def load_catalogs(locales_dir: Path) -> Catalogs:
    """Load every ``<locale>.json`` catalog under ``locales_dir``.

    Catalogs are read from ``locales_dir/compiled`` when that directory
    exists, otherwise from ``locales_dir`` itself. A missing directory yields
    no catalogs; unreadable or malformed files are skipped with a warning.
    """
    compiled_dir = locales_dir / COMPILED_DIRNAME
    source_dir = compiled_dir if compiled_dir.is_dir() else locales_dir
    catalogs: Catalogs = {}
    if not source_dir.is_dir():
        return catalogs
    for path in sorted(source_dir.glob("*.json")):
        try:
            catalogs[path.stem] = msgspec_json.decode(path.read_bytes(), type=Catalog)
        except (OSError, DecodeError, ValidationError) as exc:
            logger.warning("Skipping locale catalog '%s': %s", path, exc)
    return catalogs


def catalog_key(msgid: str, msgctxt: str | None = None) -> str:
    """Return the catalog key for ``msgid``, qualified by ``msgctxt`` if given."""
    if msgctxt:
        return f"{msgctxt}{CONTEXT_SEPARATOR}{msgid}"
    return msgid


def translate(
    catalogs: cabc.Mapping[str, cabc.Mapping[str, str]],
    locale: str,
    msgid: str,
    msgctxt: str | None = None,
) -> str:
    """Translate ``msgid`` into ``locale``, falling back to ``msgid``."""
    if locale == DEFAULT_LOCALE:
        return msgid
    catalog = catalogs.get(locale)
    if not catalog:
        return msgid
    return catalog.get(catalog_key(msgid, msgctxt)) or msgid


def create_translator(
    catalogs: cabc.Mapping[str, cabc.Mapping[str, str]], locale: str
) -> Translator:
    """Return a translator bound to ``locale``."""

    def _translate(msgid: str, msgctxt: str | None = None) -> str:
        return translate(catalogs, locale, msgid, msgctxt)

    return _translate


def text_direction(locale: str) -> str:
    """Return ``"rtl"`` for right-to-left languages, else ``"ltr"``.

    Examples
    --------
    >>> text_direction("ar-EG")
    'rtl'
    >>> text_direction("de")
    'ltr'
    """
    language = locale.split("-", 1)[0].lower()
    return "rtl" if language in RTL_LANGUAGES else "ltr"


__all__ = [
    "Catalog",
    "Catalogs",
    "Translator",
    "catalog_key",
    "create_translator",
    "load_catalogs",
    "text_direction",
    "translate",
]
