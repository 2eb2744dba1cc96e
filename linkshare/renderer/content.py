"""Markdown rendering and code language normalization for content items."""

from __future__ import annotations

import functools

from markdown import Markdown
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_EXTENSIONS = ("fenced_code", "tables", "sane_lists")


class ContentRenderer:
    """Render text item bodies and derive highlighting classes for code items.

    Fenced code inside Markdown keeps highlight.js compatible
    ``language-<name>`` classes, so the same client-side highlighter styles
    both code items and code embedded in text items.
    """

    def __init__(self, extensions: tuple[str, ...] = MARKDOWN_EXTENSIONS) -> None:
        self._extensions = list(extensions)

    def markdown(self, text: str | None) -> str:
        """Render Markdown ``text`` into HTML; blank input renders as ``""``."""
        if not text or not text.strip():
            return ""
        md = Markdown(extensions=self._extensions)
        return md.convert(text)

    @staticmethod
    def language_class(language: str | None) -> str:
        """Return the ``language-*`` class for a language hint.

        Known aliases are mapped to their canonical lexer name (``py`` becomes
        ``python``); unknown hints are kept as written, lowercased.

        Examples
        --------
        >>> ContentRenderer.language_class("py")
        'language-python'
        >>> ContentRenderer.language_class(None)
        ''
        """
        if not language or not language.strip():
            return ""
        return f"language-{canonical_language(language.strip().lower())}"


@functools.lru_cache(maxsize=128)
def canonical_language(hint: str) -> str:
    """Return the canonical Pygments alias for ``hint``, or ``hint`` itself."""
    try:
        lexer = get_lexer_by_name(hint)
    except ClassNotFound:
        return hint
    return lexer.aliases[0] if lexer.aliases else hint


__all__ = ["ContentRenderer", "canonical_language"]
