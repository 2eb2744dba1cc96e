"""Jinja helpers available to every theme template.

``dc`` picks between dark and light class lists, and ``t`` translates a
message through the translator the renderer places in the template context.

Examples
--------
In a theme template::

    <div class="{{ dc('bg-slate-900 text-white', 'bg-white text-slate-900') }}">
      <a href="{{ parent.path }}">{{ t("Back to {title}", title=parent.title) }}</a>
      <button>{{ t("Copy", msgctxt="verb") }}</button>
    </div>
"""

from __future__ import annotations

import typing as typ

from jinja2 import pass_context

if typ.TYPE_CHECKING:
    from jinja2.runtime import Context


def prefix_dark(classes: str) -> str:
    """Prefix each class in a whitespace separated list with ``dark:``.

    Examples
    --------
    >>> prefix_dark("bg-black  text-white")
    'dark:bg-black dark:text-white'
    """
    return " ".join(f"dark:{name}" for name in classes.split())


def merge_auto_classes(dark_classes: str, light_classes: str) -> str:
    """Combine light classes with ``dark:``-prefixed dark classes."""
    return f"{light_classes} {prefix_dark(dark_classes)}".strip()


@pass_context
def dark_light_classes(context: Context, dark_classes: str, light_classes: str) -> str:
    """Return the class list matching the page's dark mode.

    In auto mode both sets are emitted, the dark one behind ``dark:``
    prefixes, so the browser's colour scheme decides.
    """
    if context.get("auto_dark"):
        return merge_auto_classes(dark_classes, light_classes)
    return dark_classes if context.get("dark") else light_classes


@pass_context
def translate_message(
    context: Context,
    msgid: str,
    msgctxt: str | None = None,
    **placeholders: object,
) -> str:
    """Translate ``msgid`` and substitute ``{name}`` placeholders.

    Keyword arguments starting with ``msg`` are reserved for gettext fields
    and never substituted.
    """
    translator = context.get("translate")
    text = translator(msgid, msgctxt) if callable(translator) else msgid
    for key, value in placeholders.items():
        if key.startswith("msg"):
            continue
        text = text.replace(f"{{{key}}}", str(value))
    return text


TEMPLATE_GLOBALS: dict[str, typ.Any] = {
    "dc": dark_light_classes,
    "t": translate_message,
}

__all__ = [
    "TEMPLATE_GLOBALS",
    "dark_light_classes",
    "merge_auto_classes",
    "prefix_dark",
    "translate_message",
]
