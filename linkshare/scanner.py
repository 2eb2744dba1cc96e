"""Walk a content directory into a tree of :class:`Section` nodes.

Every folder that holds a ``config.toml`` becomes a section. The URL path of a
section is the chain of folder names below the content root, with any leading
``NN-`` ordering prefix removed (``02-work`` serves at ``/work``). Each section
carries its resolved style, its ``protected`` flag (its own password or any
ancestor's), and an ordered list of child sections.

The scanner builds a fresh tree on every call; there are no incremental
updates. A malformed ``config.toml`` aborts the scan with
:class:`~linkshare.config.ConfigParseError`, while unreadable directories only
cost that section its children.

Examples
--------
>>> from pathlib import Path
>>> from linkshare.config import ThemeDefaults
>>> from linkshare.scanner import scan_content
>>> result = scan_content(Path("content"), lambda _: ThemeDefaults())  # doctest: +SKIP
>>> sorted(result.sections)  # doctest: +SKIP
['/', '/work', '/work/projects']
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import re
import typing as typ
from pathlib import Path

from ._constants import RESERVED_ASSETS_SLUG, SECTION_CONFIG_FILENAME
from .config import load_section_config, parse_section_config
from .style import resolve_style

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import ResolvedStyle, SectionConfig
    from .style import ThemeDefaultsLookup

logger = logging.getLogger("linkshare.scanner")

NUMERIC_PREFIX_PATTERN = re.compile(r"^\d+-")
ROOT_PATH = "/"
ROOT_TITLE = "Home"
UNTITLED = "Untitled"


@dc.dataclass(slots=True, eq=False)
class Section:
    """A configured folder: the unit of routing, style, and authorization.

    Attributes
    ----------
    slug : str
        URL segment of this section; empty for the root.
    path : str
        ``/``-rooted URL path, unique across the tree.
    dir_path : Path
        Source directory on disk.
    config : SectionConfig
        Parsed ``config.toml`` contents.
    style : ResolvedStyle
        Effective style after inheritance.
    protected : bool
        True when this section or any ancestor declares a password.
    hidden : bool
        True when the section should be left out of its parent's index.
    parent : Section or None
        Non-owning back-reference used for ancestor walks.
    children : list[Section]
        Child sections in folder-name order.
    """

    slug: str
    path: str
    dir_path: Path
    config: SectionConfig
    style: ResolvedStyle
    protected: bool
    hidden: bool
    parent: Section | None = dc.field(default=None, repr=False)
    children: list[Section] = dc.field(default_factory=list, repr=False)

    @property
    def title(self) -> str:
        """Return the section title."""
        return self.config.title

    @property
    def has_password(self) -> bool:
        """Return True when this section itself declares a password."""
        return bool(self.config.password)

    def lineage(self) -> cabc.Iterator[Section]:
        """Yield this section followed by each ancestor up to the root."""
        current: Section | None = self
        while current is not None:
            yield current
            current = current.parent


@dc.dataclass(slots=True)
class ScanResult:
    """Root section plus a flat index of every section by URL path."""

    root: Section
    sections: dict[str, Section]

    def get(self, url_path: str) -> Section | None:
        """Return the section served at ``url_path``, if any."""
        return self.sections.get(url_path)

    def owning_section(self, url_path: str) -> Section:
        """Return the nearest section enclosing a non-section request path.

        ``/work/slides/deck.pdf`` is owned by ``/work/slides`` when that is a
        section, else by ``/work``, falling back to the root.
        """
        parts = [part for part in url_path.split("/") if part]
        while parts:
            parts.pop()
            candidate = "/" + "/".join(parts) if parts else ROOT_PATH
            section = self.sections.get(candidate)
            if section is not None:
                return section
        return self.root


def strip_numeric_prefix(name: str) -> str:
    """Remove a leading ``digits-`` ordering prefix from a folder name.

    Examples
    --------
    >>> strip_numeric_prefix("01-work")
    'work'
    >>> strip_numeric_prefix("2024-archive")
    'archive'
    >>> strip_numeric_prefix("work-01")
    'work-01'
    """
    return NUMERIC_PREFIX_PATTERN.sub("", name, count=1)


def child_path(parent_path: str, slug: str) -> str:
    """Join a child slug onto its parent's URL path."""
    return f"{parent_path.rstrip('/')}/{slug}"


def scan_content(content_dir: Path, get_defaults: ThemeDefaultsLookup) -> ScanResult:
    """Scan ``content_dir`` into a :class:`ScanResult`.

    Parameters
    ----------
    content_dir : Path
        Root content directory; it becomes the section at ``/`` whether or not
        it holds a ``config.toml``.
    get_defaults : Callable[[str], ThemeDefaults]
        Lookup returning a theme's built-in style defaults.

    Returns
    -------
    ScanResult
        The section tree and its path index.

    Raises
    ------
    ConfigParseError
        If any section's ``config.toml`` is malformed.
    """
    sections: dict[str, Section] = {}
    root = _scan_directory(
        content_dir,
        url_path=ROOT_PATH,
        parent=None,
        sections=sections,
        get_defaults=get_defaults,
    )
    logger.debug("Scanned %d sections from %s", len(sections), content_dir)
    return ScanResult(root=root, sections=sections)


def _scan_directory(
    directory: Path,
    *,
    url_path: str,
    parent: Section | None,
    sections: dict[str, Section],
    get_defaults: ThemeDefaultsLookup,
) -> Section:
    """Build the section for ``directory`` and recurse into configured children."""
    slug = "" if url_path == ROOT_PATH else url_path.rsplit("/", 1)[-1]
    config_path = directory / SECTION_CONFIG_FILENAME
    if config_path.is_file():
        config = load_section_config(config_path, fallback_title=slug or ROOT_TITLE)
    else:
        config = parse_section_config({"title": UNTITLED}, fallback_title=UNTITLED)

    style = resolve_style(
        config, parent.style if parent is not None else None, get_defaults
    )
    section = Section(
        slug=slug,
        path=url_path,
        dir_path=directory,
        config=config,
        style=style,
        protected=bool(config.password) or (parent is not None and parent.protected),
        hidden=config.hidden,
        parent=parent,
    )
    sections[url_path] = section

    for entry_name in _list_child_directories(directory):
        child_slug = strip_numeric_prefix(entry_name)
        if url_path == ROOT_PATH and child_slug == RESERVED_ASSETS_SLUG:
            logger.warning(
                "Content directory '/%s' conflicts with the theme asset route "
                "/assets/*; it will be shadowed.",
                RESERVED_ASSETS_SLUG,
            )
        child_dir = directory / entry_name
        if not (child_dir / SECTION_CONFIG_FILENAME).is_file():
            continue
        path = child_path(url_path, child_slug)
        if path in sections:
            logger.warning(
                "Skipping '%s': another folder already serves %s", child_dir, path
            )
            continue
        child = _scan_directory(
            child_dir,
            url_path=path,
            parent=section,
            sections=sections,
            get_defaults=get_defaults,
        )
        section.children.append(child)

    return section


def _list_child_directories(directory: Path) -> list[str]:
    """Return sorted, non-hidden subdirectory names, or [] when unreadable."""
    try:
        with os.scandir(directory) as entries:
            names = [
                entry.name
                for entry in entries
                if not entry.name.startswith(".") and entry.is_dir()
            ]
    except OSError as exc:
        logger.warning("Cannot read content directory '%s': %s", directory, exc)
        return []
    return sorted(names)


__all__ = [
    "ROOT_PATH",
    "ScanResult",
    "Section",
    "child_path",
    "scan_content",
    "strip_numeric_prefix",
]
