"""Cyclopts CLI entrypoint for inspecting and rendering a linkshare site offline.

The ``linkshare`` console script renders a section to HTML without an HTTP
server, prints the section tree the scanner builds from a content directory,
and lists the themes that load successfully. Directory options fall back to
the same environment variables the site uses (``CONTENT_DIR``,
``THEMES_DIR``, ``LOCALES_DIR``).

Examples
--------
Render the ``/work`` section into a file:

>>> from linkshare.cli import app
>>> app.run(["render", "/work", "--output", "work.html"])  # doctest: +SKIP

Print the section tree:

>>> from linkshare.cli import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .auth import is_authorized
from .config import SiteSettings, load_site_settings
from .site import build_state, normalize_url_path
from .themes import load_themes

if typ.TYPE_CHECKING:
    from .scanner import Section

app = App(name="linkshare", config=cyclopts.config.Env("LINKSHARE_", command=False))  # type: ignore[unknown-argument]

ContentDirOption = typ.Annotated[
    Path | None, Parameter(help="Content directory", env_var="CONTENT_DIR")
]
ThemesDirOption = typ.Annotated[
    Path | None, Parameter(help="Themes directory", env_var="THEMES_DIR")
]
LocalesDirOption = typ.Annotated[
    Path | None, Parameter(help="Locales directory", env_var="LOCALES_DIR")
]
VerboseOption = typ.Annotated[bool, Parameter(help="Log debug messages")]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _settings(
    content_dir: Path | None,
    themes_dir: Path | None,
    locales_dir: Path | None,
) -> SiteSettings:
    """Return environment settings with command-line overrides applied."""
    settings = load_site_settings()
    if content_dir is not None:
        settings.content_dir = content_dir.resolve()
    if themes_dir is not None:
        settings.themes_dir = themes_dir.resolve()
    if locales_dir is not None:
        settings.locales_dir = locales_dir.resolve()
    return settings


def format_tree(root: Section) -> list[str]:
    """Return one line per section, indented by depth, in scan order.

    Locked sections are marked ``[password]`` where the password is declared
    and ``[protected]`` below it; hidden sections are marked ``[hidden]``.
    """
    lines: list[str] = []

    def _walk(section: Section, depth: int) -> None:
        flags = []
        if section.has_password:
            flags.append("[password]")
        elif section.protected:
            flags.append("[protected]")
        if section.hidden:
            flags.append("[hidden]")
        suffix = f" {' '.join(flags)}" if flags else ""
        lines.append(
            f"{'  ' * depth}{section.path}  {section.title} "
            f"({section.style.theme}){suffix}"
        )
        for child in section.children:
            _walk(child, depth + 1)

    _walk(root, 0)
    return lines


@app.command(help="Render one section to HTML without starting a server.")
def render(
    path: str = "/",
    *,
    output: typ.Annotated[
        Path | None, Parameter(help="Write HTML here instead of stdout")
    ] = None,
    unlock: typ.Annotated[
        bool, Parameter(help="Render protected sections instead of their login page")
    ] = False,
    content_dir: ContentDirOption = None,
    themes_dir: ThemesDirOption = None,
    locales_dir: LocalesDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Render the section served at ``path``.

    Parameters
    ----------
    path : str, optional
        URL path of the section (default ``/``).
    output : Path or None, optional
        Destination file; when ``None`` the document is printed.
    unlock : bool, optional
        Treat every password gate as open.

    Raises
    ------
    ValueError
        If no section is served at ``path``.
    """
    _configure_logging(verbose)
    state = build_state(_settings(content_dir, themes_dir, locales_dir))
    section = state.scan.get(normalize_url_path(path))
    if section is None:
        msg = f"No section is served at {path}"
        raise ValueError(msg)

    if unlock or is_authorized(section, set()):
        html = state.renderer.render_page(section)
    else:
        html = state.renderer.render_login(section)

    if output is None:
        print(html, end="")
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    print(f"wrote {output}")


@app.command(help="Print the section tree built from the content directory.")
def tree(
    *,
    content_dir: ContentDirOption = None,
    themes_dir: ThemesDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print every section with its path, title, theme and gate flags."""
    _configure_logging(verbose)
    state = build_state(_settings(content_dir, themes_dir, None))
    for line in format_tree(state.scan.root):
        print(line)


@app.command(help="List the themes that load from the themes directory.")
def themes(
    *,
    themes_dir: ThemesDirOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print each loadable theme with its default font, color and dark mode."""
    _configure_logging(verbose)
    settings = _settings(None, themes_dir, None)
    registry = load_themes(settings.themes_dir)
    if not registry:
        print(f"no themes found in {settings.themes_dir}")
        return
    for key, theme in registry.items():
        defaults = theme.defaults
        print(
            f"{key}: {theme.name} "
            f"(font={defaults.font}, color={defaults.color}, dark={defaults.dark})"
        )


def main() -> None:
    """Invoke the Cyclopts application behind the ``linkshare`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
