"""Request-level core of a linkshare site.

:class:`LinkShareSite` answers GET and POST requests for URL paths with
transport-neutral :class:`SiteResponse` values; any HTTP framework can map
them onto its own response objects. The site owns the :class:`SiteState`
bundle (section tree, themes, catalogs): in production it is built once, in
live reload mode it is rebuilt for every request so edits to content, themes
and catalogs show up immediately.

Examples
--------
>>> from linkshare.config import load_site_settings
>>> from linkshare.site import LinkShareSite
>>> site = LinkShareSite(load_site_settings())  # doctest: +SKIP
>>> site.handle_get("/work", auth_cookie=None).status  # doctest: +SKIP
200
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ
from pathlib import Path

from ._constants import (
    AUTH_COOKIE_NAME,
    RESERVED_ASSETS_SLUG,
    SECTION_CONFIG_FILENAME,
)
from .auth import (
    AuthCookieCodec,
    check_password,
    find_locking_section,
    get_or_create_secret,
    is_authorized,
)
from .i18n import create_translator, load_catalogs
from .renderer import PageRenderer
from .scanner import ROOT_PATH, scan_content
from .themes import load_themes

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config import SiteSettings
    from .i18n import Catalogs
    from .scanner import ScanResult, Section
    from .themes import ThemeRegistry

logger = logging.getLogger("linkshare.site")

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
ASSET_PREFIX = f"/{RESERVED_ASSETS_SLUG}/"
THEME_ASSETS_DIRNAME = "assets"
BLOCKED_SUFFIXES = (".toml",)


class ResponseKind(enum.StrEnum):
    """Outcome categories of a site request."""

    OK = "ok"
    REDIRECT = "redirect"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"


@dc.dataclass(frozen=True, slots=True)
class SiteResponse:
    """Transport-neutral response.

    Attributes
    ----------
    kind : ResponseKind
        Outcome category.
    status : int
        HTTP status code to send.
    body : str
        Response body; empty for redirects and file responses.
    content_type : str or None
        Media type of ``body``; ``None`` when streaming ``file_path``.
    file_path : Path or None
        File to stream instead of ``body``.
    location : str or None
        Redirect target.
    set_cookie : str or None
        New value of the auth cookie; ``""`` clears it, ``None`` leaves it.
    """

    kind: ResponseKind
    status: int
    body: str = ""
    content_type: str | None = HTML_CONTENT_TYPE
    file_path: Path | None = None
    location: str | None = None
    set_cookie: str | None = None

    @classmethod
    def html(
        cls, body: str, *, status: int = 200, kind: ResponseKind = ResponseKind.OK
    ) -> SiteResponse:
        """Return an HTML response."""
        return cls(kind=kind, status=status, body=body)

    @classmethod
    def file(cls, path: Path) -> SiteResponse:
        """Return a response streaming ``path``."""
        return cls(kind=ResponseKind.OK, status=200, content_type=None, file_path=path)

    @classmethod
    def redirect(cls, location: str, *, set_cookie: str | None = None) -> SiteResponse:
        """Return a ``303 See Other`` redirect."""
        return cls(
            kind=ResponseKind.REDIRECT,
            status=303,
            content_type=None,
            location=location,
            set_cookie=set_cookie,
        )

    @classmethod
    def plain(cls, body: str, *, status: int, kind: ResponseKind) -> SiteResponse:
        """Return a plain-text response."""
        return cls(kind=kind, status=status, body=body, content_type=TEXT_CONTENT_TYPE)


@dc.dataclass(frozen=True, slots=True)
class SiteState:
    """Immutable snapshot of everything a request is answered from."""

    scan: ScanResult
    themes: ThemeRegistry
    catalogs: Catalogs
    renderer: PageRenderer


def build_state(settings: SiteSettings) -> SiteState:
    """Load themes, scan the content tree and load catalogs.

    Raises
    ------
    ConfigParseError
        If any section's ``config.toml`` is malformed.
    """
    themes = load_themes(settings.themes_dir)
    scan = scan_content(settings.content_dir, themes.defaults_for)
    catalogs = load_catalogs(settings.locales_dir)
    return SiteState(
        scan=scan,
        themes=themes,
        catalogs=catalogs,
        renderer=PageRenderer(themes, catalogs),
    )


def normalize_url_path(url_path: str) -> str:
    """Return ``url_path`` with a leading slash and without a trailing one.

    Examples
    --------
    >>> normalize_url_path("work/")
    '/work'
    >>> normalize_url_path("")
    '/'
    """
    stripped = url_path.strip("/")
    return f"/{stripped}" if stripped else ROOT_PATH


class LinkShareSite:
    """Answer requests against a content tree, its themes and catalogs.

    Parameters
    ----------
    settings : SiteSettings
        Filesystem roots and runtime mode.
    secret : str, optional
        Cookie signing secret. Defaults to ``settings.auth_secret``, then to
        :func:`~linkshare.auth.get_or_create_secret` under ``project_root``.
    project_root : Path, optional
        Directory holding ``.linkshare-secret``; defaults to the working
        directory.
    """

    cookie_name = AUTH_COOKIE_NAME

    def __init__(
        self,
        settings: SiteSettings,
        *,
        secret: str | None = None,
        project_root: Path | None = None,
    ) -> None:
        self.settings = settings
        resolved_secret = (
            secret
            or settings.auth_secret
            or get_or_create_secret(project_root or Path.cwd())
        )
        self.cookies = AuthCookieCodec(resolved_secret)
        self._state: SiteState | None = None

    def state(self) -> SiteState:
        """Return the current state, rebuilding it in live reload mode."""
        if self.settings.live_reload or self._state is None:
            self._state = build_state(self.settings)
        return self._state

    def handle_get(self, url_path: str, auth_cookie: str | None) -> SiteResponse:
        """Answer a GET request for ``url_path``."""
        if url_path.startswith(ASSET_PREFIX):
            return self._serve_theme_asset(url_path[len(ASSET_PREFIX) :])

        state = self.state()
        renderer = state.renderer
        path = normalize_url_path(url_path)
        authorized = self.cookies.authorized_paths(auth_cookie)

        section = state.scan.get(path)
        if section is not None:
            if not is_authorized(section, authorized):
                locker = find_locking_section(section, authorized)
                logger.debug("%s is locked by %s", path, locker.path)
                return SiteResponse.html(
                    renderer.render_login(locker), kind=ResponseKind.UNAUTHORIZED
                )
            return SiteResponse.html(renderer.render_page(section))

        if path.endswith(BLOCKED_SUFFIXES):
            return self._not_found(renderer)

        owner = state.scan.owning_section(path)
        file_path = self._content_file(owner, path)
        if file_path is None:
            return self._not_found(renderer)
        if not is_authorized(owner, authorized):
            return SiteResponse.plain(
                "Unauthorized", status=401, kind=ResponseKind.UNAUTHORIZED
            )
        return SiteResponse.file(file_path)

    def handle_post(
        self,
        url_path: str,
        form: cabc.Mapping[str, str] | None,
        auth_cookie: str | None,
    ) -> SiteResponse:
        """Answer a login or logout form posted to a section path."""
        state = self.state()
        renderer = state.renderer
        path = normalize_url_path(url_path)
        section = state.scan.get(path)
        if section is None:
            return self._not_found(renderer)

        form = form or {}
        if form.get("action") == "logout":
            logger.debug("Logging out from %s", path)
            return SiteResponse.redirect(path, set_cookie="")

        if not section.has_password:
            return SiteResponse.redirect(path)

        if check_password(section, form.get("password")):
            logger.info("Unlocked %s", path)
            return SiteResponse.redirect(
                path, set_cookie=self.cookies.add_path(auth_cookie, path)
            )

        logger.info("Rejected password for %s", path)
        error = self._incorrect_password(section, state)
        return SiteResponse.html(
            renderer.render_login(section, error=error),
            status=401,
            kind=ResponseKind.UNAUTHORIZED,
        )

    @staticmethod
    def _incorrect_password(section: Section, state: SiteState) -> str:
        translate = create_translator(state.catalogs, section.style.locale)
        return translate("Incorrect password")

    @staticmethod
    def _not_found(renderer: PageRenderer) -> SiteResponse:
        return SiteResponse.html(
            renderer.render_not_found(), status=404, kind=ResponseKind.NOT_FOUND
        )

    @staticmethod
    def _content_file(owner: Section, url_path: str) -> Path | None:
        """Return the file ``url_path`` names inside ``owner``'s folder, if any.

        The part of ``url_path`` below the owning section is looked up in that
        section's folder, so ``/work/deck.pdf`` finds ``02-work/deck.pdf``.
        Dot segments, dot-files, and files inside another section's folder
        are never served.
        """
        prefix = "" if owner.path == ROOT_PATH else owner.path
        relative = url_path[len(prefix) :].strip("/")
        parts = relative.split("/")
        if not relative or any(not part or part.startswith(".") for part in parts):
            return None
        try:
            root = owner.dir_path.resolve()
            candidate = (root / relative).resolve()
        except (ValueError, OSError):
            logger.debug("Rejected unresolvable content path %r", url_path)
            return None
        if not candidate.is_relative_to(root):
            logger.warning("Rejected path outside %s: %s", owner.path, url_path)
            return None
        if not candidate.is_file():
            return None
        for folder in candidate.parents:
            if folder == root:
                break
            if (folder / SECTION_CONFIG_FILENAME).is_file():
                return None
        return candidate

    def _serve_theme_asset(self, rest: str) -> SiteResponse:
        """Serve ``<theme>/<file>`` from the theme's ``assets`` directory."""
        theme_name, _, relative = rest.partition("/")
        not_found = SiteResponse.plain(
            "Not Found", status=404, kind=ResponseKind.NOT_FOUND
        )
        if not theme_name or not relative or theme_name.startswith("."):
            return not_found
        try:
            assets_root = (
                self.settings.themes_dir / theme_name / THEME_ASSETS_DIRNAME
            ).resolve()
            candidate = (assets_root / relative).resolve()
        except (ValueError, OSError):
            return not_found
        if not candidate.is_relative_to(assets_root) or not candidate.is_file():
            return not_found
        return SiteResponse.file(candidate)


__all__ = [
    "LinkShareSite",
    "ResponseKind",
    "SiteResponse",
    "SiteState",
    "build_state",
    "normalize_url_path",
]
