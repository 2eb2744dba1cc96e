"""Request-level tests for GET and POST handling."""

from __future__ import annotations

from pathlib import Path

import pytest
from bs4 import BeautifulSoup
from conftest import write_section

from linkshare.config import ConfigParseError, SiteSettings
from linkshare.site import (
    LinkShareSite,
    ResponseKind,
    normalize_url_path,
)


@pytest.fixture
def site(site_settings: SiteSettings, content_dir: Path) -> LinkShareSite:
    write_section(content_dir, "", 'title = "Home"')
    work = write_section(content_dir, "work", 'title = "Work"\npassword = "outer"')
    (work / "deck.pdf").write_bytes(b"%PDF")
    write_section(content_dir, "work/projects", 'title = "Projects"')
    private = write_section(
        content_dir, "work/private", 'title = "Private"\npassword = "inner"'
    )
    (private / "notes.txt").write_text("secret", encoding="utf-8")
    (content_dir / "public.txt").write_text("hello", encoding="utf-8")
    return LinkShareSite(site_settings)


def _unlock(site: LinkShareSite, path: str, password: str, cookie: str | None) -> str:
    response = site.handle_post(path, {"password": password}, cookie)
    assert response.kind is ResponseKind.REDIRECT
    assert response.set_cookie
    return response.set_cookie


def test_public_section_renders(site: LinkShareSite) -> None:
    response = site.handle_get("/", None)
    assert response.kind is ResponseKind.OK
    assert response.status == 200
    assert response.content_type == "text/html; charset=utf-8"
    assert BeautifulSoup(response.body, "html.parser").title.string == "Home"


def test_locked_section_shows_outermost_login(site: LinkShareSite) -> None:
    response = site.handle_get("/work/private", None)
    assert response.kind is ResponseKind.UNAUTHORIZED
    assert response.status == 200
    form = BeautifulSoup(response.body, "html.parser").form
    assert form["action"] == "/work"


def test_unlocking_walks_down_the_gates(site: LinkShareSite) -> None:
    cookie = _unlock(site, "/work", "outer", None)
    assert site.handle_get("/work/projects", cookie).kind is ResponseKind.OK

    inner = site.handle_get("/work/private", cookie)
    assert inner.kind is ResponseKind.UNAUTHORIZED
    assert BeautifulSoup(inner.body, "html.parser").form["action"] == "/work/private"

    cookie = _unlock(site, "/work/private", "inner", cookie)
    assert site.handle_get("/work/private", cookie).kind is ResponseKind.OK


def test_wrong_password_rerenders_login_with_error(site: LinkShareSite) -> None:
    response = site.handle_post("/work", {"password": "nope"}, None)
    assert response.kind is ResponseKind.UNAUTHORIZED
    assert response.status == 401
    assert response.set_cookie is None
    soup = BeautifulSoup(response.body, "html.parser")
    assert soup.select_one("p.error").string == "Incorrect password"


def test_wrong_password_error_is_translated(
    site: LinkShareSite, content_dir: Path, locales_dir: Path
) -> None:
    write_section(content_dir, "", 'title = "Home"\nlocale = "de"')
    (locales_dir / "de.json").write_text(
        '{"Incorrect password": "Falsches Passwort"}', encoding="utf-8"
    )
    response = site.handle_post("/work", {"password": "nope"}, None)
    soup = BeautifulSoup(response.body, "html.parser")
    assert soup.select_one("p.error").string == "Falsches Passwort"


def test_post_to_unprotected_section_redirects(site: LinkShareSite) -> None:
    response = site.handle_post("/work/projects", {"password": "x"}, None)
    assert response.kind is ResponseKind.REDIRECT
    assert response.location == "/work/projects"
    assert response.set_cookie is None


def test_logout_clears_cookie(site: LinkShareSite) -> None:
    cookie = _unlock(site, "/work", "outer", None)
    response = site.handle_post("/work", {"action": "logout"}, cookie)
    assert response.kind is ResponseKind.REDIRECT
    assert response.status == 303
    assert response.set_cookie == ""
    assert site.handle_get("/work", "").kind is ResponseKind.UNAUTHORIZED


def test_post_to_unknown_path_is_not_found(site: LinkShareSite) -> None:
    response = site.handle_post("/nowhere", {"password": "x"}, None)
    assert response.kind is ResponseKind.NOT_FOUND
    assert response.status == 404


def test_content_files_are_gated_by_owning_section(site: LinkShareSite) -> None:
    public = site.handle_get("/public.txt", None)
    assert public.kind is ResponseKind.OK
    assert public.file_path is not None
    assert public.file_path.read_text(encoding="utf-8") == "hello"

    locked = site.handle_get("/work/deck.pdf", None)
    assert locked.kind is ResponseKind.UNAUTHORIZED
    assert locked.status == 401
    assert locked.body == "Unauthorized"

    cookie = _unlock(site, "/work", "outer", None)
    assert site.handle_get("/work/deck.pdf", cookie).kind is ResponseKind.OK
    assert site.handle_get("/work/private/notes.txt", cookie).status == 401


def test_config_files_are_never_served(site: LinkShareSite) -> None:
    response = site.handle_get("/config.toml", None)
    assert response.kind is ResponseKind.NOT_FOUND
    assert response.status == 404
    assert "Page Not Found" in response.body


def test_traversal_outside_content_is_not_found(
    site: LinkShareSite, tmp_path: Path
) -> None:
    (tmp_path / "outside.txt").write_text("nope", encoding="utf-8")
    response = site.handle_get("/../outside.txt", None)
    assert response.kind is ResponseKind.NOT_FOUND
    assert response.file_path is None


def test_missing_paths_render_not_found(site: LinkShareSite) -> None:
    response = site.handle_get("/missing", None)
    assert response.kind is ResponseKind.NOT_FOUND
    assert response.status == 404


def test_theme_assets_are_served_from_assets_directory(
    site: LinkShareSite, themes_dir: Path
) -> None:
    assets = themes_dir / "default" / "assets"
    assets.mkdir()
    (assets / "tailwind.css").write_text("body{}", encoding="utf-8")
    (themes_dir / "default" / "secret.txt").write_text("x", encoding="utf-8")

    response = site.handle_get("/assets/default/tailwind.css", None)
    assert response.kind is ResponseKind.OK
    assert response.file_path == (assets / "tailwind.css").resolve()

    for path in (
        "/assets/default/../secret.txt",
        "/assets/default/missing.css",
        "/assets/default",
        "/assets/../themes/default/theme.toml",
    ):
        assert site.handle_get(path, None).status == 404


def test_tampered_cookie_grants_nothing(site: LinkShareSite) -> None:
    cookie = _unlock(site, "/work", "outer", None)
    other = LinkShareSite(site.settings, secret="different")
    assert other.handle_get("/work", cookie).kind is ResponseKind.UNAUTHORIZED


def test_live_reload_picks_up_new_sections(
    site: LinkShareSite, content_dir: Path
) -> None:
    assert site.handle_get("/later", None).status == 404
    write_section(content_dir, "later", 'title = "Later"')
    assert site.handle_get("/later", None).status == 200


def test_production_mode_caches_state(
    site_settings: SiteSettings, content_dir: Path
) -> None:
    write_section(content_dir, "", 'title = "Home"')
    site_settings.live_reload = False
    site = LinkShareSite(site_settings)
    first = site.state()
    write_section(content_dir, "later", 'title = "Later"')
    assert site.state() is first
    assert site.handle_get("/later", None).status == 404


def test_malformed_config_propagates(
    site: LinkShareSite, content_dir: Path
) -> None:
    write_section(content_dir, "work/projects", "title = = broken")
    with pytest.raises(ConfigParseError):
        site.handle_get("/", None)


def test_secret_falls_back_to_project_file(
    site_settings: SiteSettings, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.delenv("AUTH_SECRET", raising=False)
    site_settings.auth_secret = None
    LinkShareSite(site_settings, project_root=tmp_path)
    assert (tmp_path / ".linkshare-secret").is_file()


@pytest.mark.parametrize(
    ("raw", "expected"), [("/", "/"), ("", "/"), ("/work/", "/work"), ("work", "/work")]
)
def test_normalize_url_path(raw: str, expected: str) -> None:
    assert normalize_url_path(raw) == expected


def test_files_in_numbered_folders_are_served_by_section_url(
    site_settings: SiteSettings, content_dir: Path
) -> None:
    write_section(content_dir, "", 'title = "Home"')
    work = write_section(content_dir, "02-work", 'title = "Work"\npassword = "x"')
    (work / "deck.pdf").write_bytes(b"%PDF")
    site = LinkShareSite(site_settings)

    locked = site.handle_get("/work/deck.pdf", None)
    assert locked.kind is ResponseKind.UNAUTHORIZED
    assert locked.status == 401

    assert site.handle_get("/02-work/deck.pdf", None).status == 404

    cookie = _unlock(site, "/work", "x", None)
    unlocked = site.handle_get("/work/deck.pdf", cookie)
    assert unlocked.kind is ResponseKind.OK
    assert unlocked.file_path == (work / "deck.pdf").resolve()


def test_files_of_nested_sections_need_their_own_gate(
    site: LinkShareSite, content_dir: Path
) -> None:
    cookie = _unlock(site, "/work", "outer", None)
    assert site.handle_get("/work/private/notes.txt", cookie).status == 401
    assert site.handle_get("/work/../work/private/notes.txt", cookie).status == 404
    assert site.handle_get("/work/.hidden", cookie).status == 404


@pytest.mark.parametrize(
    "path", ["/a\x00b.txt", "/work/a\x00b.pdf", "/assets/default/a\x00b.css"]
)
def test_null_bytes_in_paths_are_not_found(site: LinkShareSite, path: str) -> None:
    response = site.handle_get(path, None)
    assert response.kind is ResponseKind.NOT_FOUND
    assert response.status == 404
