"""Shared fixtures for building content trees and themes under ``tmp_path``."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import pytest

from linkshare.config import SiteSettings

REPO_THEMES_DIR = Path(__file__).resolve().parents[1] / "themes"

MINIMAL_PAGE = (
    '<main data-title="{{ title }}" data-dark="{{ dark }}" '
    'data-auto="{{ auto_dark | default(false) }}" data-dir="{{ dir }}" '
    'data-accent="{{ accent_color }}">'
    "{% if parent %}<a class=\"parent\" href=\"{{ parent.path }}\">"
    "{{ t('Back to {title}', title=parent.title) }}</a>{% endif %}"
    "{% if show_nav %}<nav></nav>{% endif %}"
    "{% if logo %}<img class=\"logo\" src=\"{{ logo }}\">{% endif %}"
    '<div class="children">{{ children_html }}</div>'
    '<div class="items">{{ items_html }}</div>'
    "</main>"
)
MINIMAL_LOGIN = (
    '<form class="login" action="{{ path }}" data-title="{{ title }}">'
    '{% if error %}<p class="error">{{ error }}</p>{% endif %}'
    '<button>{{ t("Unlock") }}</button></form>'
)
MINIMAL_SECTION = (
    '<a class="card" href="{{ path }}" data-locked="{{ has_password }}">'
    "{{ title }}</a>"
)
MINIMAL_ITEMS = {
    "link": '<a class="item link" href="{{ url }}">{{ title }}</a>',
    "text": '<div class="item text">{{ content_html | safe }}</div>',
    "code": '<pre class="item code"><code class="{{ language_class }}">'
    "{{ content }}</code></pre>",
    "embed": '<iframe class="item embed" src="{{ url }}" height="{{ height }}">'
    "</iframe>",
    "file": '<a class="item file" href="{{ file_url }}" download="{{ filename }}">'
    "{{ title }}</a>",
}


def write_section(content_dir: Path, relative: str, body: str = "") -> Path:
    """Write ``config.toml`` for the folder ``relative`` below ``content_dir``."""
    folder = content_dir / relative if relative else content_dir
    folder.mkdir(parents=True, exist_ok=True)
    config = folder / "config.toml"
    config.write_text(body.strip() + "\n", encoding="utf-8")
    return folder


def write_theme(
    themes_dir: Path,
    name: str,
    *,
    toml: str = "",
    page: str | None = MINIMAL_PAGE,
    login: str | None = MINIMAL_LOGIN,
    section: str | None = MINIMAL_SECTION,
    items: typ.Mapping[str, str] | None = None,
    css: str | None = None,
) -> Path:
    """Write a theme package; pass ``None`` to leave a template out."""
    theme_dir = themes_dir / name
    (theme_dir / "items").mkdir(parents=True, exist_ok=True)
    (theme_dir / "theme.toml").write_text(
        (toml.strip() or f'name = "{name}"') + "\n", encoding="utf-8"
    )
    for filename, template in (
        ("page.html", page),
        ("login.html", login),
        ("section.html", section),
    ):
        if template is not None:
            (theme_dir / filename).write_text(template, encoding="utf-8")
    for item_type, template in (MINIMAL_ITEMS if items is None else items).items():
        (theme_dir / "items" / f"{item_type}.html").write_text(
            template, encoding="utf-8"
        )
    if css is not None:
        (theme_dir / "style.css").write_text(css, encoding="utf-8")
    return theme_dir


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def themes_dir(tmp_path: Path) -> Path:
    path = tmp_path / "themes"
    write_theme(path, "default")
    return path


@pytest.fixture
def locales_dir(tmp_path: Path) -> Path:
    path = tmp_path / "locales"
    path.mkdir()
    return path


@pytest.fixture
def site_settings(
    content_dir: Path, themes_dir: Path, locales_dir: Path
) -> SiteSettings:
    return SiteSettings(
        content_dir=content_dir,
        themes_dir=themes_dir,
        locales_dir=locales_dir,
        live_reload=True,
        auth_secret="test-secret",
    )
