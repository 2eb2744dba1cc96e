"""Unit tests for walking a content directory into sections."""

from __future__ import annotations

import logging
import os
import typing as typ
from pathlib import Path

import pytest
from conftest import write_section

from linkshare.config import ConfigParseError, ThemeDefaults
from linkshare.scanner import (
    ScanResult,
    child_path,
    scan_content,
    strip_numeric_prefix,
)


def _scan(content_dir: Path) -> ScanResult:
    return scan_content(content_dir, lambda _: ThemeDefaults())


def test_paths_follow_folder_names(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "02-work", 'title = "Work"')
    write_section(content_dir, "02-work/projects", "")
    write_section(content_dir, "01-about", 'title = "About"')

    result = _scan(content_dir)

    assert sorted(result.sections) == ["/", "/about", "/work", "/work/projects"]
    assert [child.path for child in result.root.children] == ["/about", "/work"]
    for section in result.sections.values():
        if section.parent is None:
            assert section.path == "/"
        else:
            assert section.path == child_path(section.parent.path, section.slug)


def test_missing_title_uses_slug_and_root_defaults(content_dir: Path) -> None:
    write_section(content_dir, "", "")
    write_section(content_dir, "03-notes", 'description = "Scratch"')
    result = _scan(content_dir)
    assert result.root.title == "Home"
    assert result.sections["/notes"].title == "notes"


def test_root_without_config_is_untitled(content_dir: Path) -> None:
    write_section(content_dir, "docs", 'title = "Docs"')
    result = _scan(content_dir)
    assert result.root.title == "Untitled"
    assert result.get("/docs") is not None


def test_folders_without_config_and_dot_folders_are_skipped(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    (content_dir / "images").mkdir()
    write_section(content_dir, ".drafts", 'title = "Drafts"')
    write_section(content_dir, "images/nested", 'title = "Nested"')
    result = _scan(content_dir)
    assert sorted(result.sections) == ["/"]


def test_protection_is_monotonic_and_ignores_inherit(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "work", 'title = "Work"\npassword = "pw"')
    write_section(content_dir, "work/projects", 'title = "Projects"\ninherit = false')
    write_section(content_dir, "work/projects/alpha", 'title = "Alpha"')
    write_section(content_dir, "public", 'title = "Public"')

    result = _scan(content_dir)

    assert result.sections["/work"].protected
    assert result.sections["/work/projects"].protected
    assert result.sections["/work/projects/alpha"].protected
    assert not result.sections["/public"].protected
    assert not result.root.protected
    for section in result.sections.values():
        for child in section.children:
            assert not section.protected or child.protected


def test_malformed_config_aborts_scan(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "broken", "title = = nope")
    with pytest.raises(ConfigParseError) as excinfo:
        _scan(content_dir)
    assert excinfo.value.path == content_dir / "broken" / "config.toml"


def test_duplicate_slug_keeps_first_folder(
    content_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "01-work", 'title = "First"')
    write_section(content_dir, "02-work", 'title = "Second"')
    with caplog.at_level(logging.WARNING, logger="linkshare.scanner"):
        result = _scan(content_dir)
    assert result.sections["/work"].title == "First"
    assert len(result.root.children) == 1
    assert "already serves /work" in caplog.text


def test_assets_folder_at_root_logs_warning(
    content_dir: Path, caplog: pytest.LogCaptureFixture
) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "assets", 'title = "Assets"')
    with caplog.at_level(logging.WARNING, logger="linkshare.scanner"):
        result = _scan(content_dir)
    assert "/assets" in result.sections
    assert "theme asset route" in caplog.text


def test_unreadable_directory_has_no_children(
    content_dir: Path,
    caplog: pytest.LogCaptureFixture,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    write_section(content_dir, "", 'title = "Home"')
    locked = write_section(content_dir, "locked", 'title = "Locked"')
    write_section(content_dir, "locked/inner", 'title = "Inner"')
    real_scandir = os.scandir

    def _scandir(path: os.PathLike[str] | str) -> typ.Any:
        if Path(path) == locked:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr("linkshare.scanner.os.scandir", _scandir)
    with caplog.at_level(logging.WARNING, logger="linkshare.scanner"):
        result = _scan(content_dir)
    assert result.sections["/locked"].children == []
    assert "/locked/inner" not in result.sections
    assert "/locked" in [child.path for child in result.root.children]
    assert "Cannot read content directory" in caplog.text


def test_hidden_sections_are_still_registered(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "secret-page", 'title = "Hidden"\nhidden = true')
    result = _scan(content_dir)
    section = result.sections["/secret-page"]
    assert section.hidden
    assert section in result.root.children


def test_owning_section_walks_up_to_nearest_section(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "work", 'title = "Work"')
    result = _scan(content_dir)
    assert result.owning_section("/work/slides/deck.pdf").path == "/work"
    assert result.owning_section("/work/deck.pdf").path == "/work"
    assert result.owning_section("/favicon.ico").path == "/"
    assert result.owning_section("/missing/file.txt").path == "/"


def test_lineage_runs_from_section_to_root(content_dir: Path) -> None:
    write_section(content_dir, "", 'title = "Home"')
    write_section(content_dir, "a/b", 'title = "B"')
    write_section(content_dir, "a", 'title = "A"')
    result = _scan(content_dir)
    lineage = [node.path for node in result.sections["/a/b"].lineage()]
    assert lineage == ["/a/b", "/a", "/"]


@pytest.mark.parametrize(
    ("name", "expected"),
    [("01-work", "work"), ("2024-archive", "archive"), ("work-01", "work-01")],
)
def test_strip_numeric_prefix(name: str, expected: str) -> None:
    assert strip_numeric_prefix(name) == expected
