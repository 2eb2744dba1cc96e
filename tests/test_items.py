"""Unit tests for item contexts, embed URLs and asset URL resolution."""

from __future__ import annotations

import pytest

from linkshare.config import ItemConfig, ItemType
from linkshare.renderer import (
    ContentRenderer,
    build_item_context,
    canonical_language,
    resolve_asset_url,
    transform_embed_url,
)
from linkshare.renderer.items import ITEM_CONTEXT_BUILDERS


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://docs.google.com/document/d/XYZ/edit?usp=sharing",
            "https://docs.google.com/document/d/XYZ/preview",
        ),
        (
            "https://docs.google.com/spreadsheets/d/S1/edit#gid=0",
            "https://docs.google.com/spreadsheets/d/S1/preview",
        ),
        (
            "https://docs.google.com/presentation/d/P9/edit",
            "https://docs.google.com/presentation/d/P9/embed"
            "?start=false&loop=false&delayms=3000",
        ),
        (
            "https://docs.google.com/document/d/e/2PACX/pub",
            "https://docs.google.com/document/d/e/2PACX/pub",
        ),
        (
            "https://docs.google.com/presentation/d/P9/embed?start=true",
            "https://docs.google.com/presentation/d/P9/embed?start=true",
        ),
        (
            "https://docs.google.com/forms/d/F1/viewform",
            "https://docs.google.com/forms/d/F1/viewform",
        ),
        ("https://www.youtube.com/embed/abc", "https://www.youtube.com/embed/abc"),
        ("not a url", "not a url"),
        ("http://[::1", "http://[::1"),
    ],
)
def test_transform_embed_url(url: str, expected: str) -> None:
    assert transform_embed_url(url) == expected


@pytest.mark.parametrize(
    ("asset", "section_path", "expected"),
    [
        ("deck.pdf", "/work", "/work/deck.pdf"),
        ("slides/deck.pdf", "/work/", "/work/slides/deck.pdf"),
        ("../secret.txt", "/work", "/work/secret.txt"),
        ("a/../../../b.txt", "/work", "/work/b.txt"),
        ("/etc/passwd", "/work", "/work/etc/passwd"),
        ("logo.png", "/", "/logo.png"),
        ("https://cdn.example.com/a.png", "/work", "https://cdn.example.com/a.png"),
    ],
)
def test_resolve_asset_url_stays_inside_section(
    asset: str, section_path: str, expected: str
) -> None:
    assert resolve_asset_url(asset, section_path) == expected


def test_every_item_type_has_a_builder() -> None:
    assert set(ITEM_CONTEXT_BUILDERS) == set(ItemType)


def test_base_fields_and_defaults() -> None:
    item = ItemConfig(title="Deck", type="file", file="deck.pdf")
    context = build_item_context(item, ItemType.FILE, "/work", ContentRenderer())
    assert context["url"] == "#"
    assert context["file_url"] == "/work/deck.pdf"
    assert context["filename"] == "deck.pdf"
    assert context["height"] == 400
    assert context["language_class"] == ""
    assert context["icon"] == ""


def test_file_url_falls_back_to_url() -> None:
    item = ItemConfig(title="Video", type="video", url="https://example.com/v.mp4")
    context = build_item_context(item, ItemType.VIDEO, "/", ContentRenderer())
    assert context["file_url"] == "https://example.com/v.mp4"


def test_embed_context_transforms_url() -> None:
    item = ItemConfig(
        title="Doc",
        type="embed",
        url="https://docs.google.com/document/d/XYZ/edit",
        height=600,
    )
    context = build_item_context(item, ItemType.EMBED, "/", ContentRenderer())
    assert context["url"] == "https://docs.google.com/document/d/XYZ/preview"
    assert context["height"] == 600


def test_code_context_canonicalizes_language() -> None:
    item = ItemConfig(title="Snippet", type="code", content="print(1)", language="py")
    context = build_item_context(item, ItemType.CODE, "/", ContentRenderer())
    assert context["language_class"] == "language-python"
    assert context["language"] == "py"


def test_unknown_language_is_kept() -> None:
    assert canonical_language("no-such-language") == "no-such-language"
    assert ContentRenderer.language_class("  ") == ""


def test_text_context_renders_markdown() -> None:
    item = ItemConfig(
        title="Notes",
        type="text",
        content="Hello **world**\n\n- one\n- two\n\n```python\nx = 1\n```\n",
    )
    context = build_item_context(item, ItemType.TEXT, "/", ContentRenderer())
    html = context["content_html"]
    assert "<strong>world</strong>" in html
    assert "<li>one</li>" in html
    assert 'class="language-python"' in html
    assert context["content"].startswith("Hello")


def test_blank_markdown_renders_empty() -> None:
    assert ContentRenderer().markdown("   \n") == ""
    assert ContentRenderer().markdown(None) == ""
