from __future__ import annotations

import logging

import pytest

from publishing.discovery import (
    FrontMatterError,
    MissingFrontMatterError,
    discover_content,
    load_item,
    parse_front_matter,
)


def test_discovery_skips_template_files(site, settings):
    found = discover_content(settings.content_glob, settings.template_marker)

    assert [path.name for path in found] == ["demo.md"]
    assert all("_template" not in str(path) for path in found)


def test_discovery_recurses_and_sorts(site, settings):
    nested = site / "src" / "posts" / "2024" / "b.md"
    nested.parent.mkdir()
    nested.write_text("---\ntitle: B\nslug: b\n---\n", encoding="utf-8")

    found = discover_content(settings.content_glob)

    assert found == sorted(found)
    assert nested in found


def test_parse_front_matter_splits_body():
    metadata, body = parse_front_matter("---\ntitle: Hi\n---\n\n# Body\n")

    assert metadata == {"title": "Hi"}
    assert body == "# Body\n"


def test_parse_front_matter_without_block_returns_text():
    metadata, body = parse_front_matter("# Just markdown\n")

    assert metadata == {}
    assert body == "# Just markdown\n"


@pytest.mark.parametrize(
    "text",
    ["---\ntitle: open\n", "---\n- a\n- b\n---\n", "---\ntitle: [\n---\n"],
)
def test_parse_front_matter_rejects_bad_blocks(text):
    with pytest.raises(FrontMatterError):
        parse_front_matter(text, path="post.md")


def test_load_item_reads_fields(site):
    item = load_item(site / "src" / "posts" / "demo.md")

    assert item.title == "Demo Post"
    assert item.slug == "demo"
    assert item.description == "A short demo"
    assert item.home_image == "/assets/img/pic.png"
    assert item.body.startswith("Intro paragraph.")


def test_load_item_reports_missing_fields(tmp_path):
    post = tmp_path / "post.md"
    post.write_text("---\ntitle: No slug\n---\nBody\n", encoding="utf-8")

    with pytest.raises(MissingFrontMatterError) as excinfo:
        load_item(post)

    assert excinfo.value.missing == ("slug",)
    assert excinfo.value.path == post


def test_load_item_rejects_slug_with_separator(tmp_path):
    post = tmp_path / "post.md"
    post.write_text("---\ntitle: T\nslug: a/b\n---\n", encoding="utf-8")

    with pytest.raises(FrontMatterError, match="slug"):
        load_item(post)


def test_load_item_warns_on_missing_optional_fields(tmp_path, caplog):
    post = tmp_path / "post.md"
    post.write_text("---\ntitle: T\nslug: t\n---\n", encoding="utf-8")

    with caplog.at_level(logging.WARNING):
        item = load_item(post)

    assert item.description == ""
    assert item.home_image == ""
    assert "homeImage" in caplog.text
