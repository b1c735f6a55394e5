from __future__ import annotations

from publishing.chapters import SIGNOFF_TITLE, signoff_chapter, split_chapters
from publishing.rendering import PythonMarkdownRenderer, render_book_html
from publishing.transforms import prepare_markdown


def test_split_on_each_top_level_heading():
    html = (
        "<p>intro</p>\n<h1>A</h1>\n<p>a</p>\n<h2>Sub</h2>\n"
        "<h1>B <em>x</em></h1>\n<p>b</p>"
    )

    chapters = split_chapters(html)

    assert [chapter.title for chapter in chapters] == ["A", "B x"]
    assert "<p>intro</p>" in chapters[0].data
    assert "<h2>Sub</h2>" in chapters[0].data
    assert chapters[1].data == "<p>b</p>"


def test_split_without_heading_uses_fallback_title():
    chapters = split_chapters("<p>only</p>", fallback_title="Post")

    assert len(chapters) == 1
    assert chapters[0].title == "Post"
    assert chapters[0].data == "<p>only</p>"


def test_split_empty_fragment_has_no_chapters():
    assert split_chapters("") == []


def test_split_keeps_text_escaped():
    chapters = split_chapters("<h1>T</h1>&lt;tag&gt; &amp; more")

    assert "&lt;tag&gt; &amp; more" in chapters[0].data


def test_signoff_includes_configured_contact_lines():
    chapter = signoff_chapter(
        "Demo",
        author="Test Author",
        site_url="https://example.com/",
        contact_email="me@example.com",
    )

    assert chapter.title == SIGNOFF_TITLE
    assert "get started with Demo!" in chapter.data
    assert '<a href="https://example.com/">example.com</a>' in chapter.data
    assert 'href="mailto:me@example.com"' in chapter.data
    assert "Test Author" in chapter.data


def test_signoff_omits_unset_lines():
    chapter = signoff_chapter("Demo")

    assert "<a " not in chapter.data
    assert chapter.data.endswith("<p>Many thanks,</p>")


def test_html_comments_are_not_emitted_as_text():
    html = "<p>Intro.</p>\n<!-- excerpt -->\n<h1>First</h1>\n<p>Text.</p>"

    chapters = split_chapters(html)

    assert chapters[0].title == "First"
    assert "excerpt" not in chapters[0].data
    assert "<p>Intro.</p>" in chapters[0].data
    assert "<p>Text.</p>" in chapters[0].data


def test_excerpt_marker_does_not_leak_into_rendered_chapters(tmp_path):
    body = "Intro.\n\n<!-- excerpt -->\n\n## First\n\nText.\n"
    prepared = prepare_markdown(body, tmp_path)
    html = render_book_html(prepared, PythonMarkdownRenderer())

    chapters = split_chapters(html)

    assert [chapter.title for chapter in chapters] == ["First"]
    assert "excerpt" not in chapters[0].data
