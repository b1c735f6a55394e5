from __future__ import annotations

from publishing.rendering import (
    PythonMarkdownRenderer,
    highlight_code_blocks,
    render_book_html,
)


class _StaticRenderer:
    def __init__(self, html: str) -> None:
        self.html = html
        self.calls = []

    def render(self, text: str) -> str:
        self.calls.append(text)
        return self.html


def test_python_markdown_renders_tables_and_fences():
    html = PythonMarkdownRenderer().render(
        "# Hi\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\n```python\nx = 1\n```\n"
    )

    assert "<h1>Hi</h1>" in html
    assert "<table>" in html
    assert 'class="language-python"' in html


def test_highlight_uses_inline_styles_for_known_languages():
    html = '<pre><code class="language-python">print(1)\n</code></pre>'

    highlighted = highlight_code_blocks(html)

    assert 'style="' in highlighted
    assert "print" in highlighted
    assert highlighted.startswith("<pre><code")


def test_highlight_leaves_unknown_or_plain_blocks_alone():
    html = (
        '<pre><code class="language-nosuchlang">a &lt; b</code></pre>'
        "<pre><code>plain</code></pre>"
    )

    highlighted = highlight_code_blocks(html)

    assert 'class="language-nosuchlang"' in highlighted
    assert "a &lt; b" in highlighted
    assert "<code>plain</code>" in highlighted
    assert "style=" not in highlighted


def test_render_book_html_unescapes_after_rendering():
    renderer = _StaticRenderer("<p>&quot;quoted&quot; &amp; &#39;single&#39;</p>")

    html = render_book_html("ignored", renderer)

    assert renderer.calls == ["ignored"]
    assert html == "<p>\"quoted\" &amp; 'single'</p>"
